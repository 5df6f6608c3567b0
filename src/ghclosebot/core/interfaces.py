from __future__ import annotations

from typing import Protocol


class PlatformClient(Protocol):
    """Outbound calls the comment handler needs from the code-hosting platform.

    Every call reports only whether it succeeded; no structured error crosses
    this boundary.
    """

    def create_issue_comment(self, org: str, repo: str, number: int, text: str) -> bool:
        """Post a comment on an issue."""

    def create_pr_comment(self, org: str, repo: str, number: int, text: str) -> bool:
        """Post a comment on a pull request."""

    def check_permission(self, org: str, repo: str, username: str) -> tuple[bool, bool]:
        """Return (allowed, query_succeeded) for a user's write access."""

    def update_issue(self, org: str, repo: str, number: int, state: str) -> bool:
        """Move an issue to the given state."""

    def update_pr(self, org: str, repo: str, number: int, state: str) -> bool:
        """Move a pull request to the given state."""

    def get_issue_linked_pr_count(self, org: str, repo: str, number: int) -> tuple[int, bool]:
        """Return (linked_pr_count, query_succeeded) for an issue."""
