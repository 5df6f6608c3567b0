from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests run against this repo's source tree (src-layout), not an unrelated
# globally installed `ghclosebot` package.
_REPO_ROOT = Path(__file__).resolve().parent.parent
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))


class FakePlatformClient:
    """Records every outbound call; answers are configured per test."""

    def __init__(
        self,
        permission: tuple[bool, bool] = (True, True),
        linked_prs: tuple[int, bool] = (1, True),
        update_ok: bool = True,
        comment_ok: bool = True,
    ) -> None:
        self.permission = permission
        self.linked_prs = linked_prs
        self.update_ok = update_ok
        self.comment_ok = comment_ok
        self.calls: list[tuple] = []

    def create_issue_comment(self, org, repo, number, text):
        self.calls.append(("create_issue_comment", org, repo, number, text))
        return self.comment_ok

    def create_pr_comment(self, org, repo, number, text):
        self.calls.append(("create_pr_comment", org, repo, number, text))
        return self.comment_ok

    def check_permission(self, org, repo, username):
        self.calls.append(("check_permission", org, repo, username))
        return self.permission

    def update_issue(self, org, repo, number, state):
        self.calls.append(("update_issue", org, repo, number, state))
        return self.update_ok

    def update_pr(self, org, repo, number, state):
        self.calls.append(("update_pr", org, repo, number, state))
        return self.update_ok

    def get_issue_linked_pr_count(self, org, repo, number):
        self.calls.append(("get_issue_linked_pr_count", org, repo, number))
        return self.linked_prs

    def close(self) -> None:
        self.calls.append(("close",))

    def named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_client() -> FakePlatformClient:
    return FakePlatformClient()


@pytest.fixture
def config_payload() -> dict:
    return {
        "runtime": {"mode": "active", "log_level": "INFO"},
        "github": {"token": "t", "api_base": "https://api.github.com", "bot_login": "close-bot"},
        "states": {"opened": "opened", "closed": "closed"},
        "policies": [
            {"repos": ["octo/strict"], "need_issue_has_a_linked_pr": True},
            {"repos": ["octo"], "excluded_repos": ["octo/private"]},
        ],
    }
