"""Per-repository policies, matched by org or org/repo filters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable, Sequence

from ghclosebot.config.models import RepoPolicyConfig
from ghclosebot.core.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepoFilter:
    """Allow/deny filter over "org" and "org/repo" identifiers.

    Patterns are shell-style globs compared case-insensitively. A deny entry
    always wins over an allow entry.
    """

    repos: tuple[str, ...]
    excluded_repos: tuple[str, ...] = ()

    def can_apply(self, org: str, repo: str) -> bool:
        candidates = (org.lower(), f"{org}/{repo}".lower())
        if _matches_any(self.excluded_repos, candidates):
            return False
        return _matches_any(self.repos, candidates)


@dataclass(frozen=True)
class RepoPolicy:
    repo_filter: RepoFilter
    need_issue_has_a_linked_pr: bool = False


class RepoPolicyStore:
    """Read-only policy list, looked up in declaration order."""

    def __init__(self, policies: Iterable[RepoPolicy]) -> None:
        self._policies: tuple[RepoPolicy, ...] = tuple(policies)

    @classmethod
    def from_config(cls, configs: Sequence[RepoPolicyConfig]) -> "RepoPolicyStore":
        store = cls(
            RepoPolicy(
                repo_filter=RepoFilter(
                    repos=tuple(item.repos),
                    excluded_repos=tuple(item.excluded_repos),
                ),
                need_issue_has_a_linked_pr=item.need_issue_has_a_linked_pr,
            )
            for item in configs
        )
        store.validate()
        return store

    def validate(self) -> None:
        if not self._policies:
            raise ConfigError("At least one repository policy must be configured")
        for index, policy in enumerate(self._policies):
            if not policy.repo_filter.repos:
                raise ConfigError(f"policies[{index}].repos must be a non-empty list")

    def lookup(self, org: str, repo: str) -> RepoPolicy | None:
        for policy in self._policies:
            if policy.repo_filter.can_apply(org, repo):
                return policy
        logger.debug("No policy matches repository", extra={"repo": f"{org}/{repo}"})
        return None


def _matches_any(patterns: Sequence[str], candidates: Sequence[str]) -> bool:
    return any(
        fnmatchcase(candidate, pattern.lower())
        for pattern in patterns
        for candidate in candidates
    )
