import logging

import pytest

from ghclosebot.config.models import RepoPolicyConfig
from ghclosebot.core.errors import ConfigError
from ghclosebot.engine.policy import RepoFilter, RepoPolicy, RepoPolicyStore


def _policy(*repos: str, excluded: tuple[str, ...] = (), linked: bool = False) -> RepoPolicy:
    return RepoPolicy(
        repo_filter=RepoFilter(repos=repos, excluded_repos=excluded),
        need_issue_has_a_linked_pr=linked,
    )


def test_lookup_returns_first_match_in_declaration_order() -> None:
    first = _policy("octo/strict", linked=True)
    second = _policy("octo")
    store = RepoPolicyStore([first, second])

    assert store.lookup("octo", "strict") is first
    assert store.lookup("octo", "other") is second


def test_lookup_returns_none_without_match() -> None:
    store = RepoPolicyStore([_policy("octo")])

    assert store.lookup("someone", "else") is None


def test_lookup_on_empty_store() -> None:
    assert RepoPolicyStore([]).lookup("octo", "repo") is None


def test_excluded_repos_win_over_org_match(caplog) -> None:
    caplog.set_level(logging.DEBUG)
    store = RepoPolicyStore([_policy("octo", excluded=("octo/private",))])

    assert store.lookup("octo", "private") is None
    assert store.lookup("octo", "public") is not None


def test_glob_patterns_and_case() -> None:
    store = RepoPolicyStore([_policy("Octo/docs-*")])

    assert store.lookup("octo", "docs-site") is not None
    assert store.lookup("octo", "api") is None


def test_validate_accepts_non_empty_store() -> None:
    RepoPolicyStore([_policy("octo")]).validate()


def test_validate_rejects_empty_store() -> None:
    with pytest.raises(ConfigError):
        RepoPolicyStore([]).validate()


def test_validate_rejects_entry_without_repos() -> None:
    with pytest.raises(ConfigError, match=r"policies\[1\]"):
        RepoPolicyStore([_policy("octo"), _policy()]).validate()


def test_from_config_keeps_order() -> None:
    store = RepoPolicyStore.from_config(
        [
            RepoPolicyConfig(repos=["octo/strict"], need_issue_has_a_linked_pr=True),
            RepoPolicyConfig(repos=["octo"]),
        ]
    )

    assert store.lookup("octo", "strict").need_issue_has_a_linked_pr is True
    assert store.lookup("octo", "loose").need_issue_has_a_linked_pr is False
