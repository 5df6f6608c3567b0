import logging

from ghclosebot.core.models import AuthDecision
from ghclosebot.engine.authorization import AuthorizationGate


def test_author_is_always_allowed_without_permission_query(fake_client) -> None:
    fake_client.permission = (False, False)
    gate = AuthorizationGate(fake_client)

    decision = gate.authorize("octo", "repo", author="alice", commenter="alice")

    assert decision == AuthDecision(allowed=True, checked=True)
    assert fake_client.named("check_permission") == []


def test_collaborator_allowed(fake_client) -> None:
    fake_client.permission = (True, True)

    decision = AuthorizationGate(fake_client).authorize("octo", "repo", author="bob", commenter="alice")

    assert decision == AuthDecision(allowed=True, checked=True)
    assert fake_client.named("check_permission") == [("check_permission", "octo", "repo", "alice")]


def test_explicit_denial(fake_client) -> None:
    fake_client.permission = (False, True)

    decision = AuthorizationGate(fake_client).authorize("octo", "repo", author="bob", commenter="alice")

    assert decision == AuthDecision(allowed=False, checked=True)


def test_failed_query_is_denial_and_logged(fake_client, caplog) -> None:
    fake_client.permission = (True, False)
    caplog.set_level(logging.WARNING)

    decision = AuthorizationGate(fake_client).authorize("octo", "repo", author="bob", commenter="alice")

    assert decision == AuthDecision(allowed=False, checked=False)
    assert any("Permission check failed" in record.message for record in caplog.records)
