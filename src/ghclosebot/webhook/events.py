"""Turn GitHub webhook deliveries into comment events."""

from __future__ import annotations

import hashlib
import hmac
from typing import Any

from ghclosebot.core.errors import WebhookError
from ghclosebot.core.models import CommentEvent, CommentKind

COMMENT_EVENT = "issue_comment"


def verify_signature(secret: str | None, body: bytes, signature_header: str | None) -> bool:
    """Check ``X-Hub-Signature-256``. Without a configured secret every delivery passes."""
    if not secret:
        return True
    if not signature_header or not signature_header.startswith("sha256="):
        return False
    expected = "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature_header)


def parse_comment_event(event_name: str, payload: Any) -> CommentEvent | None:
    """Return a CommentEvent for newly created issue/PR comments, else None."""
    if event_name != COMMENT_EVENT:
        return None
    if not isinstance(payload, dict):
        raise WebhookError("Webhook payload must be a JSON object")
    if payload.get("action") != "created":
        return None

    issue = _require_dict(payload, "issue")
    comment = _require_dict(payload, "comment")
    repository = _require_dict(payload, "repository")
    org = _login(repository, "owner")
    repo = repository.get("name")
    number = issue.get("number")
    commenter = _login(comment, "user")
    author = _login(issue, "user")
    if not isinstance(repo, str) or not org or not repo or not commenter or not author:
        raise WebhookError("Webhook payload is missing repository or user fields")
    if not isinstance(number, int) or isinstance(number, bool):
        raise WebhookError("Webhook payload has no valid issue number")

    kind = CommentKind.PULL_REQUEST if issue.get("pull_request") else CommentKind.ISSUE
    return CommentEvent(
        org=org,
        repo=repo,
        number=number,
        kind=kind,
        body=_text(comment, "body"),
        state=_text(issue, "state"),
        commenter=commenter,
        author=author,
    )


def _require_dict(payload: dict, key: str) -> dict:
    value = payload.get(key)
    if not isinstance(value, dict):
        raise WebhookError(f"Webhook payload has no '{key}' object")
    return value


def _login(container: dict, key: str) -> str | None:
    account = container.get(key)
    if account is None:
        return None
    if not isinstance(account, dict):
        raise WebhookError(f"Webhook payload has a malformed '{key}' object")
    login = account.get("login")
    return login if isinstance(login, str) else None


def _text(container: dict, key: str) -> str:
    value = container.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise WebhookError(f"Webhook payload field '{key}' must be a string")
    return value
