from __future__ import annotations

import logging

from ghclosebot.core.interfaces import PlatformClient
from ghclosebot.core.models import Action, CommentEvent, NoOp, PostComment, UpdateState
from ghclosebot.core.modes import MutationPolicy, mutation_skip_reason


class ActionExecutor:
    """Thin executor for the action chosen for one event.

    Outcomes are logged only; a failed call is neither retried nor reported
    back to the commenter.
    """

    def __init__(self, client: PlatformClient, policy: MutationPolicy) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = client
        self._policy = policy

    def execute(self, event: CommentEvent, action: Action) -> bool:
        if isinstance(action, NoOp):
            self._log(event, "noop", result=f"skipped ({action.reason})")
            return True

        skip_reason = mutation_skip_reason(self._policy)
        if skip_reason:
            self._log(event, _describe(action), result=skip_reason)
            return True

        if isinstance(action, UpdateState):
            return self._update_state(event, action)
        if isinstance(action, PostComment):
            return self._post_comment(event, action.render())

        self._log(event, type(action).__name__, result="failed (unknown action)")
        return False

    def _update_state(self, event: CommentEvent, action: UpdateState) -> bool:
        if event.is_issue:
            ok = self._client.update_issue(event.org, event.repo, event.number, action.target)
        else:
            ok = self._client.update_pr(event.org, event.repo, event.number, action.target)
        self._log(event, _describe(action), result="applied" if ok else "failed")
        return ok

    def _post_comment(self, event: CommentEvent, text: str) -> bool:
        if event.is_issue:
            ok = self._client.create_issue_comment(event.org, event.repo, event.number, text)
        else:
            ok = self._client.create_pr_comment(event.org, event.repo, event.number, text)
        self._log(event, "comment", result="applied" if ok else "failed")
        return ok

    def _log(self, event: CommentEvent, action: str, result: str) -> None:
        self._logger.info(
            "Comment action execution",
            extra={
                "repo": event.full_name,
                "number": event.number,
                "kind": event.kind.value,
                "commenter": event.commenter,
                "action": action,
                "result": result,
            },
        )


def _describe(action: Action) -> str:
    if isinstance(action, UpdateState):
        return f"update state -> {action.target}"
    if isinstance(action, PostComment):
        return "comment"
    return type(action).__name__
