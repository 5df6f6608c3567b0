"""Close/reopen decisions for a single comment event.

The machine only decides; executing the returned action is left to
:class:`ghclosebot.engine.executor.ActionExecutor`. The linked pull request
count is the one platform read it performs itself, because the close decision
for an issue depends on it.
"""

from __future__ import annotations

import logging

from ghclosebot.config.models import StatesConfig, TemplatesConfig
from ghclosebot.core.interfaces import PlatformClient
from ghclosebot.core.models import (
    ACTION_PLACEHOLDER,
    COMMENTER_PLACEHOLDER,
    Action,
    AuthDecision,
    Command,
    CommentEvent,
    CommentKind,
    NoOp,
    PostComment,
    UpdateState,
)
from ghclosebot.engine.policy import RepoPolicy


class CloseReopenStateMachine:
    def __init__(
        self,
        client: PlatformClient,
        states: StatesConfig,
        templates: TemplatesConfig,
    ) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._client = client
        self._states = states
        self._templates = templates

    def decide(
        self,
        event: CommentEvent,
        command: Command,
        auth: AuthDecision,
        policy: RepoPolicy,
    ) -> Action:
        if command == Command.REOPEN:
            return self._decide_reopen(event, auth)
        if command == Command.CLOSE:
            return self._decide_close(event, auth, policy)
        return NoOp(reason="no command")

    def _decide_reopen(self, event: CommentEvent, auth: AuthDecision) -> Action:
        if event.kind != CommentKind.ISSUE or event.state != self._states.closed:
            return NoOp(reason="not a closed issue")
        if not auth.allowed:
            return self._no_permission(event, Command.REOPEN)
        return UpdateState(target=self._states.opened)

    def _decide_close(self, event: CommentEvent, auth: AuthDecision, policy: RepoPolicy) -> Action:
        if event.state != self._states.opened:
            return NoOp(reason="not open")
        if not auth.allowed:
            return self._no_permission(event, Command.CLOSE)
        if event.is_issue and policy.need_issue_has_a_linked_pr:
            blocked = self._check_linked_pr(event)
            if blocked is not None:
                return blocked
        return UpdateState(target=self._states.closed)

    def _check_linked_pr(self, event: CommentEvent) -> PostComment | None:
        count, succeeded = self._client.get_issue_linked_pr_count(event.org, event.repo, event.number)
        if not succeeded:
            self._logger.warning(
                "Listing linked pull requests failed",
                extra={"repo": event.full_name, "number": event.number},
            )
            return self._comment(event, self._templates.list_linked_pr_failed)
        if count <= 0:
            self._logger.info(
                "Issue has no linked pull request",
                extra={"repo": event.full_name, "number": event.number},
            )
            return self._comment(event, self._templates.issue_needs_linked_pr)
        return None

    def _no_permission(self, event: CommentEvent, command: Command) -> PostComment:
        # A failed permission query is reported the same way as a denial.
        template = (
            self._templates.issue_no_permission
            if event.is_issue
            else self._templates.pr_no_permission
        )
        return self._comment(event, template, action=command.value)

    @staticmethod
    def _comment(event: CommentEvent, template: str, action: str | None = None) -> PostComment:
        substitutions = {COMMENTER_PLACEHOLDER: event.commenter}
        if action is not None:
            substitutions[ACTION_PLACEHOLDER] = action
        return PostComment(kind=event.kind, template=template, substitutions=substitutions)
