from __future__ import annotations

import logging
from dataclasses import dataclass

from ghclosebot.config.models import BotConfig
from ghclosebot.core.interfaces import PlatformClient
from ghclosebot.core.models import Action, Command, CommentEvent, NoOp
from ghclosebot.core.modes import MutationPolicy
from ghclosebot.engine.authorization import AuthorizationGate
from ghclosebot.engine.classifier import CommentClassifier
from ghclosebot.engine.executor import ActionExecutor
from ghclosebot.engine.policy import RepoPolicyStore
from ghclosebot.engine.state_machine import CloseReopenStateMachine


@dataclass(frozen=True)
class CommentHandler:
    classifier: CommentClassifier
    policies: RepoPolicyStore
    gate: AuthorizationGate
    machine: CloseReopenStateMachine
    executor: ActionExecutor
    bot_login: str | None = None

    @classmethod
    def from_config(cls, config: BotConfig, client: PlatformClient) -> "CommentHandler":
        policy = MutationPolicy(
            mode=config.runtime.mode,
            github_write_allowed=config.github.permissions.write,
        )
        return cls(
            classifier=CommentClassifier(config.states),
            policies=RepoPolicyStore.from_config(config.policies),
            gate=AuthorizationGate(client),
            machine=CloseReopenStateMachine(client, config.states, config.templates),
            executor=ActionExecutor(client, policy),
            bot_login=config.github.bot_login,
        )

    def handle(self, event: CommentEvent) -> Action:
        """Handle one comment event to completion and return the chosen action."""
        logger = logging.getLogger("CommentHandler")
        context = {"repo": event.full_name, "number": event.number, "commenter": event.commenter}

        if self.bot_login and event.commenter == self.bot_login:
            return NoOp(reason="own comment")

        command = self.classifier.classify(event)
        if command == Command.NONE:
            return NoOp(reason="no command")

        policy = self.policies.lookup(event.org, event.repo)
        if policy is None:
            logger.warning("No policy configured for repository; dropping event", extra=context)
            return NoOp(reason="no policy")

        auth = self.gate.authorize(event.org, event.repo, event.author, event.commenter)
        logger.info(
            "Classified comment command",
            extra={**context, "command": command.value, "allowed": auth.allowed, "checked": auth.checked},
        )

        action = self.machine.decide(event, command, auth, policy)
        self.executor.execute(event, action)
        return action
