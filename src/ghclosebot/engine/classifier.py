from __future__ import annotations

import re

from ghclosebot.config.models import StatesConfig
from ghclosebot.core.models import Command, CommentEvent, CommentKind

# Whole-line commands; any other text on the same line disqualifies the match.
CLOSE_PATTERN = re.compile(r"(?im)^/close\s*$")
REOPEN_PATTERN = re.compile(r"(?im)^/reopen\s*$")


class CommentClassifier:
    """Map a comment event onto the single command it is eligible for.

    The state reported by the event decides eligibility: only closed issues
    can be reopened and only open items can be closed, so at most one
    command applies.
    """

    def __init__(self, states: StatesConfig) -> None:
        self._states = states

    def classify(self, event: CommentEvent) -> Command:
        if (
            event.state == self._states.closed
            and event.kind == CommentKind.ISSUE
            and REOPEN_PATTERN.search(event.body)
        ):
            return Command.REOPEN
        if event.state == self._states.opened and CLOSE_PATTERN.search(event.body):
            return Command.CLOSE
        return Command.NONE
