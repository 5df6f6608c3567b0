from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

COMMENTER_PLACEHOLDER = "{commenter}"
ACTION_PLACEHOLDER = "{action}"


class CommentKind(str, Enum):
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"


class Command(str, Enum):
    CLOSE = "close"
    REOPEN = "reopen"
    NONE = "none"


@dataclass(frozen=True)
class CommentEvent:
    org: str
    repo: str
    number: int
    kind: CommentKind
    body: str
    state: str
    commenter: str
    author: str

    @property
    def full_name(self) -> str:
        return f"{self.org}/{self.repo}"

    @property
    def is_issue(self) -> bool:
        return self.kind == CommentKind.ISSUE


@dataclass(frozen=True)
class AuthDecision:
    allowed: bool
    checked: bool  # False when the permission query itself failed


@dataclass(frozen=True)
class UpdateState:
    target: str


@dataclass(frozen=True)
class PostComment:
    kind: CommentKind
    template: str
    substitutions: dict[str, str] = field(default_factory=dict)

    def render(self) -> str:
        """Replace each placeholder token literally; no template engine."""
        text = self.template
        for token, value in self.substitutions.items():
            text = text.replace(token, value)
        return text


@dataclass(frozen=True)
class NoOp:
    reason: str


Action = Union[UpdateState, PostComment, NoOp]
