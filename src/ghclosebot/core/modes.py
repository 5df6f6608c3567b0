from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RunMode(str, Enum):
    DRY_RUN = "dry-run"
    ACTIVE = "active"


@dataclass(frozen=True)
class MutationPolicy:
    mode: RunMode
    github_write_allowed: bool

    @property
    def allow_github_mutations(self) -> bool:
        if self.mode != RunMode.ACTIVE:
            return False
        return self.github_write_allowed


def mutation_skip_reason(policy: MutationPolicy) -> str | None:
    """Return the log result for a gated mutation, or None when it may run."""
    if policy.allow_github_mutations:
        return None
    if policy.mode == RunMode.DRY_RUN:
        return "skipped (dry-run)"
    return "skipped (write disabled)"
