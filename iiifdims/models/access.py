"""Access check results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

AccessOutcome = Literal["allowed", "forbidden", "neutral"]


@dataclass(frozen=True)
class AccessResult:
    """Outcome of an entity access check.

    ``neutral`` means no rule granted access; callers treat it like
    ``forbidden``.
    """

    outcome: AccessOutcome
    reason: str = ""

    @classmethod
    def allowed(cls, reason: str = "") -> AccessResult:
        return cls("allowed", reason)

    @classmethod
    def forbidden(cls, reason: str = "") -> AccessResult:
        return cls("forbidden", reason)

    @classmethod
    def neutral(cls, reason: str = "") -> AccessResult:
        return cls("neutral", reason)

    def is_allowed(self) -> bool:
        return self.outcome == "allowed"
