"""Data models for the content moderation gate."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ModerationCategory(str, Enum):
    """Why an entry was rejected. ``illegal`` is reported as ``harmful``."""

    harmful = "harmful"
    illegal = "illegal"
    off_topic = "off-topic"
    spam = "spam"


@dataclass(frozen=True)
class ModerationVerdict:
    """Outcome of one moderation layer or of the whole gate."""

    appropriate: bool
    reason: Optional[str] = None
    category: Optional[ModerationCategory] = None
    layer: str = ""  # "spam" | "classifier" | "remote" | ""
    rule: str = ""  # name of the rule that fired, for diagnostics

    def to_dict(self) -> dict:
        return {
            "appropriate": self.appropriate,
            "reason": self.reason,
            "category": self.category.value if self.category else None,
        }


@dataclass(frozen=True)
class PatternRule:
    """A single ordered (pattern, category, message) rule."""

    name: str
    pattern: re.Pattern[str]
    category: ModerationCategory
    message: str
    group: str = ""

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass
class RemoteModerationResult:
    """Result of a call to the remote moderation endpoint."""

    flagged: bool = False
    categories: dict[str, bool] = field(default_factory=dict)
    checked: bool = True
    error: str = ""
