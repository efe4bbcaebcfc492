"""Content moderation gate for journal entries."""

from lumina.moderation.classifier import moderate_content
from lumina.moderation.gate import ModerationGate
from lumina.moderation.models import (
    ModerationCategory,
    ModerationVerdict,
    PatternRule,
    RemoteModerationResult,
)
from lumina.moderation.remote import RemoteModerator, message_for_categories
from lumina.moderation.rules import ModerationRules, RuleTable, default_rules, load_rules
from lumina.moderation.spam import is_likely_spam

__all__ = [
    "ModerationCategory",
    "ModerationGate",
    "ModerationRules",
    "ModerationVerdict",
    "PatternRule",
    "RemoteModerationResult",
    "RemoteModerator",
    "RuleTable",
    "default_rules",
    "is_likely_spam",
    "load_rules",
    "message_for_categories",
    "moderate_content",
]
