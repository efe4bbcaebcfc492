"""Local topic and safety classifier.

Checks an entry in a fixed order and returns on the first hit:

1. length floor (spam)
2. harmful patterns, scanned on the raw text
3. off-topic patterns, scanned on the trimmed text
4. journaling-keyword fallback for longer text with no reflective vocabulary

Anything that survives all four is appropriate. The classifier is pure: the
same text and rules always produce the same verdict.
"""

from __future__ import annotations

import logging
from typing import Optional

from lumina.moderation.models import ModerationCategory, ModerationVerdict
from lumina.moderation.rules import ModerationRules, default_rules

log = logging.getLogger(__name__)

LAYER = "classifier"


def has_journaling_keywords(text: str, rules: Optional[ModerationRules] = None) -> bool:
    """True if any journaling keyword occurs in *text* (case-insensitive substring)."""
    rules = rules or default_rules()
    lowered = text.lower()
    return any(keyword in lowered for keyword in rules.journaling_keywords)


def count_sentences(text: str, rules: Optional[ModerationRules] = None) -> int:
    rules = rules or default_rules()
    return len([s for s in rules.sentence_split.split(text) if s.strip()])


def _reject(category: ModerationCategory, reason: str, rule: str) -> ModerationVerdict:
    return ModerationVerdict(
        appropriate=False,
        reason=reason,
        category=category,
        layer=LAYER,
        rule=rule,
    )


def moderate_content(text: str, rules: Optional[ModerationRules] = None) -> ModerationVerdict:
    """Classify *text* as appropriate, spam, harmful or off-topic."""
    rules = rules or default_rules()
    content = text or ""
    trimmed = content.strip()

    log.debug("Moderating content: %s", trimmed[:100])

    if len(trimmed) < rules.min_length:
        return _reject(ModerationCategory.spam, rules.message("too_short"), "min-length")

    rule = rules.harmful.first_match(content)
    if rule:
        log.debug("Blocked by harmful rule %s (%s)", rule.name, rule.group or "-")
        return _reject(rule.category, rule.message, rule.name)

    rule = rules.off_topic.first_match(trimmed)
    if rule:
        log.debug("Blocked by off-topic rule %s", rule.name)
        return _reject(rule.category, rule.message, rule.name)

    if (
        not has_journaling_keywords(content, rules)
        and len(trimmed) > rules.keyword_fallback_min_length
    ):
        if rules.wh_question.search(trimmed):
            return _reject(
                ModerationCategory.off_topic,
                rules.message("factual_question"),
                "factual-question-fallback",
            )

        if (
            count_sentences(trimmed, rules) <= rules.max_imperative_sentences
            and rules.imperative_start.search(trimmed)
        ):
            return _reject(
                ModerationCategory.off_topic,
                rules.message("request_not_entry"),
                "imperative-request-fallback",
            )

    return ModerationVerdict(appropriate=True, layer=LAYER)
