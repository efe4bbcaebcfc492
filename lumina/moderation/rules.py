"""Moderation rule tables -- ordered, externalized pattern data.

The default tables ship as ``rules.yaml`` next to this module. Each table is
evaluated top to bottom and the first matching rule wins, so reordering the
YAML changes behavior. A replacement file can be loaded with
:func:`load_rules` without touching any moderation code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

import yaml

from lumina.moderation.models import ModerationCategory, PatternRule

DEFAULT_RULES_PATH = Path(__file__).with_name("rules.yaml")

_REQUIRED_MESSAGES = (
    "too_short",
    "spam",
    "harmful",
    "off_topic",
    "factual_question",
    "request_not_entry",
)


@dataclass(frozen=True)
class RuleTable:
    """An ordered list of pattern rules. First match wins."""

    name: str
    rules: tuple[PatternRule, ...] = ()

    def first_match(self, text: str) -> Optional[PatternRule]:
        for rule in self.rules:
            if rule.matches(text):
                return rule
        return None

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class RemoteMessageRule:
    """Maps a group of remote moderation category flags to one message."""

    name: str
    categories: tuple[str, ...]
    message: str

    def applies(self, flags: Mapping[str, bool]) -> bool:
        return any(flags.get(c) for c in self.categories)


@dataclass(frozen=True)
class ModerationRules:
    """All rule data consumed by the local classifier and remote adapter."""

    name: str
    version: str
    harmful: RuleTable
    off_topic: RuleTable
    journaling_keywords: tuple[str, ...]
    wh_question: re.Pattern[str]
    imperative_start: re.Pattern[str]
    sentence_split: re.Pattern[str]
    messages: dict[str, str] = field(default_factory=dict)
    remote: tuple[RemoteMessageRule, ...] = ()
    remote_fallback: str = ""
    min_length: int = 10
    keyword_fallback_min_length: int = 30
    max_imperative_sentences: int = 2

    def message(self, key: str) -> str:
        return self.messages[key]


def _compile(pattern: str, where: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, re.IGNORECASE | re.ASCII)
    except re.error as exc:
        raise ValueError(f"Invalid pattern in {where}: {pattern!r} ({exc})") from exc


def _build_table(
    name: str,
    entries: list[dict],
    category: ModerationCategory,
    message: str,
) -> RuleTable:
    rules = []
    for i, entry in enumerate(entries):
        rule_name = entry.get("name") or f"{name}-{i + 1}"
        rules.append(
            PatternRule(
                name=rule_name,
                pattern=_compile(entry["pattern"], f"{name}/{rule_name}"),
                category=ModerationCategory(entry.get("category", category.value)),
                message=entry.get("message", message),
                group=entry.get("group", ""),
            )
        )
    return RuleTable(name=name, rules=tuple(rules))


def parse_rules(data: dict) -> ModerationRules:
    """Build :class:`ModerationRules` from already-parsed YAML data."""
    messages = {k: " ".join(str(v).split()) for k, v in (data.get("messages") or {}).items()}
    missing = [k for k in _REQUIRED_MESSAGES if k not in messages]
    if missing:
        raise ValueError(f"Rule file is missing messages: {', '.join(missing)}")

    harmful = _build_table(
        "harmful", data.get("harmful", []), ModerationCategory.harmful, messages["harmful"]
    )
    off_topic = _build_table(
        "off_topic", data.get("off_topic", []), ModerationCategory.off_topic, messages["off_topic"]
    )

    remote = tuple(
        RemoteMessageRule(
            name=r["name"],
            categories=tuple(r.get("categories", [])),
            message=" ".join(r["message"].split()),
        )
        for r in data.get("remote", [])
    )

    return ModerationRules(
        name=data.get("name", "unnamed"),
        version=str(data.get("version", "1.0.0")),
        harmful=harmful,
        off_topic=off_topic,
        journaling_keywords=tuple(k.lower() for k in data.get("journaling_keywords", [])),
        wh_question=_compile(data["wh_question"], "wh_question"),
        imperative_start=_compile(data["imperative_start"], "imperative_start"),
        sentence_split=_compile(data.get("sentence_split", r"[.!?]+"), "sentence_split"),
        messages=messages,
        remote=remote,
        remote_fallback=" ".join(str(data.get("remote_fallback", messages["harmful"])).split()),
        min_length=int(data.get("min_length", 10)),
        keyword_fallback_min_length=int(data.get("keyword_fallback_min_length", 30)),
        max_imperative_sentences=int(data.get("max_imperative_sentences", 2)),
    )


def load_rules(path: str | Path | None = None) -> ModerationRules:
    """Load moderation rules from a YAML file (defaults to the bundled one)."""
    with open(path or DEFAULT_RULES_PATH, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return parse_rules(data)


@lru_cache(maxsize=1)
def default_rules() -> ModerationRules:
    """Return the bundled rule set, parsed once per process."""
    return load_rules()
