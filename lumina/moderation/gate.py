"""Moderation gate -- sequences the three layers with strict precedence.

spam detector -> local classifier -> remote moderation. Each layer may end
the evaluation; later layers are never consulted once an earlier one rejects.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from lumina.moderation.classifier import moderate_content
from lumina.moderation.models import ModerationCategory, ModerationVerdict
from lumina.moderation.remote import RemoteModerator, message_for_categories
from lumina.moderation.rules import ModerationRules, default_rules
from lumina.moderation.spam import is_likely_spam

log = logging.getLogger(__name__)

SpamCheck = Callable[[str], bool]
Classifier = Callable[..., ModerationVerdict]


class ModerationGate:
    """Run every entry through spam, classifier and remote checks.

    The gate holds no per-evaluation state, so one instance can be shared
    across concurrent requests.
    """

    def __init__(
        self,
        remote: Optional[RemoteModerator] = None,
        rules: Optional[ModerationRules] = None,
        spam_check: SpamCheck = is_likely_spam,
        classifier: Classifier = moderate_content,
    ) -> None:
        self.remote = remote
        self.rules = rules or default_rules()
        self._spam_check = spam_check
        self._classifier = classifier

    def evaluate_local(self, text: str) -> ModerationVerdict:
        """Run the two local layers only. Synchronous and side-effect free."""
        if self._spam_check(text):
            return ModerationVerdict(
                appropriate=False,
                reason=self.rules.message("spam"),
                category=ModerationCategory.spam,
                layer="spam",
                rule="likely-spam",
            )

        verdict = self._classifier(text, self.rules)
        if not verdict.appropriate:
            return verdict

        return ModerationVerdict(appropriate=True)

    async def evaluate(self, text: str) -> ModerationVerdict:
        """Return the final verdict for *text*."""
        verdict = self.evaluate_local(text)
        if not verdict.appropriate:
            log.info(
                "Entry rejected by %s layer: category=%s rule=%s",
                verdict.layer,
                verdict.category.value if verdict.category else "-",
                verdict.rule,
            )
            return verdict

        if self.remote is None:
            return verdict

        result = await self.remote.check(text)
        if result.flagged:
            verdict = ModerationVerdict(
                appropriate=False,
                reason=message_for_categories(result.categories, self.rules),
                category=ModerationCategory.harmful,
                layer="remote",
                rule="remote-flagged",
            )
            log.info("Entry rejected by remote layer")
            return verdict

        return ModerationVerdict(appropriate=True)
