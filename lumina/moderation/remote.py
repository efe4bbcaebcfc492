"""Remote moderation adapter backed by the OpenAI moderation endpoint.

This layer is best-effort. Any transport or provider failure is logged and
treated as "not flagged" so that journaling keeps working while the third
party is unavailable. The local layers never get this leniency.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional

import openai

from lumina.moderation.models import RemoteModerationResult
from lumina.moderation.rules import ModerationRules, default_rules

log = logging.getLogger(__name__)

DEFAULT_MODERATION_MODEL = "omni-moderation-latest"
DEFAULT_TIMEOUT = 10.0

# Raised when the provider answers with something we cannot read.
_MALFORMED_RESPONSE_ERRORS = (AttributeError, IndexError, KeyError, TypeError, ValueError)


def message_for_categories(
    categories: Mapping[str, bool],
    rules: Optional[ModerationRules] = None,
) -> str:
    """Pick the user-facing message for a flagged result.

    Only the first rule in priority order counts, even when several
    categories are flagged at once.
    """
    rules = rules or default_rules()
    for rule in rules.remote:
        if rule.applies(categories):
            return rule.message
    return rules.remote_fallback


def _category_flags(categories: Any) -> dict[str, bool]:
    if hasattr(categories, "model_dump"):
        categories = categories.model_dump(by_alias=True)
    return {str(k): bool(v) for k, v in dict(categories).items()}


class RemoteModerator:
    """Thin async wrapper around ``client.moderations.create``.

    Parameters
    ----------
    api_key : str | None
        OpenAI API key. Falls back to ``OPENAI_API_KEY`` when *None*.
    model : str | None
        Moderation model. Falls back to ``LUMINA_MODERATION_MODEL``.
    timeout : float | None
        Request timeout in seconds. Falls back to ``LUMINA_MODERATION_TIMEOUT``.
    client :
        A pre-built ``openai.AsyncOpenAI`` (or compatible) client. When given,
        no key is required.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        client: Any = None,
    ) -> None:
        self.model = model or os.environ.get("LUMINA_MODERATION_MODEL", DEFAULT_MODERATION_MODEL)
        self.timeout = timeout or float(os.environ.get("LUMINA_MODERATION_TIMEOUT", DEFAULT_TIMEOUT))

        if client is not None:
            self._client = client
        else:
            key = api_key or os.environ.get("OPENAI_API_KEY", "")
            self._client = (
                openai.AsyncOpenAI(api_key=key, timeout=self.timeout, max_retries=1)
                if key
                else None
            )

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def check(self, text: str) -> RemoteModerationResult:
        """Ask the provider whether *text* is flagged. Never raises."""
        if not self.configured:
            log.debug("Remote moderation not configured; skipping")
            return RemoteModerationResult(flagged=False, checked=False)

        try:
            response = await self._client.moderations.create(model=self.model, input=text)
            result = response.results[0]
            flagged = bool(result.flagged)
            categories = _category_flags(result.categories)
        except openai.OpenAIError as exc:
            log.warning("Remote moderation unavailable, allowing entry: %s", exc)
            return RemoteModerationResult(flagged=False, error=str(exc))
        except _MALFORMED_RESPONSE_ERRORS as exc:
            log.warning("Malformed remote moderation response, allowing entry: %r", exc)
            return RemoteModerationResult(flagged=False, error=repr(exc))
        except Exception as exc:
            log.warning("Remote moderation call failed, allowing entry: %r", exc, exc_info=True)
            return RemoteModerationResult(flagged=False, error=repr(exc))

        if flagged:
            log.info(
                "Remote moderation flagged entry: %s",
                ", ".join(sorted(k for k, v in categories.items() if v)) or "unspecified",
            )
        return RemoteModerationResult(flagged=flagged, categories=categories)
