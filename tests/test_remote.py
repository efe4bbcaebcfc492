"""Tests for the remote moderation adapter."""

import asyncio
from types import SimpleNamespace

import openai

from lumina.moderation.remote import RemoteModerator, message_for_categories


class _FakeModerations:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls: list[str] = []

    async def create(self, model, input):
        self.calls.append(input)
        if self.error is not None:
            raise self.error
        return self.response


class _FakeOpenAI:
    def __init__(self, response=None, error=None):
        self.moderations = _FakeModerations(response=response, error=error)


def _response(flagged: bool, **categories) -> SimpleNamespace:
    return SimpleNamespace(results=[SimpleNamespace(flagged=flagged, categories=categories)])


class _Categories:
    """Stands in for the SDK's pydantic categories model."""

    def __init__(self, **flags):
        self._flags = flags

    def model_dump(self, by_alias=False):
        assert by_alias
        return dict(self._flags)


# --- Category priority ---


def test_violence_wins_over_hate():
    msg = message_for_categories({"hate": True, "violence": True})
    assert "violent content" in msg


def test_graphic_violence_maps_to_violence():
    msg = message_for_categories({"violence/graphic": True})
    assert "violent content" in msg


def test_self_harm_mentions_hotline():
    msg = message_for_categories({"self-harm": True, "hate": True})
    assert "988" in msg


def test_hate_message():
    msg = message_for_categories({"hate": True, "violence": False})
    assert "respectful" in msg


def test_other_flags_use_generic_message():
    msg = message_for_categories({"harassment": True})
    assert "flagged as potentially harmful" in msg


# --- Adapter ---


def test_flagged_result():
    fake = _FakeOpenAI(response=_response(True, violence=True, hate=False))
    moderator = RemoteModerator(client=fake)

    result = asyncio.run(moderator.check("some text"))
    assert result.flagged
    assert result.checked
    assert result.categories == {"violence": True, "hate": False}
    assert fake.moderations.calls == ["some text"]


def test_pydantic_style_categories():
    response = SimpleNamespace(
        results=[SimpleNamespace(flagged=True, categories=_Categories(**{"self-harm": True}))]
    )
    result = asyncio.run(RemoteModerator(client=_FakeOpenAI(response=response)).check("x"))
    assert result.categories == {"self-harm": True}


def test_provider_error_fails_open():
    fake = _FakeOpenAI(error=openai.OpenAIError("connection refused"))
    result = asyncio.run(RemoteModerator(client=fake).check("some text"))
    assert not result.flagged
    assert "connection refused" in result.error


def test_malformed_response_fails_open():
    fake = _FakeOpenAI(response=SimpleNamespace(results=[]))
    result = asyncio.run(RemoteModerator(client=fake).check("some text"))
    assert not result.flagged
    assert result.error


def test_transport_error_fails_open():
    fake = _FakeOpenAI(error=ConnectionError("connection reset by peer"))
    result = asyncio.run(RemoteModerator(client=fake).check("some text"))
    assert not result.flagged
    assert result.checked
    assert "connection reset by peer" in result.error


def test_not_configured_skips(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    moderator = RemoteModerator()
    assert not moderator.configured

    result = asyncio.run(moderator.check("some text"))
    assert not result.flagged
    assert not result.checked


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("LUMINA_MODERATION_MODEL", "text-moderation-stable")
    monkeypatch.setenv("LUMINA_MODERATION_TIMEOUT", "2.5")
    moderator = RemoteModerator(client=_FakeOpenAI())
    assert moderator.model == "text-moderation-stable"
    assert moderator.timeout == 2.5
