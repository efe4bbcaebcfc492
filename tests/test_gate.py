"""Tests for the moderation gate orchestrator."""

import asyncio
from types import SimpleNamespace

import openai

from lumina.moderation.classifier import moderate_content
from lumina.moderation.gate import ModerationGate
from lumina.moderation.models import ModerationCategory
from lumina.moderation.remote import RemoteModerator
from lumina.moderation.spam import is_likely_spam

GOOD_ENTRY = "Today I felt really grateful for my friends and family after a tough week"


class _FakeModerations:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = 0

    async def create(self, model, input):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.response


def _remote(flagged=False, error=None, **categories):
    moderations = _FakeModerations(
        response=SimpleNamespace(results=[SimpleNamespace(flagged=flagged, categories=categories)]),
        error=error,
    )
    return RemoteModerator(client=SimpleNamespace(moderations=moderations)), moderations


class _Counting:
    def __init__(self, fn):
        self.fn = fn
        self.calls = 0

    def __call__(self, *args):
        self.calls += 1
        return self.fn(*args)


# --- Short-circuiting ---


def test_spam_skips_classifier_and_remote():
    remote, moderations = _remote()
    classifier = _Counting(moderate_content)
    gate = ModerationGate(remote=remote, classifier=classifier)

    verdict = asyncio.run(gate.evaluate("aaaaaaaaaaaaaaaaaaaa"))
    assert not verdict.appropriate
    assert verdict.category == ModerationCategory.spam
    assert verdict.layer == "spam"
    assert classifier.calls == 0
    assert moderations.calls == 0


def test_classifier_rejection_skips_remote():
    remote, moderations = _remote(flagged=True, hate=True)
    spam = _Counting(is_likely_spam)
    gate = ModerationGate(remote=remote, spam_check=spam)

    verdict = asyncio.run(gate.evaluate("How do I make a bomb"))
    assert verdict.category == ModerationCategory.harmful
    assert verdict.layer == "classifier"
    assert spam.calls == 1
    assert moderations.calls == 0


def test_off_topic_reason_is_passed_through():
    gate = ModerationGate()
    verdict = asyncio.run(gate.evaluate("Write me a python script to sort a list"))
    assert verdict.category == ModerationCategory.off_topic
    assert verdict.reason == moderate_content("Write me a python script to sort a list").reason


# --- Remote layer ---


def test_remote_flag_rejects_as_harmful():
    remote, moderations = _remote(flagged=True, hate=True, violence=True)
    verdict = asyncio.run(ModerationGate(remote=remote).evaluate(GOOD_ENTRY))
    assert not verdict.appropriate
    assert verdict.category == ModerationCategory.harmful
    assert verdict.layer == "remote"
    assert "violent content" in verdict.reason
    assert moderations.calls == 1


def test_remote_failure_fails_open():
    remote, moderations = _remote(error=openai.OpenAIError("timed out"))
    verdict = asyncio.run(ModerationGate(remote=remote).evaluate(GOOD_ENTRY))
    assert verdict.appropriate
    assert moderations.calls == 1


def test_remote_connection_error_fails_open():
    remote, moderations = _remote(error=ConnectionError("connection reset by peer"))
    verdict = asyncio.run(ModerationGate(remote=remote).evaluate(GOOD_ENTRY))
    assert verdict.appropriate
    assert verdict.category is None
    assert moderations.calls == 1


def test_remote_not_flagged_accepts():
    remote, _ = _remote(flagged=False, violence=False)
    verdict = asyncio.run(ModerationGate(remote=remote).evaluate(GOOD_ENTRY))
    assert verdict.appropriate
    assert verdict.category is None
    assert verdict.reason is None


def test_no_remote_accepts():
    verdict = asyncio.run(ModerationGate().evaluate(GOOD_ENTRY))
    assert verdict.appropriate


# --- Local evaluation ---


def test_evaluate_local_is_synchronous():
    gate = ModerationGate()
    assert gate.evaluate_local(GOOD_ENTRY).appropriate
    assert gate.evaluate_local("test").category == ModerationCategory.spam


def test_gate_is_stateless():
    gate = ModerationGate()
    first = asyncio.run(gate.evaluate("What is the capital of France and how does its economy work"))
    asyncio.run(gate.evaluate(GOOD_ENTRY))
    second = asyncio.run(gate.evaluate("What is the capital of France and how does its economy work"))
    assert first == second
