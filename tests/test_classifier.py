"""Tests for the secondary classifier and its backends."""

import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from alumod.classifier import (
    AnthropicBackend,
    ClassifierUnavailable,
    OllamaBackend,
    PrePublishAdvice,
    SecondaryClassifier,
    SuggestedAction,
    build_classifier,
)
from alumod.classifier.classifier import FailureKind, fail_open, parse_verdict
from alumod.classifier.models import AIModerationResult
from alumod.config import Settings
from alumod.moderation.models import Severity

VERDICT = {
    "isAppropriate": False,
    "confidence": 88,
    "concerns": ["personal attack"],
    "severity": "medium",
    "explanation": "Insults another member.",
    "suggestedAction": "warn",
}


def _ollama(handler):
    return OllamaBackend(transport=httpx.MockTransport(handler))


def _replying(text):
    def handler(request):
        return httpx.Response(200, json={"model": "llama3.2:3b", "response": text, "done": True})

    return handler


def _classify(backend, content="some post"):
    return asyncio.run(SecondaryClassifier(backend).classify(content))


# --- Verdict parsing ---


def test_valid_reply():
    result = _classify(_ollama(_replying(json.dumps(VERDICT))))
    assert result.is_appropriate is False
    assert result.confidence == 88
    assert result.concerns == ["personal attack"]
    assert result.severity == Severity.medium
    assert result.suggested_action == SuggestedAction.warn


def test_fenced_reply():
    text = "```json\n" + json.dumps(VERDICT, indent=2) + "\n```"
    result = _classify(_ollama(_replying(text)))
    assert result.suggested_action == SuggestedAction.warn
    assert result.confidence == 88


def test_float_confidence_is_rounded():
    result = parse_verdict(json.dumps(dict(VERDICT, confidence=72.6)))
    assert result.confidence == 73


@pytest.mark.parametrize(
    "overrides",
    [
        {"confidence": True},
        {"confidence": "90"},
        {"confidence": 101},
        {"confidence": -1},
        {"severity": "extreme"},
        {"suggestedAction": "delete"},
        {"isAppropriate": "yes"},
        {"concerns": "spam"},
    ],
)
def test_invalid_fields_are_rejected(overrides):
    with pytest.raises(ValueError):
        parse_verdict(json.dumps(dict(VERDICT, **overrides)))


def test_missing_field_is_rejected():
    data = dict(VERDICT)
    del data["suggestedAction"]
    with pytest.raises(ValueError):
        parse_verdict(json.dumps(data))


def test_non_object_is_rejected():
    with pytest.raises(ValueError):
        parse_verdict("[1, 2, 3]")


# --- Fail-open behaviour ---


def _assert_fallback(result, confidence):
    assert result.is_appropriate is True
    assert result.suggested_action == SuggestedAction.allow
    assert result.severity == Severity.low
    assert result.confidence == confidence


def test_unparseable_reply_falls_back_to_50():
    _assert_fallback(_classify(_ollama(_replying("I think this is fine."))), 50)


def test_incomplete_verdict_falls_back_to_50():
    data = dict(VERDICT)
    del data["suggestedAction"]
    result = _classify(_ollama(_replying(json.dumps(data))))
    _assert_fallback(result, 50)
    assert result.concerns == ["Unable to analyze content properly"]


def test_bad_severity_falls_back_to_50():
    _assert_fallback(_classify(_ollama(_replying(json.dumps(dict(VERDICT, severity="x"))))), 50)


def test_connection_error_falls_back_to_0():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = _classify(_ollama(handler))
    _assert_fallback(result, 0)
    assert result.concerns == ["AI moderation service unavailable"]
    assert result.explanation == "Content moderation service is currently unavailable"


def test_http_error_falls_back_to_0():
    result = _classify(_ollama(lambda request: httpx.Response(500, text="model not loaded")))
    _assert_fallback(result, 0)


def test_non_json_envelope_falls_back_to_0():
    result = _classify(_ollama(lambda request: httpx.Response(200, text="<html>oops</html>")))
    _assert_fallback(result, 0)


def test_envelope_without_response_falls_back_to_0():
    result = _classify(_ollama(lambda request: httpx.Response(200, json={"done": True})))
    _assert_fallback(result, 0)


def test_unconfigured_anthropic_falls_back_to_0(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    backend = AnthropicBackend()
    assert not backend.configured
    with pytest.raises(ClassifierUnavailable):
        asyncio.run(backend.generate("prompt"))
    _assert_fallback(_classify(backend), 0)


class FakeMessages:
    def __init__(self, *blocks):
        self.blocks = blocks

    async def create(self, **kwargs):
        return SimpleNamespace(
            content=list(self.blocks),
            usage=SimpleNamespace(input_tokens=10, output_tokens=5),
        )


def _anthropic_returning(*blocks):
    backend = AnthropicBackend(api_key="sk-test")
    backend._client = SimpleNamespace(messages=FakeMessages(*blocks))
    return backend


def test_anthropic_text_blocks_are_joined():
    half = len(json.dumps(VERDICT)) // 2
    backend = _anthropic_returning(
        SimpleNamespace(type="text", text=json.dumps(VERDICT)[:half]),
        SimpleNamespace(type="text", text=json.dumps(VERDICT)[half:]),
    )
    assert _classify(backend).suggested_action == SuggestedAction.warn


def test_anthropic_without_text_block_falls_back_to_0():
    backend = _anthropic_returning(SimpleNamespace(type="tool_use", id="t1", name="x", input={}))
    with pytest.raises(ClassifierUnavailable):
        asyncio.run(backend.generate("prompt"))
    _assert_fallback(_classify(backend), 0)


def test_fail_open_values():
    assert fail_open(FailureKind.unavailable).confidence == 0
    assert fail_open(FailureKind.unparseable).confidence == 50
    assert fail_open(FailureKind.unparseable).explanation == (
        "Content moderation service encountered an issue"
    )


# --- Request shape ---


def test_ollama_request_payload():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": json.dumps(VERDICT)})

    backend = OllamaBackend(
        base_url="http://ollama.internal:11434/",
        model="llama3.2:3b",
        transport=httpx.MockTransport(handler),
    )
    _classify(backend, content="Check out my startup!")

    assert seen["url"] == "http://ollama.internal:11434/api/generate"
    body = seen["body"]
    assert body["model"] == "llama3.2:3b"
    assert body["stream"] is False
    assert body["options"]["temperature"] == 0.1
    assert body["options"]["top_p"] == 0.9
    assert 'Content to analyze: "Check out my startup!"' in body["prompt"]
    assert '"suggestedAction": "allow/warn/block"' in body["prompt"]


# --- Advice ---


@pytest.mark.parametrize(
    "action, block, warn, publish",
    [
        ("allow", False, False, True),
        ("warn", False, True, True),
        ("block", True, False, False),
    ],
)
def test_advice_mapping(action, block, warn, publish):
    result = AIModerationResult.model_validate(dict(VERDICT, suggestedAction=action))
    advice = PrePublishAdvice.from_result(result)
    assert (advice.should_block, advice.should_warn, advice.can_publish) == (block, warn, publish)


def test_advise_through_classifier():
    classifier = SecondaryClassifier(_ollama(_replying(json.dumps(dict(VERDICT, suggestedAction="block")))))
    advice = asyncio.run(classifier.advise("some post"))
    assert advice.should_block
    assert not advice.can_publish


def test_advise_fails_open():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    advice = asyncio.run(SecondaryClassifier(_ollama(handler)).advise("post"))
    assert advice.can_publish
    assert not advice.should_block


# --- Factory ---


def test_build_classifier_defaults_to_ollama():
    classifier = build_classifier(Settings(ollama_model="phi3", classifier_timeout=5.0))
    backend = classifier.backend
    assert isinstance(backend, OllamaBackend)
    assert backend.model == "phi3"
    assert backend.timeout == 5.0


def test_build_classifier_anthropic():
    settings = Settings(classifier_backend="anthropic", anthropic_api_key="sk-test")
    backend = build_classifier(settings).backend
    assert isinstance(backend, AnthropicBackend)
    assert backend.configured
