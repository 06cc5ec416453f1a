"""Secondary classifier: advisory LLM verdicts that always fail open.

A verdict is a second opinion gathered before publishing.  When the backend
cannot be reached, or its reply is not a valid verdict, the classifier returns
an ``allow`` verdict instead of raising; :func:`fail_open` is the only place
those substitute verdicts are built.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Optional

from alumod.classifier.backends import (
    AnthropicBackend,
    ClassifierBackend,
    ClassifierUnavailable,
    OllamaBackend,
)
from alumod.classifier.models import AIModerationResult, PrePublishAdvice, SuggestedAction
from alumod.classifier.prompts import MODERATION_PROMPT
from alumod.config import Settings
from alumod.moderation.models import Severity

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    unavailable = "unavailable"
    unparseable = "unparseable"


_FALLBACKS: dict[FailureKind, tuple[int, str, str]] = {
    FailureKind.unavailable: (
        0,
        "AI moderation service unavailable",
        "Content moderation service is currently unavailable",
    ),
    FailureKind.unparseable: (
        50,
        "Unable to analyze content properly",
        "Content moderation service encountered an issue",
    ),
}


def fail_open(kind: FailureKind) -> AIModerationResult:
    """Return the ``allow`` verdict used in place of a failed classification."""
    confidence, concern, explanation = _FALLBACKS[kind]
    return AIModerationResult(
        is_appropriate=True,
        confidence=confidence,
        concerns=[concern],
        severity=Severity.low,
        explanation=explanation,
        suggested_action=SuggestedAction.allow,
    )


def parse_verdict(text: str) -> AIModerationResult:
    """Parse a model reply into a verdict.

    Tolerates markdown code fences around the JSON object.  Raises
    :class:`ValueError` (including pydantic's ``ValidationError``) when the
    reply is not a complete, valid verdict.
    """
    content = text.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else content[3:]
        if content.rstrip().endswith("```"):
            content = content.rstrip()[:-3]
        content = content.strip()

    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return AIModerationResult.model_validate(data)


class SecondaryClassifier:
    """Runs the moderation prompt through a backend and validates the reply."""

    def __init__(self, backend: ClassifierBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> ClassifierBackend:
        return self._backend

    async def classify(self, content: str) -> AIModerationResult:
        prompt = MODERATION_PROMPT.format(content=content)
        try:
            reply = await self._backend.generate(prompt)
        except ClassifierUnavailable as exc:
            logger.warning("AI content moderation unavailable (%s): %s", self._backend.name, exc)
            return fail_open(FailureKind.unavailable)

        try:
            return parse_verdict(reply)
        except ValueError as exc:
            logger.warning("Failed to parse AI moderation response %r: %s", reply[:500], exc)
            return fail_open(FailureKind.unparseable)

    async def advise(self, content: str) -> PrePublishAdvice:
        return PrePublishAdvice.from_result(await self.classify(content))


def build_classifier(settings: Optional[Settings] = None) -> SecondaryClassifier:
    """Create a classifier for the backend named in *settings*."""
    settings = settings or Settings.from_env()
    backend: ClassifierBackend
    if settings.classifier_backend == "anthropic":
        backend = AnthropicBackend(
            model=settings.anthropic_model,
            api_key=settings.anthropic_api_key or None,
            timeout=settings.classifier_timeout,
        )
    else:
        backend = OllamaBackend(
            base_url=settings.ollama_base_url,
            model=settings.ollama_model,
            timeout=settings.classifier_timeout,
        )
    return SecondaryClassifier(backend)
