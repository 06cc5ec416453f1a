"""Secondary classifier: advisory LLM verdicts with a fail-open policy."""

from alumod.classifier.backends import (
    AnthropicBackend,
    ClassifierBackend,
    ClassifierUnavailable,
    OllamaBackend,
)
from alumod.classifier.classifier import SecondaryClassifier, build_classifier, fail_open
from alumod.classifier.models import AIModerationResult, PrePublishAdvice, SuggestedAction

__all__ = [
    "AnthropicBackend",
    "ClassifierBackend",
    "ClassifierUnavailable",
    "OllamaBackend",
    "SecondaryClassifier",
    "build_classifier",
    "fail_open",
    "AIModerationResult",
    "PrePublishAdvice",
    "SuggestedAction",
]
