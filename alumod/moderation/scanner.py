"""Lexical scanner: keyword screening of user-submitted text.

Terms are matched as plain case-insensitive substrings, so a term embedded in
a longer word still counts (``hell`` matches ``hello``).  Every term found is
reported, in lexicon order.
"""

from __future__ import annotations

from typing import Iterable, Optional

from alumod.moderation.models import ModerationResult, Severity

# ---------------------------------------------------------------------------
# Lexicon
# ---------------------------------------------------------------------------

INAPPROPRIATE_TERMS: tuple[str, ...] = (
    # Hate speech and discrimination
    "hate", "racist", "bigot", "nazi", "terrorism", "terrorist",
    # Profanity (mild)
    "damn", "hell", "stupid", "idiot", "moron",
    # Violence and threats
    "kill", "murder", "violence", "threat", "harm", "hurt",
    # Harassment
    "harass", "bully", "stalk", "abuse", "attack",
    # Spam and deception
    "spam", "scam", "fraud", "fake", "lie", "lies",
)

SEVERE_TERMS: frozenset[str] = frozenset(
    {"terrorist", "nazi", "kill", "murder", "threat", "harm"}
)

# Number of matches at which a non-severe scan becomes medium.
MEDIUM_MATCH_THRESHOLD = 3
CONFIDENCE_PER_MATCH = 0.3


class LexicalScanner:
    """Stateless keyword scanner over a fixed lexicon."""

    def __init__(
        self,
        terms: Optional[Iterable[str]] = None,
        severe_terms: Optional[Iterable[str]] = None,
    ) -> None:
        self._terms = tuple(t.lower() for t in (terms if terms is not None else INAPPROPRIATE_TERMS))
        severe = severe_terms if severe_terms is not None else SEVERE_TERMS
        self._severe = frozenset(t.lower() for t in severe)

    @property
    def terms(self) -> tuple[str, ...]:
        return self._terms

    @property
    def severe_terms(self) -> frozenset[str]:
        return self._severe

    def is_severe(self, term: str) -> bool:
        return term.lower() in self._severe

    def scan(self, content: str) -> ModerationResult:
        """Scan *content* and return the scored match set."""
        lowered = content.lower()
        detected = tuple(term for term in self._terms if term in lowered)

        if not detected:
            return ModerationResult(is_inappropriate=False)

        if any(self.is_severe(term) for term in detected):
            severity = Severity.high
        elif len(detected) >= MEDIUM_MATCH_THRESHOLD:
            severity = Severity.medium
        else:
            severity = Severity.low

        return ModerationResult(
            is_inappropriate=True,
            detected_terms=detected,
            severity=severity,
            confidence=min(CONFIDENCE_PER_MATCH * len(detected), 1.0),
        )


_default_scanner = LexicalScanner()


def scan_content(content: str) -> ModerationResult:
    """Scan *content* against the built-in lexicon."""
    return _default_scanner.scan(content)
