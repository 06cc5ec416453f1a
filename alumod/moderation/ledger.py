"""Escalation ledger: per-user warning counts and escalating warnings.

Each flagged submission bumps the author's counter and issues a warning whose
wording and severity depend only on that counter.  Counters are stored apart
from the warning records, so expiring a warning never lowers the next
escalation step.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from alumod.moderation.models import (
    ModerationResult,
    Severity,
    UserWarning,
    WarningType,
    format_timestamp,
    generate_id,
)

logger = logging.getLogger(__name__)

WARNING_TTL = timedelta(days=7)

FIRST_WARNING = (
    "Warning: Your content contained inappropriate language. Please keep "
    "discussions respectful and constructive. Detected words: {terms}"
)
SECOND_WARNING = (
    "Second Warning: Continued use of inappropriate language may result in "
    "account restrictions. Please review our community guidelines."
)
FINAL_WARNING = (
    "Final Warning: Multiple violations detected. Further inappropriate "
    "content may result in account suspension."
)


def warning_message(count: int, detected_terms: tuple[str, ...] | list[str]) -> str:
    """Return the warning text for a user's *count*-th warning."""
    if count == 1:
        return FIRST_WARNING.format(terms=", ".join(detected_terms))
    if count == 2:
        return SECOND_WARNING
    return FINAL_WARNING


def warning_severity(count: int) -> Severity:
    if count >= 3:
        return Severity.high
    if count == 2:
        return Severity.medium
    return Severity.low


class EscalationLedger:
    """Owns the warning list (most recent first) and the per-user counters."""

    def __init__(
        self,
        warnings: list[UserWarning],
        counts: dict[str, int],
        *,
        severe_terms: frozenset[str],
        clock: Callable[[], datetime],
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._warnings = warnings
        self._counts = counts
        self._severe = severe_terms
        self._clock = clock
        self._on_change = on_change or (lambda: None)

    # -- state accessors -----------------------------------------------------

    @property
    def warnings(self) -> list[UserWarning]:
        return self._warnings

    @property
    def counts(self) -> dict[str, int]:
        return self._counts

    def warning_count(self, user_id: str) -> int:
        """Return how many warnings *user_id* has ever received."""
        return self._counts.get(user_id, 0)

    # -- issuing -------------------------------------------------------------

    def issue_warning(self, user_id: str, result: ModerationResult) -> UserWarning:
        """Escalate *user_id* and record a new warning.

        The caller decides whether *result* warrants a warning; the ledger
        does not re-scan.
        """
        count = self._counts.get(user_id, 0) + 1
        self._counts[user_id] = count

        if any(term.lower() in self._severe for term in result.detected_terms):
            warning_type = WarningType.hate_speech
        else:
            warning_type = WarningType.inappropriate_content

        now = self._clock()
        warning = UserWarning(
            id=generate_id(now),
            user_id=user_id,
            warning_type=warning_type,
            message=warning_message(count, result.detected_terms),
            severity=warning_severity(count),
            is_read=False,
            created_at=format_timestamp(now),
            expires_at=format_timestamp(now + WARNING_TTL),
        )
        self._warnings.insert(0, warning)
        self._on_change()

        logger.info(
            "Issued %s warning #%d to user %s (%s)",
            warning.severity.value,
            count,
            user_id,
            warning_type.value,
        )
        return warning

    # -- queries -------------------------------------------------------------

    def get_active_warnings(self, user_id: str) -> list[UserWarning]:
        """Return non-expired warnings for *user_id*, most recent first."""
        now = self._clock()
        return [
            w for w in self._warnings
            if w.user_id == user_id and not w.is_expired(now)
        ]

    def get_unread_warnings(self, user_id: str) -> list[UserWarning]:
        return [w for w in self.get_active_warnings(user_id) if not w.is_read]

    def mark_read(self, warning_id: str) -> bool:
        """Acknowledge a warning. Returns *False* if no such warning exists."""
        for warning in self._warnings:
            if warning.id == warning_id:
                warning.is_read = True
                self._on_change()
                return True
        return False

    def count_active(self) -> int:
        now = self._clock()
        return sum(1 for w in self._warnings if not w.is_expired(now))

    # -- cleanup -------------------------------------------------------------

    def sweep_expired(self) -> int:
        """Delete every expired warning and return how many were removed.

        Counters are left untouched.
        """
        now = self._clock()
        kept = [w for w in self._warnings if not w.is_expired(now)]
        removed = len(self._warnings) - len(kept)
        self._warnings[:] = kept
        self._on_change()
        if removed:
            logger.info("Swept %d expired warning(s)", removed)
        return removed
