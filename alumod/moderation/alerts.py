"""Alert queue: flagged submissions awaiting admin review."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from alumod.moderation.models import (
    AlertStatus,
    ContentType,
    ModerationAlert,
    ModerationResult,
    Severity,
    format_timestamp,
    generate_id,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200
ELLIPSIS = "..."


def excerpt(content: str) -> str:
    """Cut *content* to the stored excerpt length, marking the cut."""
    if len(content) > EXCERPT_LENGTH:
        return content[:EXCERPT_LENGTH] + ELLIPSIS
    return content


class AlertQueue:
    """Owns the alert list, most recent first.

    Alerts are never removed.  Status changes happen only through
    :meth:`update_status` and are not guarded: a reviewed alert may be
    dismissed and reviewed again.
    """

    def __init__(
        self,
        alerts: list[ModerationAlert],
        *,
        clock: Callable[[], datetime],
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self._alerts = alerts
        self._clock = clock
        self._on_change = on_change or (lambda: None)

    @property
    def alerts(self) -> list[ModerationAlert]:
        return self._alerts

    def record_alert(
        self,
        user_id: str,
        user_name: str,
        content_type: ContentType | str,
        content_id: str,
        content: str,
        result: ModerationResult,
    ) -> ModerationAlert:
        """Queue a pending alert for flagged *content*."""
        now = self._clock()
        stamp = format_timestamp(now)
        alert = ModerationAlert(
            id=generate_id(now),
            user_id=user_id,
            user_name=user_name,
            content_type=ContentType(content_type),
            content_id=content_id,
            flagged_content=excerpt(content),
            detected_terms=list(result.detected_terms),
            severity=result.severity,
            status=AlertStatus.pending,
            created_at=stamp,
            updated_at=stamp,
        )
        self._alerts.insert(0, alert)
        self._on_change()

        logger.info(
            "Recorded %s-severity alert %s for %s %s by user %s",
            alert.severity.value,
            alert.id,
            alert.content_type.value,
            content_id,
            user_id,
        )
        return alert

    def get(self, alert_id: str) -> Optional[ModerationAlert]:
        for alert in self._alerts:
            if alert.id == alert_id:
                return alert
        return None

    def get_all(self) -> list[ModerationAlert]:
        return list(self._alerts)

    def get_pending(self) -> list[ModerationAlert]:
        return [a for a in self._alerts if a.status == AlertStatus.pending]

    def update_status(self, alert_id: str, status: AlertStatus | str) -> bool:
        """Set an alert to reviewed or dismissed. Returns *False* if unknown.

        Raises :class:`ValueError` for any other status.
        """
        status = AlertStatus(status)
        if status == AlertStatus.pending:
            raise ValueError("Alerts can only be marked 'reviewed' or 'dismissed'")

        alert = self.get(alert_id)
        if alert is None:
            return False

        previous = alert.status
        alert.status = status
        alert.updated_at = format_timestamp(self._clock())
        self._on_change()
        logger.info("Alert %s: %s -> %s", alert_id, previous.value, status.value)
        return True

    # -- counters ------------------------------------------------------------

    def count_since(self, start: datetime) -> int:
        """Count alerts created at or after *start*."""
        return sum(1 for a in self._alerts if parse_timestamp(a.created_at) >= start)

    def count_pending(self, severity: Optional[Severity] = None) -> int:
        return sum(
            1 for a in self._alerts
            if a.status == AlertStatus.pending and (severity is None or a.severity == severity)
        )
