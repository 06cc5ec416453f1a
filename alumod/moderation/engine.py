"""Moderation engine: scanner, escalation ledger and alert queue over one store.

The engine reads all three collections from its store when constructed and
rewrites all three after every mutation.  Construct one per application and
pass it to whatever needs it; tests build a fresh engine over a
:class:`~alumod.moderation.store.MemoryStore`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

from alumod.moderation.alerts import AlertQueue
from alumod.moderation.ledger import EscalationLedger
from alumod.moderation.models import (
    AlertStatus,
    ContentType,
    ModerationAlert,
    ModerationResult,
    ModerationStats,
    Severity,
    SubmissionDecision,
    UserWarning,
)
from alumod.moderation.scanner import LexicalScanner
from alumod.moderation.store import (
    ALERTS_KEY,
    COUNTS_KEY,
    WARNINGS_KEY,
    KeyValueStore,
    MemoryStore,
    StoreError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ModerationEngine:
    """Stateful content moderation with alerts and escalating warnings."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        scanner: Optional[LexicalScanner] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store if store is not None else MemoryStore()
        self._scanner = scanner or LexicalScanner()
        self._clock = clock or _utcnow

        self.alerts = AlertQueue(
            self._load_list(ALERTS_KEY, ModerationAlert.from_record),
            clock=self._clock,
            on_change=self._save,
        )
        self.ledger = EscalationLedger(
            self._load_list(WARNINGS_KEY, UserWarning.from_record),
            self._load_counts(),
            severe_terms=self._scanner.severe_terms,
            clock=self._clock,
            on_change=self._save,
        )

    # -- persistence ---------------------------------------------------------

    def _load_document(self, key: str) -> Optional[Any]:
        try:
            return self._store.load(key)
        except StoreError as exc:
            logger.warning("Resetting %s: %s", key, exc)
            return None

    def _load_list(self, key: str, parse: Callable[[dict], T]) -> list[T]:
        data = self._load_document(key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Resetting %s: expected a list, found %s", key, type(data).__name__)
            return []

        items: list[T] = []
        for index, record in enumerate(data):
            try:
                items.append(parse(record))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed %s entry #%d: %r", key, index, exc)
        return items

    def _load_counts(self) -> dict[str, int]:
        data = self._load_document(COUNTS_KEY)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Resetting %s: expected an object, found %s", COUNTS_KEY, type(data).__name__)
            return {}

        counts: dict[str, int] = {}
        for user_id, value in data.items():
            if isinstance(value, int) and not isinstance(value, bool):
                counts[str(user_id)] = value
            else:
                logger.warning("Skipping malformed %s entry for %s: %r", COUNTS_KEY, user_id, value)
        return counts

    def _save(self) -> None:
        self._store.save(ALERTS_KEY, [a.to_record() for a in self.alerts.alerts])
        self._store.save(WARNINGS_KEY, [w.to_record() for w in self.ledger.warnings])
        self._store.save(COUNTS_KEY, dict(self.ledger.counts))

    # -- scanning ------------------------------------------------------------

    @property
    def scanner(self) -> LexicalScanner:
        return self._scanner

    def scan(self, content: str) -> ModerationResult:
        return self._scanner.scan(content)

    # -- facade --------------------------------------------------------------

    def moderate_and_record(
        self,
        content: str,
        user_id: str,
        user_name: str,
        content_type: ContentType | str,
        content_id: str,
    ) -> SubmissionDecision:
        """Scan a submission; on a hit, queue an alert and warn the author.

        Clean content is not recorded anywhere.  Flagged content produces
        exactly one alert and one warning, and is blocked only when the scan
        severity is high.
        """
        content_type = ContentType(content_type)
        result = self.scan(content)
        if not result.is_inappropriate:
            return SubmissionDecision(should_block=False)

        self.alerts.record_alert(user_id, user_name, content_type, content_id, content, result)
        warning = self.ledger.issue_warning(user_id, result)
        return SubmissionDecision(
            should_block=result.severity == Severity.high,
            warning=warning,
        )

    # -- admin surface -------------------------------------------------------

    def get_pending_alerts(self) -> list[ModerationAlert]:
        return self.alerts.get_pending()

    def get_all_alerts(self) -> list[ModerationAlert]:
        return self.alerts.get_all()

    def update_alert_status(self, alert_id: str, status: AlertStatus | str) -> bool:
        return self.alerts.update_status(alert_id, status)

    def get_moderation_stats(self) -> ModerationStats:
        """Compute the dashboard counters from the current lists."""
        now = self._clock()
        local_now = now.astimezone()
        midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)

        return ModerationStats(
            total_alerts=len(self.alerts.alerts),
            pending_alerts=self.alerts.count_pending(),
            today_alerts=self.alerts.count_since(midnight),
            high_severity_alerts=self.alerts.count_pending(Severity.high),
            total_warnings_issued=len(self.ledger.warnings),
            active_warnings=self.ledger.count_active(),
        )

    # -- user surface --------------------------------------------------------

    def get_active_warnings(self, user_id: str) -> list[UserWarning]:
        return self.ledger.get_active_warnings(user_id)

    def get_unread_warnings(self, user_id: str) -> list[UserWarning]:
        return self.ledger.get_unread_warnings(user_id)

    def mark_read(self, warning_id: str) -> bool:
        return self.ledger.mark_read(warning_id)

    def sweep_expired(self) -> int:
        return self.ledger.sweep_expired()
