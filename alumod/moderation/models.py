"""Data models for the content moderation engine.

Durable records (alerts and warnings) keep their timestamps as ISO 8601
strings and serialize with the camelCase field names the platform's
front-end has always written, so existing snapshots load unchanged.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class Severity(str, Enum):
    """Severity scale shared by scan results, alerts and warnings."""

    low = "low"
    medium = "medium"
    high = "high"


class ContentType(str, Enum):
    post = "post"
    comment = "comment"


class AlertStatus(str, Enum):
    """Admin review state of an alert."""

    pending = "pending"
    reviewed = "reviewed"
    dismissed = "dismissed"


class WarningType(str, Enum):
    inappropriate_content = "inappropriate_content"
    hate_speech = "hate_speech"
    spam = "spam"  # declared by the record format, never issued


# ---------------------------------------------------------------------------
# Timestamp helpers
# ---------------------------------------------------------------------------


def format_timestamp(dt: datetime) -> str:
    """Render *dt* as ISO 8601, assuming UTC for naive values."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp, accepting the ``Z`` suffix browsers emit."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def generate_id(now: datetime) -> str:
    """Millisecond timestamp followed by a random suffix."""
    return f"{int(now.timestamp() * 1000)}{uuid.uuid4().hex[:9]}"


# ---------------------------------------------------------------------------
# Scan result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModerationResult:
    """Outcome of a lexical scan."""

    is_inappropriate: bool
    detected_terms: tuple[str, ...] = ()
    severity: Severity = Severity.low
    confidence: float = 0.0


# ---------------------------------------------------------------------------
# Durable records
# ---------------------------------------------------------------------------


def _detected_terms(record: dict[str, Any]) -> list[str]:
    # Older snapshots call the list ``detectedWords``.
    terms = record.get("detectedWords", record.get("detectedTerms", []))
    return [str(t) for t in terms]


def _stored_timestamp(value: Any) -> str:
    """Return *value* unchanged once it parses; raise :class:`ValueError` otherwise."""
    if not isinstance(value, str):
        raise ValueError(f"Timestamp must be a string, got {value!r}")
    parse_timestamp(value)
    return value


@dataclass
class ModerationAlert:
    """A flagged submission awaiting (or past) admin review."""

    id: str
    user_id: str
    user_name: str
    content_type: ContentType
    content_id: str
    flagged_content: str  # excerpt, at most 200 chars plus "..."
    detected_terms: list[str] = field(default_factory=list)
    severity: Severity = Severity.low
    status: AlertStatus = AlertStatus.pending
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.content_type, str):
            self.content_type = ContentType(self.content_type)
        if isinstance(self.severity, str):
            self.severity = Severity(self.severity)
        if isinstance(self.status, str):
            self.status = AlertStatus(self.status)
        if not self.created_at:
            self.created_at = format_timestamp(datetime.now(timezone.utc))
        if not self.updated_at:
            self.updated_at = self.created_at

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "userName": self.user_name,
            "contentType": self.content_type.value,
            "contentId": self.content_id,
            "flaggedContent": self.flagged_content,
            "detectedWords": list(self.detected_terms),
            "severity": self.severity.value,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ModerationAlert":
        return cls(
            id=str(record["id"]),
            user_id=str(record["userId"]),
            user_name=str(record.get("userName", "")),
            content_type=record["contentType"],
            content_id=str(record.get("contentId", "")),
            flagged_content=str(record.get("flaggedContent", "")),
            detected_terms=_detected_terms(record),
            severity=record.get("severity", "low"),
            status=record.get("status", "pending"),
            created_at=_stored_timestamp(record["createdAt"]),
            updated_at=_stored_timestamp(record.get("updatedAt") or record["createdAt"]),
        )


@dataclass
class UserWarning:
    """A warning issued to a user after flagged content."""

    id: str
    user_id: str
    warning_type: WarningType
    message: str
    severity: Severity
    is_read: bool = False
    created_at: str = ""
    expires_at: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.warning_type, str):
            self.warning_type = WarningType(self.warning_type)
        if isinstance(self.severity, str):
            self.severity = Severity(self.severity)

    def is_expired(self, now: datetime) -> bool:
        return parse_timestamp(self.expires_at) <= now

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "warningType": self.warning_type.value,
            "message": self.message,
            "severity": self.severity.value,
            "isRead": self.is_read,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "UserWarning":
        return cls(
            id=str(record["id"]),
            user_id=str(record["userId"]),
            warning_type=record.get("warningType", "inappropriate_content"),
            message=str(record.get("message", "")),
            severity=record.get("severity", "low"),
            is_read=bool(record.get("isRead", False)),
            created_at=_stored_timestamp(record["createdAt"]),
            expires_at=_stored_timestamp(record["expiresAt"]),
        )


# ---------------------------------------------------------------------------
# Facade and stats
# ---------------------------------------------------------------------------


@dataclass
class SubmissionDecision:
    """What the caller should do with a submitted piece of content."""

    should_block: bool
    warning: Optional[UserWarning] = None


@dataclass
class ModerationStats:
    """Snapshot of the admin dashboard counters."""

    total_alerts: int = 0
    pending_alerts: int = 0
    today_alerts: int = 0
    high_severity_alerts: int = 0
    total_warnings_issued: int = 0
    active_warnings: int = 0
