"""Pydantic models for API request/response serialization.

These models mirror the alumod dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from alumod.classifier.models import PrePublishAdvice
from alumod.moderation.models import (
    ModerationAlert,
    ModerationResult,
    ModerationStats,
    UserWarning,
)

ContentTypeLiteral = Literal["post", "comment"]
SeverityLiteral = Literal["low", "medium", "high"]


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


class ContentRequest(BaseModel):
    content: str


class ModerationResultResponse(BaseModel):
    """Mirrors alumod.moderation.models.ModerationResult."""

    is_inappropriate: bool
    detected_terms: list[str] = Field(default_factory=list)
    severity: SeverityLiteral = "low"
    confidence: float = 0.0

    @classmethod
    def from_result(cls, result: ModerationResult) -> "ModerationResultResponse":
        return cls(
            is_inappropriate=result.is_inappropriate,
            detected_terms=list(result.detected_terms),
            severity=result.severity.value,
            confidence=result.confidence,
        )


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------


class UserWarningResponse(BaseModel):
    """Mirrors alumod.moderation.models.UserWarning."""

    id: str
    user_id: str
    warning_type: Literal["inappropriate_content", "hate_speech", "spam"]
    message: str
    severity: SeverityLiteral
    is_read: bool = False
    created_at: str = ""
    expires_at: str = ""

    @classmethod
    def from_warning(cls, w: UserWarning) -> "UserWarningResponse":
        return cls(
            id=w.id,
            user_id=w.user_id,
            warning_type=w.warning_type.value,
            message=w.message,
            severity=w.severity.value,
            is_read=w.is_read,
            created_at=w.created_at,
            expires_at=w.expires_at,
        )


class SweepResponse(BaseModel):
    removed: int = 0


# ---------------------------------------------------------------------------
# Submissions
# ---------------------------------------------------------------------------


class SubmissionRequest(BaseModel):
    content: str
    user_id: str = Field(min_length=1)
    user_name: str = ""
    content_type: ContentTypeLiteral = "post"
    content_id: Optional[str] = None


class SubmissionResponse(BaseModel):
    should_block: bool
    content_id: str
    warning: Optional[UserWarningResponse] = None


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------


class ModerationAlertResponse(BaseModel):
    """Mirrors alumod.moderation.models.ModerationAlert."""

    id: str
    user_id: str
    user_name: str
    content_type: ContentTypeLiteral
    content_id: str
    flagged_content: str
    detected_terms: list[str] = Field(default_factory=list)
    severity: SeverityLiteral
    status: Literal["pending", "reviewed", "dismissed"]
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_alert(cls, a: ModerationAlert) -> "ModerationAlertResponse":
        return cls(
            id=a.id,
            user_id=a.user_id,
            user_name=a.user_name,
            content_type=a.content_type.value,
            content_id=a.content_id,
            flagged_content=a.flagged_content,
            detected_terms=list(a.detected_terms),
            severity=a.severity.value,
            status=a.status.value,
            created_at=a.created_at,
            updated_at=a.updated_at,
        )


class AlertStatusUpdateRequest(BaseModel):
    status: Literal["reviewed", "dismissed"]


class ModerationStatsResponse(BaseModel):
    """Mirrors alumod.moderation.models.ModerationStats."""

    total_alerts: int = 0
    pending_alerts: int = 0
    today_alerts: int = 0
    high_severity_alerts: int = 0
    total_warnings_issued: int = 0
    active_warnings: int = 0

    @classmethod
    def from_stats(cls, s: ModerationStats) -> "ModerationStatsResponse":
        return cls(
            total_alerts=s.total_alerts,
            pending_alerts=s.pending_alerts,
            today_alerts=s.today_alerts,
            high_severity_alerts=s.high_severity_alerts,
            total_warnings_issued=s.total_warnings_issued,
            active_warnings=s.active_warnings,
        )


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


class ClassifierAdviceResponse(BaseModel):
    is_appropriate: bool
    confidence: int
    concerns: list[str] = Field(default_factory=list)
    severity: SeverityLiteral
    explanation: str
    suggested_action: Literal["allow", "warn", "block"]
    should_block: bool
    should_warn: bool
    can_publish: bool

    @classmethod
    def from_advice(cls, advice: PrePublishAdvice) -> "ClassifierAdviceResponse":
        r = advice.result
        return cls(
            is_appropriate=r.is_appropriate,
            confidence=r.confidence,
            concerns=list(r.concerns),
            severity=r.severity.value,
            explanation=r.explanation,
            suggested_action=r.suggested_action.value,
            should_block=advice.should_block,
            should_warn=advice.should_warn,
            can_publish=advice.can_publish,
        )
