"""Moderation router -- submissions, the admin review queue, and user warnings.

The engine and classifier are provided through FastAPI dependencies so an
application (or a test) can substitute its own instances via
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from alumod.classifier.classifier import SecondaryClassifier, build_classifier
from alumod.config import Settings
from alumod.moderation.engine import ModerationEngine
from alumod.moderation.gate import UNKNOWN_USER, new_content_id
from alumod.moderation.store import JsonDirectoryStore
from web.backend.app.models.api import (
    AlertStatusUpdateRequest,
    ClassifierAdviceResponse,
    ContentRequest,
    ModerationAlertResponse,
    ModerationResultResponse,
    ModerationStatsResponse,
    SubmissionRequest,
    SubmissionResponse,
    SweepResponse,
    UserWarningResponse,
)

router = APIRouter(prefix="/api/moderation", tags=["moderation"])


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

_engine: ModerationEngine | None = None
_classifier: SecondaryClassifier | None = None


def get_engine() -> ModerationEngine:
    """Return the process-wide engine, created on first use."""
    global _engine
    if _engine is None:
        settings = Settings.from_env()
        _engine = ModerationEngine(JsonDirectoryStore(settings.moderation_dir))
    return _engine


def get_classifier() -> SecondaryClassifier:
    global _classifier
    if _classifier is None:
        _classifier = build_classifier(Settings.from_env())
    return _classifier


# ---------------------------------------------------------------------------
# Content checks
# ---------------------------------------------------------------------------


@router.post(
    "/scan",
    response_model=ModerationResultResponse,
    summary="Scan text against the lexicon",
)
async def scan_content(
    body: ContentRequest,
    engine: ModerationEngine = Depends(get_engine),
):
    """Return the lexical scan result without recording anything."""
    return ModerationResultResponse.from_result(engine.scan(body.content))


@router.post(
    "/submissions",
    response_model=SubmissionResponse,
    summary="Moderate a new post or comment",
)
async def submit_content(
    body: SubmissionRequest,
    engine: ModerationEngine = Depends(get_engine),
):
    """Scan a submission; flagged content is queued for review and the
    author receives a warning."""
    content_id = body.content_id or new_content_id(body.content_type)
    decision = engine.moderate_and_record(
        body.content,
        body.user_id,
        body.user_name.strip() or UNKNOWN_USER,
        body.content_type,
        content_id,
    )
    return SubmissionResponse(
        should_block=decision.should_block,
        content_id=content_id,
        warning=UserWarningResponse.from_warning(decision.warning) if decision.warning else None,
    )


@router.post(
    "/classify",
    response_model=ClassifierAdviceResponse,
    summary="Get an advisory AI verdict before publishing",
)
async def classify_content(
    body: ContentRequest,
    classifier: SecondaryClassifier = Depends(get_classifier),
):
    """Ask the secondary classifier for allow/warn/block advice.

    Classifier outages resolve to an ``allow`` verdict, never an error.
    """
    advice = await classifier.advise(body.content)
    return ClassifierAdviceResponse.from_advice(advice)


# ---------------------------------------------------------------------------
# Admin review
# ---------------------------------------------------------------------------


@router.get(
    "/alerts",
    response_model=list[ModerationAlertResponse],
    summary="List moderation alerts",
)
async def list_alerts(
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(pending|all)$"),
    engine: ModerationEngine = Depends(get_engine),
):
    """Return all alerts, or only pending ones, most recent first."""
    alerts = engine.get_pending_alerts() if status_filter == "pending" else engine.get_all_alerts()
    return [ModerationAlertResponse.from_alert(a) for a in alerts]


@router.put(
    "/alerts/{alert_id}/status",
    response_model=ModerationAlertResponse,
    summary="Mark an alert reviewed or dismissed",
)
async def update_alert_status(
    alert_id: str,
    body: AlertStatusUpdateRequest,
    engine: ModerationEngine = Depends(get_engine),
):
    if not engine.update_alert_status(alert_id, body.status):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Alert '{alert_id}' not found",
        )
    return ModerationAlertResponse.from_alert(engine.alerts.get(alert_id))


@router.get(
    "/stats",
    response_model=ModerationStatsResponse,
    summary="Moderation dashboard counters",
)
async def get_stats(engine: ModerationEngine = Depends(get_engine)):
    return ModerationStatsResponse.from_stats(engine.get_moderation_stats())


# ---------------------------------------------------------------------------
# User warnings
# ---------------------------------------------------------------------------


@router.get(
    "/users/{user_id}/warnings",
    response_model=list[UserWarningResponse],
    summary="List a user's active warnings",
)
async def list_user_warnings(
    user_id: str,
    unread: bool = Query(False, description="Only warnings not yet acknowledged"),
    engine: ModerationEngine = Depends(get_engine),
):
    warnings = engine.get_unread_warnings(user_id) if unread else engine.get_active_warnings(user_id)
    return [UserWarningResponse.from_warning(w) for w in warnings]


@router.post(
    "/warnings/{warning_id}/read",
    summary="Acknowledge a warning",
)
async def mark_warning_read(
    warning_id: str,
    engine: ModerationEngine = Depends(get_engine),
):
    if not engine.mark_read(warning_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Warning '{warning_id}' not found",
        )
    return {"ok": True}


@router.post(
    "/warnings/sweep",
    response_model=SweepResponse,
    summary="Delete expired warnings",
)
async def sweep_warnings(engine: ModerationEngine = Depends(get_engine)):
    """Remove warnings past their expiry. Warning counters are unaffected."""
    return SweepResponse(removed=engine.sweep_expired())
