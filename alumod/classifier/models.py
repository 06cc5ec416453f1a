"""Verdict models for the secondary classifier."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from alumod.moderation.models import Severity


class SuggestedAction(str, Enum):
    """What the classifier advises the caller to do before publishing."""

    allow = "allow"
    warn = "warn"
    block = "block"


class AIModerationResult(BaseModel):
    """A classifier verdict.

    Field aliases match the JSON object the model is asked to produce;
    missing fields and out-of-range values fail validation.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    is_appropriate: StrictBool = Field(alias="isAppropriate")
    confidence: int = Field(ge=0, le=100)
    concerns: list[StrictStr]
    severity: Severity
    explanation: StrictStr
    suggested_action: SuggestedAction = Field(alias="suggestedAction")

    @field_validator("confidence", mode="before")
    @classmethod
    def _numeric_confidence(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("confidence must be a number")
        return round(value)


class PrePublishAdvice(BaseModel):
    """Advisory decision derived from a verdict."""

    result: AIModerationResult
    should_block: bool
    should_warn: bool
    can_publish: bool

    @classmethod
    def from_result(cls, result: AIModerationResult) -> "PrePublishAdvice":
        action = result.suggested_action
        return cls(
            result=result,
            should_block=action == SuggestedAction.block,
            should_warn=action == SuggestedAction.warn,
            can_publish=action in (SuggestedAction.allow, SuggestedAction.warn),
        )
