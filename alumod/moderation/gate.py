"""Submission gate: the glue between post/comment creation and moderation.

Two paths reach the engine:

* :meth:`SubmissionGate.check_submission` runs the lexical engine at submit
  time and turns its decision into allow/block plus a user-facing notice.
* :meth:`SubmissionGate.advise` asks the secondary classifier for a verdict
  before submitting; :meth:`SubmissionGate.publish_with_advice` then applies
  that verdict, recording blocked and warned content through the engine.

Both paths fail open: an error inside moderation never stops a post.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Optional

from alumod.classifier.classifier import FailureKind, SecondaryClassifier, fail_open
from alumod.classifier.models import AIModerationResult, PrePublishAdvice, SuggestedAction
from alumod.moderation.engine import ModerationEngine
from alumod.moderation.models import ContentType, UserWarning

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown User"

BLOCKED_NOTICE = (
    "Your content contains inappropriate language and cannot be published. "
    "Please review and edit your content."
)
FLAGGED_NOTICE = (
    "Your content has been flagged for review. Please keep discussions "
    "respectful and constructive."
)
PUBLISHED_WITH_WARNING_NOTICE = (
    "Your content has been flagged for review but published successfully."
)


@dataclass
class Author:
    """The signed-in user submitting content."""

    id: str
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or UNKNOWN_USER


@dataclass
class SubmissionOutcome:
    allowed: bool
    warning: Optional[UserWarning] = None
    notice: str = ""


@dataclass
class PublishOutcome:
    success: bool
    blocked: bool = False
    warning: str = ""


def new_content_id(content_type: ContentType | str) -> str:
    """Synthesize an id of the form ``<type>_<ms timestamp>_<random>``."""
    content_type = ContentType(content_type)
    return f"{content_type.value}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class SubmissionGate:
    """Moderation entry point for content creation flows."""

    def __init__(
        self,
        engine: ModerationEngine,
        classifier: Optional[SecondaryClassifier] = None,
    ) -> None:
        self._engine = engine
        self._classifier = classifier

    # -- lexical path --------------------------------------------------------

    def check_submission(
        self,
        author: Optional[Author],
        content: str,
        content_type: ContentType | str,
        content_id: Optional[str] = None,
    ) -> SubmissionOutcome:
        """Moderate *content* at submit time.

        Anonymous submissions are not moderated.  Any error raised by the
        engine is logged and the content is allowed.
        """
        if author is None:
            return SubmissionOutcome(allowed=True)

        try:
            decision = self._engine.moderate_and_record(
                content,
                author.id,
                author.display_name,
                content_type,
                content_id or new_content_id(content_type),
            )
        except Exception:
            logger.exception("Content moderation failed for user %s; allowing content", author.id)
            return SubmissionOutcome(allowed=True)

        if decision.should_block:
            return SubmissionOutcome(allowed=False, warning=decision.warning, notice=BLOCKED_NOTICE)
        if decision.warning is not None:
            return SubmissionOutcome(allowed=True, warning=decision.warning, notice=FLAGGED_NOTICE)
        return SubmissionOutcome(allowed=True)

    # -- advisory path -------------------------------------------------------

    async def advise(self, content: str) -> PrePublishAdvice:
        """Ask the secondary classifier about *content* before publishing."""
        if self._classifier is None:
            return PrePublishAdvice.from_result(fail_open(FailureKind.unavailable))
        return await self._classifier.advise(content)

    def publish_with_advice(
        self,
        author: Optional[Author],
        content: str,
        content_type: ContentType | str,
        result: Optional[AIModerationResult],
        content_id: Optional[str] = None,
    ) -> PublishOutcome:
        """Apply a classifier verdict to a publish attempt.

        ``block`` verdicts are recorded through the engine and refused;
        ``warn`` verdicts are recorded and published; ``allow`` publishes.
        """
        if author is None:
            return PublishOutcome(success=False, warning="User not authenticated")
        if result is None:
            return PublishOutcome(success=False, warning="Content not analyzed")

        action = result.suggested_action
        if action in (SuggestedAction.block, SuggestedAction.warn):
            self._record(author, content, content_type, content_id)

        if action == SuggestedAction.block:
            return PublishOutcome(success=False, blocked=True, warning=result.explanation)
        if action == SuggestedAction.warn:
            return PublishOutcome(success=True, warning=PUBLISHED_WITH_WARNING_NOTICE)
        return PublishOutcome(success=True)

    def _record(
        self,
        author: Author,
        content: str,
        content_type: ContentType | str,
        content_id: Optional[str],
    ) -> None:
        try:
            self._engine.moderate_and_record(
                content,
                author.id,
                author.display_name,
                content_type,
                content_id or new_content_id(content_type),
            )
        except Exception:
            logger.exception("Failed to record classifier-flagged content for user %s", author.id)
