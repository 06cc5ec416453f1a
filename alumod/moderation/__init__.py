"""Lexical moderation engine: scanner, escalation ledger and alert queue."""

from alumod.moderation.engine import ModerationEngine
from alumod.moderation.models import (
    AlertStatus,
    ContentType,
    ModerationAlert,
    ModerationResult,
    ModerationStats,
    Severity,
    SubmissionDecision,
    UserWarning,
    WarningType,
)
from alumod.moderation.scanner import LexicalScanner, scan_content
from alumod.moderation.store import JsonDirectoryStore, KeyValueStore, MemoryStore

__all__ = [
    "ModerationEngine",
    "AlertStatus",
    "ContentType",
    "ModerationAlert",
    "ModerationResult",
    "ModerationStats",
    "Severity",
    "SubmissionDecision",
    "UserWarning",
    "WarningType",
    "LexicalScanner",
    "scan_content",
    "JsonDirectoryStore",
    "KeyValueStore",
    "MemoryStore",
]
