"""Tests for the alert queue."""

import pytest

from alumod.moderation.alerts import EXCERPT_LENGTH, AlertQueue, excerpt
from alumod.moderation.models import AlertStatus, ContentType, Severity, parse_timestamp
from alumod.moderation.scanner import scan_content

FLAGGED = scan_content("what a stupid scam")
SEVERE = scan_content("a threat was made")


def _queue(clock):
    return AlertQueue([], clock=clock)


def _record(queue, content="what a stupid scam", result=FLAGGED, **overrides):
    return queue.record_alert(
        overrides.get("user_id", "u1"),
        overrides.get("user_name", "Alice Smith"),
        overrides.get("content_type", "post"),
        overrides.get("content_id", "p1"),
        content,
        result,
    )


def test_record_alert_fields(clock):
    queue = _queue(clock)
    alert = _record(queue)

    assert alert.user_id == "u1"
    assert alert.user_name == "Alice Smith"
    assert alert.content_type == ContentType.post
    assert alert.content_id == "p1"
    assert alert.flagged_content == "what a stupid scam"
    assert alert.detected_terms == ["stupid", "scam"]
    assert alert.severity == Severity.low
    assert alert.status == AlertStatus.pending
    assert alert.created_at == alert.updated_at
    assert parse_timestamp(alert.created_at) == clock.now


@pytest.mark.parametrize("length", [0, 1, 199, 200, 201, 1000])
def test_truncation_law(length):
    content = "x" * length
    expected = min(length, EXCERPT_LENGTH) + (3 if length > EXCERPT_LENGTH else 0)
    assert len(excerpt(content)) == expected


def test_long_content_is_cut_with_ellipsis(clock):
    queue = _queue(clock)
    content = "stupid " + "a" * 300
    alert = _record(queue, content=content)
    assert alert.flagged_content == content[:200] + "..."


def test_alerts_most_recent_first(clock):
    queue = _queue(clock)
    first = _record(queue, content_id="p1")
    clock.advance(seconds=1)
    second = _record(queue, content_id="p2")
    assert [a.id for a in queue.get_all()] == [second.id, first.id]


def test_ids_are_unique_at_the_same_instant(clock):
    queue = _queue(clock)
    ids = {_record(queue).id for _ in range(50)}
    assert len(ids) == 50


def test_pending_filter(clock):
    queue = _queue(clock)
    a = _record(queue, content_id="p1")
    b = _record(queue, content_id="p2")
    c = _record(queue, content_id="p3")
    queue.update_status(b.id, "reviewed")
    assert [x.id for x in queue.get_pending()] == [c.id, a.id]


def test_update_status_unknown_id(clock):
    queue = _queue(clock)
    _record(queue)
    before = [a.to_record() for a in queue.get_all()]
    assert queue.update_status("nonexistent-id", "reviewed") is False
    assert [a.to_record() for a in queue.get_all()] == before


def test_update_status_bumps_updated_at(clock):
    queue = _queue(clock)
    alert = _record(queue)
    previous = parse_timestamp(alert.updated_at)

    clock.advance(minutes=5)
    assert queue.update_status(alert.id, AlertStatus.reviewed) is True
    assert alert.status == AlertStatus.reviewed
    assert parse_timestamp(alert.updated_at) >= previous
    assert parse_timestamp(alert.updated_at) == clock.now
    assert alert.created_at != alert.updated_at


def test_no_terminal_state(clock):
    queue = _queue(clock)
    alert = _record(queue)
    assert queue.update_status(alert.id, "reviewed")
    assert queue.update_status(alert.id, "dismissed")
    assert queue.update_status(alert.id, "reviewed")
    assert alert.status == AlertStatus.reviewed


def test_cannot_reset_to_pending(clock):
    queue = _queue(clock)
    alert = _record(queue)
    with pytest.raises(ValueError):
        queue.update_status(alert.id, "pending")


def test_unknown_status_rejected(clock):
    queue = _queue(clock)
    alert = _record(queue)
    with pytest.raises(ValueError):
        queue.update_status(alert.id, "approved")


def test_unknown_content_type_rejected(clock):
    queue = _queue(clock)
    with pytest.raises(ValueError):
        _record(queue, content_type="story")


def test_pending_high_count(clock):
    queue = _queue(clock)
    _record(queue, result=SEVERE)
    reviewed = _record(queue, result=SEVERE)
    _record(queue, result=FLAGGED)
    queue.update_status(reviewed.id, "dismissed")

    assert queue.count_pending() == 2
    assert queue.count_pending(Severity.high) == 1
