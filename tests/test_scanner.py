"""Tests for the lexical scanner."""

import pytest

from alumod.moderation.models import Severity
from alumod.moderation.scanner import (
    INAPPROPRIATE_TERMS,
    SEVERE_TERMS,
    LexicalScanner,
    scan_content,
)


def test_clean_content():
    result = scan_content("I love this community!")
    assert not result.is_inappropriate
    assert result.detected_terms == ()
    assert result.severity == Severity.low
    assert result.confidence == 0.0


def test_two_mild_terms_stay_low():
    result = scan_content("That's really stupid and spam")
    assert result.is_inappropriate
    assert result.detected_terms == ("stupid", "spam")
    assert result.severity == Severity.low
    assert result.confidence == pytest.approx(0.6)


def test_severe_term_is_high():
    result = scan_content("I hate this and want to kill it")
    assert result.is_inappropriate
    assert result.detected_terms == ("hate", "kill")
    assert result.severity == Severity.high


def test_single_severe_term_is_high():
    result = scan_content("That could harm someone")
    assert result.detected_terms == ("harm",)
    assert result.severity == Severity.high
    assert result.confidence == pytest.approx(0.3)


def test_three_mild_terms_are_medium():
    result = scan_content("stupid idiot moron")
    assert result.detected_terms == ("stupid", "idiot", "moron")
    assert result.severity == Severity.medium
    assert result.confidence == pytest.approx(0.9)


def test_confidence_is_capped():
    result = scan_content("stupid idiot moron spam")
    assert len(result.detected_terms) == 4
    assert result.severity == Severity.medium
    assert result.confidence == 1.0


def test_matching_is_case_insensitive():
    result = scan_content("NAZI propaganda")
    assert result.detected_terms == ("nazi",)
    assert result.severity == Severity.high


def test_terms_match_inside_longer_words():
    result = scan_content("hello everyone")
    assert result.detected_terms == ("hell",)
    assert result.severity == Severity.low


def test_overlapping_terms_reported_in_lexicon_order():
    result = scan_content("these are lies")
    assert result.detected_terms == ("lie", "lies")


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
def test_empty_content_is_clean(content):
    assert not scan_content(content).is_inappropriate


@pytest.mark.parametrize(
    "content",
    [
        "",
        "Great alumni meetup yesterday",
        "What the hell",
        "terrorism and terrorist threats",
        "fake fraud scam spam lies",
    ],
)
def test_flag_matches_detected_terms(content):
    result = scan_content(content)
    assert result.is_inappropriate == (len(result.detected_terms) > 0)


def test_scan_is_deterministic():
    text = "A stupid scam by a fake account"
    assert scan_content(text) == scan_content(text)


def test_severe_terms_are_a_subset_of_lexicon():
    assert SEVERE_TERMS <= set(INAPPROPRIATE_TERMS)


def test_custom_lexicon():
    scanner = LexicalScanner(terms=["Foo", "bar"], severe_terms=["BAR"])
    assert scanner.scan("foo").severity == Severity.low
    assert scanner.scan("a BAR b").severity == Severity.high
    assert scanner.is_severe("bar")
    assert not scanner.scan("hate").is_inappropriate
