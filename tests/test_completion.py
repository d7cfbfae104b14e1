"""Tests for field completion rules."""

import pytest

from videoflow.models import Tasks
from videoflow.services.completion import (
    Criterion,
    count_completed,
    is_complete,
    is_sponsored,
    is_value_complete,
)


# =============================================================================
# TAGGED CRITERIA
# =============================================================================

class TestFilledOnly:

    @pytest.mark.parametrize("value", ["-", "N/A", "x", "some text"])
    def test_non_empty_strings_are_complete(self, value):
        assert is_complete(value, Criterion.FILLED_ONLY)

    def test_empty_string_is_incomplete(self):
        assert not is_complete("", Criterion.FILLED_ONLY)

    def test_booleans_follow_their_value(self):
        assert is_complete(True, Criterion.FILLED_ONLY)
        assert not is_complete(False, Criterion.FILLED_ONLY)

    def test_accepts_criterion_name(self):
        assert is_complete("x", "filled_only")


class TestBooleanCriteria:

    def test_true_only(self):
        assert is_complete(True, Criterion.TRUE_ONLY)
        assert not is_complete(False, Criterion.TRUE_ONLY)
        assert not is_complete("true", Criterion.TRUE_ONLY)

    def test_false_only(self):
        assert is_complete(False, Criterion.FALSE_ONLY)
        assert not is_complete(True, Criterion.FALSE_ONLY)

    @pytest.mark.parametrize("value", ["", "reason", True, False])
    def test_empty_or_filled_is_always_complete(self, value):
        assert is_complete(value, Criterion.EMPTY_OR_FILLED)


class TestNoFixme:

    def test_text_without_marker_is_complete(self):
        assert is_complete("00:00 Intro\n01:30 Demo", Criterion.NO_FIXME)

    def test_marker_makes_it_incomplete(self):
        assert not is_complete("00:00 Intro\nFIXME: add demo", Criterion.NO_FIXME)

    def test_empty_string_is_complete(self):
        assert is_complete("", Criterion.NO_FIXME)


class TestConditionalCriteria:

    @pytest.mark.parametrize("amount", ["", "-", "N/A"])
    def test_not_sponsored_is_always_complete(self, amount):
        assert is_complete("", Criterion.CONDITIONAL_SPONSORSHIP, amount)
        assert is_complete(False, Criterion.CONDITIONAL_SPONSORS, amount)

    def test_sponsored_requires_emails(self):
        assert not is_complete("", Criterion.CONDITIONAL_SPONSORSHIP, "500")
        assert is_complete("a@b.c", Criterion.CONDITIONAL_SPONSORSHIP, "500")

    def test_sponsored_requires_notification(self):
        assert not is_complete(False, Criterion.CONDITIONAL_SPONSORS, "500")
        assert is_complete(True, Criterion.CONDITIONAL_SPONSORS, "500")

    def test_is_sponsored(self):
        assert is_sponsored("500")
        assert not is_sponsored("")
        assert not is_sponsored("-")
        assert not is_sponsored("N/A")


# =============================================================================
# LEGACY COUNTING
# =============================================================================

class TestLegacyCount:

    def test_value_rules(self):
        assert is_value_complete("-")
        assert is_value_complete("N/A")
        assert is_value_complete(True)
        assert is_value_complete(["a"])
        assert not is_value_complete("")
        assert not is_value_complete(False)
        assert not is_value_complete([])

    def test_unsupported_types_do_not_count(self):
        assert not is_value_complete(None)
        assert not is_value_complete(3)
        assert not is_value_complete({"a": 1})

    def test_count(self):
        assert count_completed(["x", "", True, False, ["a"], []]) == Tasks(3, 6)

    def test_placeholders_count_as_complete(self):
        assert count_completed(["-", "N/A"]) == Tasks(2, 2)
