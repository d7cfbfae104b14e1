"""Field completion rules shared by the CLI and the API.

The literal strings "-" and "N/A" are deliberate "not applicable" markers and
count as filled, both for tagged criteria and for legacy counting.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Union

from videoflow.models import Tasks

FIXME_TOKEN = "FIXME:"
NOT_APPLICABLE_MARKERS = ("-", "N/A")

FieldValue = Union[str, bool, list]


class Criterion(str, Enum):
    """Rule deciding whether a field's value counts as done."""

    FILLED_ONLY = "filled_only"
    TRUE_ONLY = "true_only"
    FALSE_ONLY = "false_only"
    EMPTY_OR_FILLED = "empty_or_filled"
    NO_FIXME = "no_fixme"
    CONDITIONAL_SPONSORSHIP = "conditional_sponsorship"
    CONDITIONAL_SPONSORS = "conditional_sponsors"


def is_sponsored(amount: str) -> bool:
    """Return True if a sponsorship amount denotes an actual sponsorship."""

    return bool(amount) and amount not in NOT_APPLICABLE_MARKERS


def _is_filled(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return len(value) > 0
    return False


def is_complete(value, criterion: Criterion, sponsorship_amount: str = "") -> bool:
    """Return the done verdict for one field value.

    Args:
        value: The field's current value.
        criterion: The rule attached to the field.
        sponsorship_amount: The item's sponsorship amount, consulted by the
            conditional criteria only.
    """

    criterion = Criterion(criterion)
    if criterion is Criterion.FILLED_ONLY:
        return _is_filled(value)
    if criterion is Criterion.TRUE_ONLY:
        return value is True
    if criterion is Criterion.FALSE_ONLY:
        return value is False
    if criterion is Criterion.EMPTY_OR_FILLED:
        return True
    if criterion is Criterion.NO_FIXME:
        return isinstance(value, str) and FIXME_TOKEN not in value
    if criterion is Criterion.CONDITIONAL_SPONSORSHIP:
        return not is_sponsored(sponsorship_amount) or _is_filled(value)
    if criterion is Criterion.CONDITIONAL_SPONSORS:
        return not is_sponsored(sponsorship_amount) or value is True
    return False


def is_value_complete(value: FieldValue) -> bool:
    """Legacy untyped rule: non-empty string, True, or non-empty list."""

    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, list):
        return len(value) > 0
    return False


def count_completed(values: Iterable[FieldValue]) -> Tasks:
    """Count completed values with the legacy untyped rule."""

    completed = 0
    total = 0
    for value in values:
        total += 1
        if is_value_complete(value):
            completed += 1
    return Tasks(completed=completed, total=total)
