from __future__ import annotations

import pytest

from hr_portal.common.validators import parse_amount, require_non_empty, require_non_negative
from hr_portal.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw, expected",
    [(None, 0.0), ("", 0.0), ("  ", 0.0), ("25,000", 25000.0), ("1250.50", 1250.5), (300, 300.0)],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["twelve", "nan", "inf", float("inf")])
def test_parse_amount_rejects_garbage(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


@pytest.mark.parametrize("raw", ["nan", "inf", "-inf", float("nan"), float("inf")])
def test_non_finite_numbers_are_rejected(raw):
    with pytest.raises(ValidationError):
        require_non_negative(raw, "Hours")


def test_non_negative_accepts_numeric_text():
    assert require_non_negative("7.5", "Hours") == 7.5
    assert require_non_negative(0, "Hours") == 0.0


@pytest.mark.parametrize("raw", [None, 123, ["Acme"], {"name": "Acme"}, "   "])
def test_non_empty_requires_text(raw):
    with pytest.raises(ValidationError):
        require_non_empty(raw, "Client name")


def test_non_empty_strips():
    assert require_non_empty("  Acme  ", "Client name") == "Acme"
