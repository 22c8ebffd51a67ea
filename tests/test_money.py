"""Tests for amount conversion between the API (major units) and storage (cents)."""

import pytest

from united_pets.config import settings
from united_pets.exceptions import ValidationError
from united_pets.money import from_cents, to_cents


class TestToCents:

    @pytest.mark.parametrize(
        "amount, expected",
        [(10, 1000), (19.99, 1999), (0.1, 10), (12.5, 1250), (0.005, 1)],
    )
    def test_converts_major_units(self, amount, expected):
        assert to_cents(amount) == expected

    @pytest.mark.parametrize("amount", [0, -1, 0.004])
    def test_rejects_non_positive(self, amount):
        with pytest.raises(ValidationError) as exc_info:
            to_cents(amount)
        assert exc_info.value.field == "amount"

    def test_rejects_nan(self):
        with pytest.raises(ValidationError):
            to_cents(float("nan"))


def test_from_cents():
    assert from_cents(1999) == 19.99
    assert from_cents(0) == 0


class TestUpperBound:

    @pytest.mark.parametrize("amount", [1e20, 1e30, float("inf")])
    def test_rejects_out_of_range(self, amount):
        with pytest.raises(ValidationError) as exc_info:
            to_cents(amount)
        assert exc_info.value.field == "amount"

    def test_accepts_the_maximum(self):
        assert to_cents(settings.max_amount) == int(settings.max_amount * 100)
