"""Tests for compute_quote: direction, rounding, round trip. Pure, no IO."""

from decimal import Decimal, ROUND_DOWN

import pytest

from reflect_mirror.core.domain_types import QuoteSide
from reflect_mirror.core.quote import (
    ROUND_TRIP_TOLERANCE, compute_quote, rate_from_bps,
)

RATE = Decimal("1.016858791")


def test_rate_from_bps_scales_by_1e9():
    assert rate_from_bps(1_016_858_791) == RATE


def test_rate_from_bps_rejects_non_positive():
    with pytest.raises(ValueError):
        rate_from_bps(0)


def test_mint_divides_collateral_by_rate():
    quote = compute_quote(QuoteSide.MINT, Decimal(10), RATE)
    expected = (Decimal(10) / RATE).quantize(Decimal("0.000001"), rounding=ROUND_DOWN)
    assert quote.result == expected
    assert quote.result < Decimal(10)


def test_redeem_multiplies_by_rate():
    quote = compute_quote(QuoteSide.REDEEM, Decimal(10), RATE)
    assert quote.result == Decimal("10.168587")


def test_result_is_rounded_down_to_six_places():
    quote = compute_quote(QuoteSide.REDEEM, Decimal("0.000001"), Decimal("0.999999999"))
    assert quote.result == Decimal("0.000000")


def test_rate_is_quantized_to_nine_places():
    quote = compute_quote(QuoteSide.REDEEM, Decimal(1), Decimal("1.0000000004"))
    assert quote.rate == Decimal("1.000000000")


@pytest.mark.parametrize("amount", ["10", "0.000123", "123456.789", "999999999"])
def test_mint_then_redeem_round_trips(amount):
    original = Decimal(amount)
    minted = compute_quote(QuoteSide.MINT, original, RATE).result
    redeemed = compute_quote(QuoteSide.REDEEM, minted, RATE).result
    assert abs(redeemed - original) <= ROUND_TRIP_TOLERANCE


@pytest.mark.parametrize("amount", [Decimal(0), Decimal(-1)])
def test_non_positive_amount_rejected(amount):
    with pytest.raises(ValueError):
        compute_quote(QuoteSide.MINT, amount, RATE)


def test_non_positive_rate_rejected():
    with pytest.raises(ValueError):
        compute_quote(QuoteSide.REDEEM, Decimal(1), Decimal(0))
