"""Quote Computation: mint/redeem conversion at a stablecoin's USD rate.

Invariants:
    - rate is the USD value of one stablecoin unit (receipt value in bps / 10^9)
    - mint:   amount is collateral (USD), result = amount / rate stablecoins
    - redeem: amount is stablecoins,      result = amount * rate USD
    - result is quantized to QUOTE_PLACES with ROUND_DOWN; the rate to RATE_PLACES
    - mint(x) then redeem(result) returns x within ROUND_TRIP_TOLERANCE
    - Pure: Decimal in, Decimal out, no IO
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_EVEN

from reflect_mirror.core.domain_types import QuoteSide

QUOTE_PLACES = 6
RATE_PLACES = 9
RATE_SCALE = Decimal(10) ** RATE_PLACES
ROUND_TRIP_TOLERANCE = Decimal("0.000003")

_QUOTE_QUANTUM = Decimal(1).scaleb(-QUOTE_PLACES)
_RATE_QUANTUM = Decimal(1).scaleb(-RATE_PLACES)


@dataclass(frozen=True)
class Quote:
    side: QuoteSide
    amount: Decimal
    rate: Decimal
    result: Decimal


def rate_from_bps(usd_value_bps: int) -> Decimal:
    """Convert an upstream *_usd_value_bps integer into a Decimal rate."""
    if usd_value_bps <= 0:
        raise ValueError(f"usd_value_bps must be positive, got {usd_value_bps}")
    return (Decimal(usd_value_bps) / RATE_SCALE).quantize(
        _RATE_QUANTUM, rounding=ROUND_HALF_EVEN,
    )


def compute_quote(side: QuoteSide, amount: Decimal, rate: Decimal) -> Quote:
    """Convert amount in the direction given by side."""
    if amount <= 0:
        raise ValueError(f"amount must be positive, got {amount}")
    if rate <= 0:
        raise ValueError(f"rate must be positive, got {rate}")

    rate = rate.quantize(_RATE_QUANTUM, rounding=ROUND_HALF_EVEN)
    if side is QuoteSide.MINT:
        raw = amount / rate
    else:
        raw = amount * rate
    return Quote(
        side=side,
        amount=amount,
        rate=rate,
        result=raw.quantize(_QUOTE_QUANTUM, rounding=ROUND_DOWN),
    )
