"""Stablecoin Schemas: catalog, supply caps, APY, exchange rates and quotes.

Invariants:
    - Stablecoin symbols are only length-checked here; catalog membership is a handler concern (404)
    - Quote and tx bodies name the coin by symbol or by catalog index (stablecoinIndex)
    - ApyRecord.apy is a percentage >= 0
    - ExchangeRateRecord.rate > 0 and equals receipt_usd_value_bps / 10^9
    - QuoteResponse carries both the rate used and the result, so clients can re-derive it
"""

from datetime import datetime

from pydantic import AliasChoices, Field

from reflect_mirror.core.domain_types import Cluster, QuoteSide
from reflect_mirror.schemas.common import (
    Address, ContractModel, Money, NonNegativeMoney, PositiveAmount, Rate, Symbol,
)


# --- Requests -----------------------------------------------------------------

class StablecoinPath(ContractModel):
    """Path parameter of every /stablecoins/{symbol}/... route."""
    symbol: Symbol


class ApyHistoryQuery(StablecoinPath):
    days: int = Field(30, ge=1, le=365)


class RateHistoryQuery(StablecoinPath):
    days: int = Field(7, ge=1, le=365)


class QuoteRequest(ContractModel):
    """POST /stablecoins/quote body. Either stablecoin or stablecoinIndex names the coin."""
    stablecoin: Symbol | None = None
    stablecoin_index: int | None = Field(None, ge=0)
    amount: PositiveAmount
    side: QuoteSide


class StablecoinTxRequest(ContractModel):
    """POST /stablecoins/mint/tx and /stablecoins/burn/tx body (+ ?cluster=)."""
    stablecoin: Symbol | None = None
    stablecoin_index: int | None = Field(None, ge=0)
    amount: PositiveAmount = Field(
        validation_alias=AliasChoices("amount", "depositAmount"),
    )
    signer: Address
    minimum_received: NonNegativeMoney | None = None
    collateral_mint: Address | None = None
    cluster: Cluster | None = None


# --- Responses ----------------------------------------------------------------

class StablecoinInfo(ContractModel):
    """One entry of the stablecoin catalog."""
    symbol: str
    index: int = Field(ge=0)
    name: str
    decimals: int = Field(ge=0, le=18)
    collateral: str


class SupplyCap(ContractModel):
    stablecoin: str
    supply_cap: NonNegativeMoney
    current_supply: NonNegativeMoney
    remaining_capacity: NonNegativeMoney
    utilization_percentage: Money = Field(ge=0)


class ApyRecord(ContractModel):
    stablecoin: str
    apy: Money = Field(ge=0)
    timestamp: datetime


class ExchangeRateRecord(ContractModel):
    id: int = Field(ge=0)
    stablecoin: str
    rate: Rate = Field(gt=0)
    base_usd_value_bps: int = Field(gt=0)
    receipt_usd_value_bps: int = Field(gt=0)
    timestamp: datetime


class QuoteResponse(ContractModel):
    stablecoin: str
    amount: Money
    side: QuoteSide
    computed_rate: Rate = Field(gt=0)
    result_amount: NonNegativeMoney
