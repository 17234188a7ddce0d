"""Stablecoin Handlers: catalog, supply caps, APY, rates, quotes and mint/burn transactions.

Invariants:
    - Every symbol-scoped handler resolves the symbol through the catalog first (404 otherwise)
    - Quote and mint/burn bodies may name the coin by catalog index instead; unknown index is a 404
    - Quotes use the current rate record's rate; see core.quote for direction and rounding
    - A mint quote or mint tx whose result exceeds remaining capacity fails with SUPPLY_CAP_EXCEEDED
    - minimumReceived above the quoted result fails with SLIPPAGE_EXCEEDED
    - History lengths are capped by settings.max_history_days
"""

from decimal import Decimal

from reflect_mirror.core.domain_types import QuoteSide, TransactionKind
from reflect_mirror.core.errors import BusinessRuleError
from reflect_mirror.core.quote import Quote, compute_quote
from reflect_mirror.schemas.common import EmptyRequest
from reflect_mirror.schemas.stablecoin import (
    ApyHistoryQuery, ApyRecord, ExchangeRateRecord, QuoteRequest, QuoteResponse,
    RateHistoryQuery, StablecoinInfo, StablecoinPath, StablecoinTxRequest, SupplyCap,
)
from reflect_mirror.schemas.transactions import TransactionDescriptor
from reflect_mirror.services.build_transaction import build_transaction
from reflect_mirror.services.route_context import RouteContext


async def list_stablecoins(
    request: EmptyRequest, ctx: RouteContext,
) -> list[StablecoinInfo]:
    return await ctx.market.list_stablecoins()


async def list_supply_caps(
    request: EmptyRequest, ctx: RouteContext,
) -> list[SupplyCap]:
    return await ctx.market.supply_caps()


async def list_current_apys(
    request: EmptyRequest, ctx: RouteContext,
) -> list[ApyRecord]:
    return [
        await ctx.market.current_apy(info.symbol)
        for info in await ctx.market.list_stablecoins()
    ]


async def get_apy(request: StablecoinPath, ctx: RouteContext) -> ApyRecord:
    await ctx.require_stablecoin(request.symbol)
    return await ctx.market.current_apy(request.symbol)


async def get_apy_history(
    request: ApyHistoryQuery, ctx: RouteContext,
) -> list[ApyRecord]:
    await ctx.require_stablecoin(request.symbol)
    days = min(request.days, ctx.settings.max_history_days)
    return await ctx.market.apy_history(request.symbol, days)


async def list_latest_rates(
    request: EmptyRequest, ctx: RouteContext,
) -> list[ExchangeRateRecord]:
    return [
        await ctx.market.current_rate(info.symbol)
        for info in await ctx.market.list_stablecoins()
    ]


async def get_rate(
    request: StablecoinPath, ctx: RouteContext,
) -> ExchangeRateRecord:
    await ctx.require_stablecoin(request.symbol)
    return await ctx.market.current_rate(request.symbol)


async def get_rate_history(
    request: RateHistoryQuery, ctx: RouteContext,
) -> list[ExchangeRateRecord]:
    await ctx.require_stablecoin(request.symbol)
    days = min(request.days, ctx.settings.max_history_days)
    return await ctx.market.rate_history(request.symbol, days)


async def quote(request: QuoteRequest, ctx: RouteContext) -> QuoteResponse:
    """Convert amount at the current rate; mint quotes must fit the supply cap."""
    info = await ctx.resolve_stablecoin(request.stablecoin, request.stablecoin_index)
    result = await quote_amount(ctx, info.symbol, request.side, request.amount)
    return QuoteResponse(
        stablecoin=info.symbol,
        amount=request.amount,
        side=request.side,
        computed_rate=result.rate,
        result_amount=result.result,
    )


async def build_mint_tx(
    request: StablecoinTxRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    return await _build_swap_tx(request, ctx, QuoteSide.MINT, TransactionKind.MINT)


async def build_burn_tx(
    request: StablecoinTxRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    return await _build_swap_tx(request, ctx, QuoteSide.REDEEM, TransactionKind.BURN)


async def quote_amount(
    ctx: RouteContext, symbol: str, side: QuoteSide, amount: Decimal,
) -> Quote:
    """Catalog check, current-rate quote and, for mints, the supply-cap check."""
    await ctx.require_stablecoin(symbol)
    rate = await ctx.market.current_rate(symbol)
    result = compute_quote(side, amount, rate.rate)
    if side is QuoteSide.MINT:
        await _check_supply_capacity(ctx, symbol, result.result)
    return result


async def _build_swap_tx(
    request: StablecoinTxRequest,
    ctx: RouteContext,
    side: QuoteSide,
    kind: TransactionKind,
) -> TransactionDescriptor:
    info = await ctx.resolve_stablecoin(request.stablecoin, request.stablecoin_index)
    result = await quote_amount(ctx, info.symbol, side, request.amount)
    if (
        request.minimum_received is not None
        and result.result < request.minimum_received
    ):
        raise BusinessRuleError(
            f"Quoted {result.result} is below minimumReceived "
            f"{request.minimum_received}",
            "SLIPPAGE_EXCEEDED",
        )
    return build_transaction(
        ctx, kind,
        signer=request.signer,
        stablecoin=info.symbol,
        cluster=request.cluster,
        amount=request.amount,
        minimum_received=request.minimum_received,
        extra={"collateralMint": request.collateral_mint},
    )


async def _check_supply_capacity(
    ctx: RouteContext, symbol: str, minted: Decimal,
) -> None:
    for cap in await ctx.market.supply_caps():
        if cap.stablecoin == symbol and minted > cap.remaining_capacity:
            raise BusinessRuleError(
                f"Minting {minted} {symbol} exceeds remaining capacity "
                f"{cap.remaining_capacity}",
                "SUPPLY_CAP_EXCEEDED",
            )
