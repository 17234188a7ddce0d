"""Integration Transaction Handlers: token/vault/flow setup and whitelabel mint/redeem/claim.

Invariants:
    - token, vault and flow init mark the record (409 when already done) and return a tx
    - user-token init only returns a tx; it requires the integration token to exist
    - mint, redeem and claim require an initialized vault (409 VAULT_NOT_INITIALIZED)
    - Integration mints pass the same supply-cap check as direct mints
    - Transactions are built for settings.default_cluster
"""

from reflect_mirror.core.domain_types import EventKind, QuoteSide, TransactionKind
from reflect_mirror.core.errors import BusinessRuleError
from reflect_mirror.core.integrations import (
    IntegrationRecord, apply_flow_initialized, apply_token_initialized,
    apply_vault_initialized,
)
from reflect_mirror.schemas.integration import (
    ClaimRequest, FlowInitRequest, IntegrationMintRequest, IntegrationRedeemRequest,
    IntegrationSignerRequest, UserTokenRequest,
)
from reflect_mirror.schemas.transactions import TransactionDescriptor
from reflect_mirror.services.build_transaction import build_transaction
from reflect_mirror.services.handle_stablecoins import quote_amount
from reflect_mirror.services.route_context import RouteContext


async def initialize_token(
    request: IntegrationSignerRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    record, _ = await ctx.store.mutate(
        request.integration_id,
        lambda r: (apply_token_initialized(r), None),
        EventKind.TOKEN_INITIALIZED,
        signer=request.signer,
    )
    return build_transaction(
        ctx, TransactionKind.INITIALIZE_TOKEN,
        signer=request.signer,
        stablecoin=record.stablecoin,
        integration_id=record.integration_id,
        extra={"tokenSymbol": record.token_symbol},
    )


async def initialize_user_token(
    request: UserTokenRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    record = await ctx.store.get(request.integration_id)
    if not record.token_initialized:
        raise BusinessRuleError(
            f"Integration '{record.integration_id}' has no stablecoin token yet",
            "TOKEN_NOT_INITIALIZED",
        )
    return build_transaction(
        ctx, TransactionKind.INITIALIZE_USER_TOKEN,
        signer=request.user,
        stablecoin=record.stablecoin,
        integration_id=record.integration_id,
    )


async def initialize_vault(
    request: IntegrationSignerRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    record, _ = await ctx.store.mutate(
        request.integration_id,
        lambda r: (apply_vault_initialized(r), None),
        EventKind.VAULT_INITIALIZED,
        signer=request.signer,
    )
    return build_transaction(
        ctx, TransactionKind.INITIALIZE_VAULT,
        signer=request.signer,
        stablecoin=record.stablecoin,
        integration_id=record.integration_id,
    )


async def initialize_flow(
    request: FlowInitRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    record, _ = await ctx.store.mutate(
        request.integration_id,
        lambda r: (apply_flow_initialized(r, request.flow_name), None),
        EventKind.FLOW_INITIALIZED,
        signer=request.signer,
        payload={"flowName": request.flow_name},
    )
    return build_transaction(
        ctx, TransactionKind.INITIALIZE_FLOW,
        signer=request.signer,
        stablecoin=record.stablecoin,
        integration_id=record.integration_id,
        extra={"flowName": request.flow_name},
    )


async def build_mint_tx(
    request: IntegrationMintRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    return await _build_mint(request, ctx, TransactionKind.INTEGRATION_MINT)


async def build_mint_whitelabel_tx(
    request: IntegrationMintRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    return await _build_mint(request, ctx, TransactionKind.MINT_AND_WHITELABEL)


async def build_redeem_tx(
    request: IntegrationRedeemRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    return await _build_redeem(request, ctx, TransactionKind.INTEGRATION_REDEEM)


async def build_redeem_whitelabel_tx(
    request: IntegrationRedeemRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    return await _build_redeem(request, ctx, TransactionKind.REDEEM_WHITELABELED)


async def build_claim_tx(
    request: ClaimRequest, ctx: RouteContext,
) -> TransactionDescriptor:
    record = await _require_vault(ctx, request.integration_id)
    return build_transaction(
        ctx, TransactionKind.CLAIM,
        signer=request.claimant,
        stablecoin=record.stablecoin,
        integration_id=record.integration_id,
    )


async def _build_mint(
    request: IntegrationMintRequest, ctx: RouteContext, kind: TransactionKind,
) -> TransactionDescriptor:
    record = await _require_vault(ctx, request.integration_id)
    await quote_amount(ctx, record.stablecoin, QuoteSide.MINT, request.amount)
    return build_transaction(
        ctx, kind,
        signer=request.recipient,
        stablecoin=record.stablecoin,
        integration_id=record.integration_id,
        amount=request.amount,
        extra={"label": request.label, "feeBps": record.fee_bps},
    )


async def _build_redeem(
    request: IntegrationRedeemRequest, ctx: RouteContext, kind: TransactionKind,
) -> TransactionDescriptor:
    record = await _require_vault(ctx, request.integration_id)
    return build_transaction(
        ctx, kind,
        signer=request.holder,
        stablecoin=record.stablecoin,
        integration_id=record.integration_id,
        amount=request.amount,
        extra={"label": request.label, "feeBps": record.fee_bps},
    )


async def _require_vault(ctx: RouteContext, integration_id: str) -> IntegrationRecord:
    record = await ctx.store.get(integration_id)
    if not record.vault_initialized:
        raise BusinessRuleError(
            f"Integration '{integration_id}' has no vault yet",
            "VAULT_NOT_INITIALIZED",
        )
    return record
