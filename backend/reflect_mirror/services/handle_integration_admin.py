"""Integration Admin Handlers: create, configure, whitelist, key management, authority.

Invariants:
    - IntegrationConfig views are built by integration_config() and never hold the key
    - reveal/rotate are the only handlers returning the literal API key
    - Every mutation goes through store.mutate (per-integration lock, version bump, event)
    - expectedVersion is forwarded untouched; the store decides CONCURRENCY_CONFLICT

Design Decisions:
    - Mutations are pure functions from core.integrations wrapped in lambdas here, so
      the store never learns about individual operations
"""

from reflect_mirror.core.api_keys import describe_api_key, generate_api_key
from reflect_mirror.core.domain_types import EventKind
from reflect_mirror.core.errors import (
    FieldViolation, InputValidationError, ValidationRule,
)
from reflect_mirror.core.integrations import (
    IntegrationRecord, apply_authority_transfer, apply_config_update,
    apply_key_rotation, apply_metadata, apply_whitelist,
)
from reflect_mirror.schemas.integration import (
    ApiKeyDescriptor, ApiKeySecret, AuthorityQuery, BrandedTokenMeta,
    InitializeIntegrationRequest, IntegrationConfig, IntegrationRef,
    MetadataUploadRequest, TransferAuthorityRequest, UpdateConfigRequest,
    VersionedIntegrationRef, WhitelistRequest, WhitelistResult,
)
from reflect_mirror.services.route_context import RouteContext


def integration_config(record: IntegrationRecord, key_prefix: str) -> IntegrationConfig:
    """Public view of a record. The API key is reduced to prefix and last four."""
    prefix, last_four = describe_api_key(record.api_key, key_prefix)
    return IntegrationConfig(
        integration_id=record.integration_id,
        authority=record.authority,
        name=record.name,
        stablecoin=record.stablecoin,
        fee_bps=record.fee_bps,
        branded_token=BrandedTokenMeta(
            name=record.token_name, symbol=record.token_symbol, uri=record.token_uri,
        ),
        api_key=ApiKeyDescriptor(
            prefix=prefix,
            last_four=last_four,
            key_version=record.key_version,
            rotated_at=record.key_rotated_at,
        ),
        whitelist_count=len(record.whitelist),
        flows=list(record.flows),
        token_initialized=record.token_initialized,
        vault_initialized=record.vault_initialized,
        version=record.version,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _api_key_secret(record: IntegrationRecord) -> ApiKeySecret:
    return ApiKeySecret(
        integration_id=record.integration_id,
        api_key=record.api_key,
        key_version=record.key_version,
        version=record.version,
    )


async def initialize_integration(
    request: InitializeIntegrationRequest, ctx: RouteContext,
) -> IntegrationConfig:
    await ctx.require_stablecoin(request.stablecoin)
    record = await ctx.store.create(
        authority=request.authority,
        name=request.name,
        stablecoin=request.stablecoin,
        fee_bps=request.fee_bps,
    )
    return integration_config(record, ctx.settings.api_key_prefix)


async def get_config(
    request: IntegrationRef, ctx: RouteContext,
) -> IntegrationConfig:
    record = await ctx.store.get(request.integration_id)
    return integration_config(record, ctx.settings.api_key_prefix)


async def update_config(
    request: UpdateConfigRequest, ctx: RouteContext,
) -> IntegrationConfig:
    record, _ = await ctx.store.mutate(
        request.integration_id,
        lambda r: (apply_config_update(r, request.fee_bps, request.name), None),
        EventKind.CONFIG_UPDATE,
        expected_version=request.expected_version,
        payload={"feeBps": request.fee_bps, "name": request.name},
    )
    return integration_config(record, ctx.settings.api_key_prefix)


async def upload_metadata(
    request: MetadataUploadRequest, ctx: RouteContext,
) -> IntegrationConfig:
    record, _ = await ctx.store.mutate(
        request.integration_id,
        lambda r: (
            apply_metadata(r, request.token_name, request.token_symbol, request.uri),
            None,
        ),
        EventKind.METADATA_UPLOADED,
        expected_version=request.expected_version,
        payload={"tokenSymbol": request.token_symbol, "uri": request.uri},
    )
    return integration_config(record, ctx.settings.api_key_prefix)


async def list_by_authority(
    request: AuthorityQuery, ctx: RouteContext,
) -> list[IntegrationConfig]:
    records = await ctx.store.list_by_authority(request.authority)
    return [integration_config(r, ctx.settings.api_key_prefix) for r in records]


async def whitelist_users(
    request: WhitelistRequest, ctx: RouteContext,
) -> WhitelistResult:
    batch_limit = ctx.settings.max_whitelist_batch
    if len(request.users) > batch_limit:
        raise InputValidationError([
            FieldViolation(
                "users", ValidationRule.OUT_OF_RANGE,
                f"at most {batch_limit} users per request",
            ),
        ])
    record, added = await ctx.store.mutate(
        request.integration_id,
        lambda r: apply_whitelist(r, request.users, ctx.settings.max_whitelisted_users),
        EventKind.WHITELIST_UPDATED,
        expected_version=request.expected_version,
        payload={"users": len(request.users)},
    )
    return WhitelistResult(
        integration_id=record.integration_id,
        added=added,
        whitelist_count=len(record.whitelist),
        version=record.version,
    )


async def reveal_api_key(
    request: IntegrationRef, ctx: RouteContext,
) -> ApiKeySecret:
    return _api_key_secret(await ctx.store.get(request.integration_id))


async def rotate_api_key(
    request: VersionedIntegrationRef, ctx: RouteContext,
) -> ApiKeySecret:
    new_key = generate_api_key(ctx.settings.api_key_prefix)
    record, _ = await ctx.store.mutate(
        request.integration_id,
        lambda r: (apply_key_rotation(r, new_key, ctx.store.now()), None),
        EventKind.API_KEY_ROTATED,
        expected_version=request.expected_version,
    )
    return _api_key_secret(record)


async def transfer_authority(
    request: TransferAuthorityRequest, ctx: RouteContext,
) -> IntegrationConfig:
    record, _ = await ctx.store.mutate(
        request.integration_id,
        lambda r: (apply_authority_transfer(r, request.new_authority), None),
        EventKind.AUTHORITY_TRANSFERRED,
        expected_version=request.expected_version,
        payload={"newAuthority": request.new_authority},
    )
    return integration_config(record, ctx.settings.api_key_prefix)
