"""Integration Records: the stored shape of a whitelabel integration and its transitions.

Invariants:
    - IntegrationRecord is frozen; every transition returns a new record
    - Transitions never touch version/updated_at; the store bumps them on commit
    - api_key holds the literal secret and never leaves core/infrastructure except via
      reveal/rotate
    - whitelist is a frozenset: re-whitelisting an address is a no-op
    - Pure: no IO, no clock; callers pass timestamps in

Design Decisions:
    - Dataclass over pydantic model: internal state, not an API contract
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from reflect_mirror.core.domain_types import IntegrationId, StablecoinSymbol, WalletAddress
from reflect_mirror.core.errors import BusinessRuleError


@dataclass(frozen=True)
class IntegrationRecord:
    integration_id: IntegrationId
    authority: WalletAddress
    name: str
    stablecoin: StablecoinSymbol
    fee_bps: int
    api_key: str
    key_version: int
    key_rotated_at: datetime
    created_at: datetime
    updated_at: datetime
    version: int = 1
    token_name: str | None = None
    token_symbol: str | None = None
    token_uri: str | None = None
    whitelist: frozenset[WalletAddress] = field(default_factory=frozenset)
    flows: tuple[str, ...] = ()
    token_initialized: bool = False
    vault_initialized: bool = False


def apply_config_update(
    record: IntegrationRecord, fee_bps: int | None, name: str | None,
) -> IntegrationRecord:
    changes: dict = {}
    if fee_bps is not None:
        changes["fee_bps"] = fee_bps
    if name is not None:
        changes["name"] = name
    return replace(record, **changes)


def apply_metadata(
    record: IntegrationRecord, token_name: str, token_symbol: str, uri: str,
) -> IntegrationRecord:
    return replace(
        record, token_name=token_name, token_symbol=token_symbol, token_uri=uri,
    )


def apply_whitelist(
    record: IntegrationRecord, users: list[str], max_users: int,
) -> tuple[IntegrationRecord, int]:
    """Add users to the whitelist. Returns (record, number newly added)."""
    merged = record.whitelist | frozenset(users)
    if len(merged) > max_users:
        raise BusinessRuleError(
            f"Whitelist would hold {len(merged)} users (limit {max_users})",
            "WHITELIST_LIMIT_REACHED",
        )
    return replace(record, whitelist=merged), len(merged) - len(record.whitelist)


def apply_authority_transfer(
    record: IntegrationRecord, new_authority: str,
) -> IntegrationRecord:
    if new_authority == record.authority:
        raise BusinessRuleError(
            "New authority is already the mint authority",
            "AUTHORITY_UNCHANGED",
        )
    return replace(record, authority=new_authority)


def apply_key_rotation(
    record: IntegrationRecord, new_key: str, rotated_at: datetime,
) -> IntegrationRecord:
    return replace(
        record, api_key=new_key, key_version=record.key_version + 1,
        key_rotated_at=rotated_at,
    )


def apply_token_initialized(record: IntegrationRecord) -> IntegrationRecord:
    if record.token_initialized:
        raise BusinessRuleError(
            f"Integration '{record.integration_id}' already has a stablecoin token",
            "TOKEN_ALREADY_INITIALIZED",
        )
    return replace(record, token_initialized=True)


def apply_vault_initialized(record: IntegrationRecord) -> IntegrationRecord:
    if record.vault_initialized:
        raise BusinessRuleError(
            f"Integration '{record.integration_id}' already has a vault",
            "VAULT_ALREADY_INITIALIZED",
        )
    return replace(record, vault_initialized=True)


def apply_flow_initialized(
    record: IntegrationRecord, flow_name: str,
) -> IntegrationRecord:
    if flow_name in record.flows:
        raise BusinessRuleError(
            f"Flow '{flow_name}' already initialized",
            "FLOW_ALREADY_INITIALIZED",
        )
    return replace(record, flows=record.flows + (flow_name,))
