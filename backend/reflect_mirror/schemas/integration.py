"""Integration Schemas: whitelabel integration requests and config views.

Invariants:
    - IntegrationConfig never carries the literal API key, only ApiKeyDescriptor
    - ApiKeySecret is the only model with the literal key; it is returned by reveal and rotate only
    - expectedVersion, when present, turns a mutation into compare-and-swap
    - Every integration-scoped request identifies its integration by integrationId (32 hex chars)
"""

from datetime import datetime

from pydantic import Field

from reflect_mirror.schemas.common import (
    Address, ContractModel, IntegrationIdField, NonNegativeMoney,
    PositiveAmount, Symbol, TimeWindow, TokenSymbol,
)

FLOW_NAME_PATTERN = r"^[a-z0-9_-]{1,64}$"
METADATA_URI_PATTERN = r"^(https?|ipfs|ar)://\S{1,200}$"


# --- Requests -----------------------------------------------------------------

class InitializeIntegrationRequest(ContractModel):
    authority: Address
    name: str = Field(min_length=1, max_length=64)
    stablecoin: Symbol
    fee_bps: int = Field(0, ge=0, le=10_000)


class IntegrationRef(ContractModel):
    """Any request addressing one integration."""
    integration_id: IntegrationIdField


class VersionedIntegrationRef(IntegrationRef):
    expected_version: int | None = Field(None, ge=0)


class IntegrationSignerRequest(IntegrationRef):
    signer: Address


class UserTokenRequest(IntegrationRef):
    user: Address


class FlowInitRequest(IntegrationRef):
    flow_name: str = Field(pattern=FLOW_NAME_PATTERN)
    signer: Address


class IntegrationMintRequest(IntegrationRef):
    amount: PositiveAmount
    recipient: Address
    label: str | None = Field(None, max_length=64)


class IntegrationRedeemRequest(IntegrationRef):
    amount: PositiveAmount
    holder: Address
    label: str | None = Field(None, max_length=64)


class ClaimRequest(IntegrationRef):
    claimant: Address


class UpdateConfigRequest(VersionedIntegrationRef):
    fee_bps: int | None = Field(None, ge=0, le=10_000)
    name: str | None = Field(None, min_length=1, max_length=64)


class MetadataUploadRequest(VersionedIntegrationRef):
    token_name: str = Field(min_length=1, max_length=32)
    token_symbol: TokenSymbol
    uri: str = Field(pattern=METADATA_URI_PATTERN)


class WhitelistRequest(VersionedIntegrationRef):
    users: list[Address] = Field(min_length=1, max_length=100)


class TransferAuthorityRequest(VersionedIntegrationRef):
    new_authority: Address


class AuthorityQuery(ContractModel):
    authority: Address


class IntegrationEventsQuery(IntegrationRef):
    limit: int = Field(20, ge=1, le=100)


class IntegrationHistoryQuery(IntegrationRef):
    days: int = Field(30, ge=1, le=365)


# --- Responses ----------------------------------------------------------------

class BrandedTokenMeta(ContractModel):
    name: str | None = None
    symbol: str | None = None
    uri: str | None = None


class ApiKeyDescriptor(ContractModel):
    """Public description of an API key: enough to recognize it, not to use it."""
    prefix: str
    last_four: str = Field(min_length=4, max_length=4)
    key_version: int = Field(ge=1)
    rotated_at: datetime


class IntegrationConfig(ContractModel):
    integration_id: str
    authority: str
    name: str
    stablecoin: str
    fee_bps: int = Field(ge=0, le=10_000)
    branded_token: BrandedTokenMeta
    api_key: ApiKeyDescriptor
    whitelist_count: int = Field(ge=0)
    flows: list[str]
    token_initialized: bool
    vault_initialized: bool
    version: int = Field(ge=1)
    created_at: datetime
    updated_at: datetime


class ApiKeySecret(ContractModel):
    integration_id: str
    api_key: str
    key_version: int = Field(ge=1)
    version: int = Field(ge=1)


class WhitelistResult(ContractModel):
    integration_id: str
    added: int = Field(ge=0)
    whitelist_count: int = Field(ge=0)
    version: int = Field(ge=1)


class IntegrationStats(ContractModel):
    integration_id: str
    stablecoin: str
    total_minted: NonNegativeMoney
    total_redeemed: NonNegativeMoney
    outstanding_supply: NonNegativeMoney
    holders: int = Field(ge=0)
    window: TimeWindow


class IntegrationStatsPoint(ContractModel):
    timestamp: datetime
    minted: NonNegativeMoney
    redeemed: NonNegativeMoney
