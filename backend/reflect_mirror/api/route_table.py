"""Route Table: every public endpoint, declared once, in one place.

Invariants:
    - (method, path) pairs are unique; check_unique raises RouteConfigurationError otherwise
    - Every route names its request schema, response schema and handler explicitly
    - strict routes reject unknown input fields; all others ignore them
    - envelope=False only for GET / and GET /health
    - Static path segments are declared before templated ones under the same prefix

Design Decisions:
    - Explicit tuple over decorators or auto-discovery: adding an endpoint means
      editing this table
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from reflect_mirror.core.domain_types import HandlerKind
from reflect_mirror.core.errors import RouteConfigurationError
from reflect_mirror.schemas.common import EmptyRequest, StatusResponse
from reflect_mirror.schemas.events import (
    IntegrationEvent, RecentEventsQuery, SignerEventsQuery,
)
from reflect_mirror.schemas.integration import (
    ApiKeySecret, AuthorityQuery, ClaimRequest, FlowInitRequest,
    InitializeIntegrationRequest, IntegrationConfig, IntegrationEventsQuery,
    IntegrationHistoryQuery, IntegrationMintRequest, IntegrationRedeemRequest,
    IntegrationRef, IntegrationSignerRequest, IntegrationStats,
    IntegrationStatsPoint, MetadataUploadRequest, TransferAuthorityRequest,
    UpdateConfigRequest, UserTokenRequest, VersionedIntegrationRef,
    WhitelistRequest, WhitelistResult,
)
from reflect_mirror.schemas.stablecoin import (
    ApyHistoryQuery, ApyRecord, ExchangeRateRecord, QuoteRequest, QuoteResponse,
    RateHistoryQuery, StablecoinInfo, StablecoinPath, StablecoinTxRequest, SupplyCap,
)
from reflect_mirror.schemas.stats import ProtocolStats, StatsHistoryQuery, TvlVolumePoint
from reflect_mirror.schemas.transactions import TransactionDescriptor
from reflect_mirror.services import (
    handle_events, handle_health, handle_integration_admin,
    handle_integration_reads, handle_integration_tx, handle_stablecoins,
    handle_stats,
)
from reflect_mirror.services.route_context import RouteContext

Handler = Callable[[Any, RouteContext], Awaitable[Any]]


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    name: str
    handler: Handler
    request_schema: type[BaseModel]
    response_schema: Any
    kind: HandlerKind
    strict: bool = False
    envelope: bool = True


GET = "GET"
POST = "POST"
READ = HandlerKind.READ
TX = HandlerKind.TRANSACTION
MUTATION = HandlerKind.MUTATION

ROUTE_TABLE: tuple[Route, ...] = (
    # Liveness
    Route(GET, "/", "root", handle_health.root,
          EmptyRequest, StatusResponse, READ, envelope=False),
    Route(GET, "/health", "health", handle_health.health,
          EmptyRequest, StatusResponse, READ, envelope=False),

    # Stablecoins: reads
    Route(GET, "/stablecoins", "stablecoins.list",
          handle_stablecoins.list_stablecoins,
          EmptyRequest, list[StablecoinInfo], READ),
    Route(GET, "/stablecoins/supply-caps", "stablecoins.supply_caps",
          handle_stablecoins.list_supply_caps,
          EmptyRequest, list[SupplyCap], READ),
    Route(GET, "/stablecoins/apy", "stablecoins.apy",
          handle_stablecoins.list_current_apys,
          EmptyRequest, list[ApyRecord], READ),
    Route(GET, "/stablecoins/rates/latest", "stablecoins.rates_latest",
          handle_stablecoins.list_latest_rates,
          EmptyRequest, list[ExchangeRateRecord], READ),
    Route(GET, "/stablecoins/{symbol}/apy", "stablecoins.symbol_apy",
          handle_stablecoins.get_apy,
          StablecoinPath, ApyRecord, READ),
    Route(GET, "/stablecoins/{symbol}/apy/history", "stablecoins.symbol_apy_history",
          handle_stablecoins.get_apy_history,
          ApyHistoryQuery, list[ApyRecord], READ),
    Route(GET, "/stablecoins/{symbol}/rate", "stablecoins.symbol_rate",
          handle_stablecoins.get_rate,
          StablecoinPath, ExchangeRateRecord, READ),
    Route(GET, "/stablecoins/{symbol}/rate/history", "stablecoins.symbol_rate_history",
          handle_stablecoins.get_rate_history,
          RateHistoryQuery, list[ExchangeRateRecord], READ),

    # Stablecoins: upstream path spellings of the reads above
    Route(GET, "/stablecoins/exchange-rates", "stablecoins.exchange_rates",
          handle_stablecoins.list_latest_rates,
          EmptyRequest, list[ExchangeRateRecord], READ),
    Route(GET, "/stablecoins/{symbol}/historical-apy", "stablecoins.symbol_historical_apy",
          handle_stablecoins.get_apy_history,
          ApyHistoryQuery, list[ApyRecord], READ),
    Route(GET, "/stablecoins/{symbol}/realtime-rate", "stablecoins.symbol_realtime_rate",
          handle_stablecoins.get_rate,
          StablecoinPath, ExchangeRateRecord, READ),
    Route(GET, "/stablecoins/{symbol}/historical-rates", "stablecoins.symbol_historical_rates",
          handle_stablecoins.get_rate_history,
          RateHistoryQuery, list[ExchangeRateRecord], READ),

    # Stablecoins: quote and transactions
    Route(POST, "/stablecoins/quote", "stablecoins.quote",
          handle_stablecoins.quote,
          QuoteRequest, QuoteResponse, HandlerKind.QUOTE),
    Route(POST, "/stablecoins/mint/tx", "stablecoins.mint_tx",
          handle_stablecoins.build_mint_tx,
          StablecoinTxRequest, TransactionDescriptor, TX),
    Route(POST, "/stablecoins/burn/tx", "stablecoins.burn_tx",
          handle_stablecoins.build_burn_tx,
          StablecoinTxRequest, TransactionDescriptor, TX),

    # Integrations: lifecycle and transactions
    Route(POST, "/integrations/init", "integrations.init",
          handle_integration_admin.initialize_integration,
          InitializeIntegrationRequest, IntegrationConfig, MUTATION),
    Route(POST, "/integrations/token/init", "integrations.token_init",
          handle_integration_tx.initialize_token,
          IntegrationSignerRequest, TransactionDescriptor, MUTATION),
    Route(POST, "/integrations/user-token/init", "integrations.user_token_init",
          handle_integration_tx.initialize_user_token,
          UserTokenRequest, TransactionDescriptor, TX),
    Route(POST, "/integrations/vault/init", "integrations.vault_init",
          handle_integration_tx.initialize_vault,
          IntegrationSignerRequest, TransactionDescriptor, MUTATION),
    Route(POST, "/integrations/flow/init", "integrations.flow_init",
          handle_integration_tx.initialize_flow,
          FlowInitRequest, TransactionDescriptor, MUTATION),
    Route(POST, "/integrations/mint/tx", "integrations.mint_tx",
          handle_integration_tx.build_mint_tx,
          IntegrationMintRequest, TransactionDescriptor, TX),
    Route(POST, "/integrations/mint-whitelabel", "integrations.mint_whitelabel",
          handle_integration_tx.build_mint_whitelabel_tx,
          IntegrationMintRequest, TransactionDescriptor, TX),
    Route(POST, "/integrations/redeem/tx", "integrations.redeem_tx",
          handle_integration_tx.build_redeem_tx,
          IntegrationRedeemRequest, TransactionDescriptor, TX),
    Route(POST, "/integrations/redeem-whitelabel", "integrations.redeem_whitelabel",
          handle_integration_tx.build_redeem_whitelabel_tx,
          IntegrationRedeemRequest, TransactionDescriptor, TX),
    Route(POST, "/integrations/claim/tx", "integrations.claim_tx",
          handle_integration_tx.build_claim_tx,
          ClaimRequest, TransactionDescriptor, TX),

    # Integrations: management
    Route(GET, "/integrations/config", "integrations.config",
          handle_integration_admin.get_config,
          IntegrationRef, IntegrationConfig, READ),
    Route(POST, "/integrations/config/update", "integrations.config_update",
          handle_integration_admin.update_config,
          UpdateConfigRequest, IntegrationConfig, MUTATION),
    Route(POST, "/integrations/metadata/upload", "integrations.metadata_upload",
          handle_integration_admin.upload_metadata,
          MetadataUploadRequest, IntegrationConfig, MUTATION),
    Route(GET, "/integrations/by-authority", "integrations.by_authority",
          handle_integration_admin.list_by_authority,
          AuthorityQuery, list[IntegrationConfig], READ),
    Route(POST, "/integrations/whitelist", "integrations.whitelist",
          handle_integration_admin.whitelist_users,
          WhitelistRequest, WhitelistResult, MUTATION),
    Route(POST, "/integrations/api-key/reveal", "integrations.api_key_reveal",
          handle_integration_admin.reveal_api_key,
          IntegrationRef, ApiKeySecret, READ, strict=True),
    Route(POST, "/integrations/api-key/rotate", "integrations.api_key_rotate",
          handle_integration_admin.rotate_api_key,
          VersionedIntegrationRef, ApiKeySecret, MUTATION, strict=True),
    Route(POST, "/integrations/transfer-authority", "integrations.transfer_authority",
          handle_integration_admin.transfer_authority,
          TransferAuthorityRequest, IntegrationConfig, MUTATION, strict=True),

    # Integrations: reads
    Route(GET, "/integrations/stats", "integrations.stats",
          handle_integration_reads.get_stats,
          IntegrationRef, IntegrationStats, READ),
    Route(GET, "/integrations/historical-stats", "integrations.historical_stats",
          handle_integration_reads.get_historical_stats,
          IntegrationHistoryQuery, list[IntegrationStatsPoint], READ),
    Route(GET, "/integrations/events", "integrations.events",
          handle_integration_reads.list_events,
          IntegrationEventsQuery, list[IntegrationEvent], READ),
    Route(GET, "/integrations/exchange-rate", "integrations.exchange_rate",
          handle_integration_reads.get_exchange_rate,
          IntegrationRef, ExchangeRateRecord, READ),

    # Protocol stats and events
    Route(GET, "/stats/protocol", "stats.protocol",
          handle_stats.get_protocol_stats,
          EmptyRequest, ProtocolStats, READ),
    Route(GET, "/stats/historical", "stats.historical",
          handle_stats.get_historical,
          StatsHistoryQuery, list[TvlVolumePoint], READ),
    Route(GET, "/events/recent", "events.recent",
          handle_events.list_recent,
          RecentEventsQuery, list[IntegrationEvent], READ),
    Route(GET, "/events/by-signer", "events.by_signer",
          handle_events.list_by_signer,
          SignerEventsQuery, list[IntegrationEvent], READ),
)


def check_unique(routes: tuple[Route, ...]) -> None:
    """Raise RouteConfigurationError on a repeated (method, path) or name."""
    seen: dict[tuple[str, str], str] = {}
    names: set[str] = set()
    for route in routes:
        key = (route.method, route.path)
        if key in seen:
            raise RouteConfigurationError(
                f"Duplicate route {route.method} {route.path} "
                f"({seen[key]} and {route.name})",
            )
        if route.name in names:
            raise RouteConfigurationError(f"Duplicate route name {route.name}")
        seen[key] = route.name
        names.add(route.name)
