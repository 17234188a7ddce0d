"""Route Context: what a handler may reach besides its validated request."""

from dataclasses import dataclass

from reflect_mirror.config import Settings
from reflect_mirror.core.repository_protocols import IntegrationStore, MarketDataSource
from reflect_mirror.core.errors import (
    FieldViolation, InputValidationError, ResourceNotFoundError, ValidationRule,
)
from reflect_mirror.schemas.stablecoin import StablecoinInfo


@dataclass(frozen=True)
class RouteContext:
    settings: Settings
    market: MarketDataSource
    store: IntegrationStore

    async def require_stablecoin(self, symbol: str) -> StablecoinInfo:
        """Catalog lookup. Unknown symbols are a 404, not a validation error."""
        info = await self.market.get_stablecoin(symbol)
        if info is None:
            raise ResourceNotFoundError("Stablecoin", symbol)
        return info

    async def resolve_stablecoin(
        self, symbol: str | None, index: int | None,
    ) -> StablecoinInfo:
        """Resolve a coin named by symbol or by catalog index. Symbol wins if both are sent."""
        if symbol is not None:
            return await self.require_stablecoin(symbol)
        if index is None:
            raise InputValidationError([
                FieldViolation(
                    "stablecoin", ValidationRule.MISSING_FIELD,
                    "stablecoin or stablecoinIndex is required",
                ),
            ])
        for info in await self.market.list_stablecoins():
            if info.index == index:
                return info
        raise ResourceNotFoundError("Stablecoin index", str(index))
