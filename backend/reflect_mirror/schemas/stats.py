"""Protocol Statistics Schemas."""

from datetime import datetime

from pydantic import Field

from reflect_mirror.schemas.common import ContractModel, NonNegativeMoney, TimeWindow


class StatsHistoryQuery(ContractModel):
    days: int = Field(30, ge=1, le=365)


class ProtocolStats(ContractModel):
    total_value_locked: NonNegativeMoney
    volume: NonNegativeMoney
    total_minted: NonNegativeMoney
    total_redeemed: NonNegativeMoney
    window: TimeWindow


class TvlVolumePoint(ContractModel):
    timestamp: datetime
    tvl: NonNegativeMoney
    volume: NonNegativeMoney
