"""Event Schemas: feed queries and the event record shared by every feed.

Invariants:
    - Feeds are ordered newest first
    - integrationId is null for protocol-level events
    - payload values are JSON scalars (monetary values as fixed-precision strings)
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from reflect_mirror.core.domain_types import EventKind
from reflect_mirror.schemas.common import Address, ContractModel


class RecentEventsQuery(ContractModel):
    limit: int = Field(20, ge=1, le=100)
    kind: EventKind | None = None


class SignerEventsQuery(ContractModel):
    signer: Address
    limit: int = Field(20, ge=1, le=100)


class IntegrationEvent(ContractModel):
    event_id: str
    integration_id: str | None = None
    kind: EventKind
    signer: str
    timestamp: datetime
    payload: dict[str, Any] = Field(default_factory=dict)
