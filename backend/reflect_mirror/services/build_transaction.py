"""Transaction Builder: TransactionDescriptor assembly shared by the tx handlers.

Invariants:
    - The encoded transaction covers every descriptor field plus extra, so two
      descriptors with equal fields carry byte-identical transactions
    - cluster falls back to settings.default_cluster
"""

from decimal import Decimal
from typing import Any

from reflect_mirror.core.domain_types import Cluster, TransactionKind
from reflect_mirror.core.transactions import encode_placeholder_transaction
from reflect_mirror.schemas.transactions import TransactionDescriptor
from reflect_mirror.services.route_context import RouteContext


def build_transaction(
    ctx: RouteContext,
    kind: TransactionKind,
    signer: str,
    stablecoin: str,
    cluster: Cluster | None = None,
    integration_id: str | None = None,
    amount: Decimal | None = None,
    minimum_received: Decimal | None = None,
    extra: dict[str, Any] | None = None,
) -> TransactionDescriptor:
    cluster = cluster or ctx.settings.default_cluster
    fields = {
        "signer": signer,
        "stablecoin": stablecoin,
        "integrationId": integration_id,
        "amount": amount,
        "minimumReceived": minimum_received,
        **(extra or {}),
    }
    return TransactionDescriptor(
        kind=kind,
        cluster=cluster,
        signer=signer,
        stablecoin=stablecoin,
        integration_id=integration_id,
        amount=amount,
        minimum_received=minimum_received,
        transaction=encode_placeholder_transaction(kind, cluster, fields),
    )
