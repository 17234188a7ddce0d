"""Transaction Schemas: placeholder transaction descriptor returned by every tx builder.

Invariants:
    - `transaction` is base64 text; `placeholder` is always true in this mirror
    - Same inputs produce the same descriptor (no nonces, no clock)
"""

from typing import Literal

from reflect_mirror.core.domain_types import Cluster, TransactionKind
from reflect_mirror.schemas.common import ContractModel, Money


class TransactionDescriptor(ContractModel):
    """Unsigned transaction envelope. A chain-backed builder fills the same shape."""
    kind: TransactionKind
    cluster: Cluster
    signer: str
    stablecoin: str
    integration_id: str | None = None
    amount: Money | None = None
    minimum_received: Money | None = None
    transaction: str
    encoding: Literal["base64"] = "base64"
    placeholder: bool = True
