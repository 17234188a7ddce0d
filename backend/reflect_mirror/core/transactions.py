"""Placeholder Transactions: deterministic base64 stand-ins for unsigned transactions.

Invariants:
    - encode_placeholder_transaction is pure: same kind/cluster/fields → same string
    - Output is valid base64 of a canonical JSON document (sorted keys, no whitespace)
    - Decimal values are rendered with str(), never float()
    - The first decoded byte is PLACEHOLDER_VERSION so a real builder can be told apart
"""

import base64
import json
from decimal import Decimal
from enum import Enum
from typing import Any

from reflect_mirror.core.domain_types import Cluster, TransactionKind

PLACEHOLDER_VERSION = 0x00


def encode_placeholder_transaction(
    kind: TransactionKind, cluster: Cluster, fields: dict[str, Any],
) -> str:
    """Encode a placeholder transaction for kind on cluster."""
    document = {
        "kind": kind.value,
        "cluster": cluster.value,
        "fields": {k: _canonical(v) for k, v in fields.items() if v is not None},
    }
    body = json.dumps(document, sort_keys=True, separators=(",", ":"))
    return base64.b64encode(bytes([PLACEHOLDER_VERSION]) + body.encode()).decode()


def decode_placeholder_transaction(transaction: str) -> dict[str, Any]:
    """Inverse of encode_placeholder_transaction. Raises ValueError on foreign input."""
    raw = base64.b64decode(transaction, validate=True)
    if not raw or raw[0] != PLACEHOLDER_VERSION:
        raise ValueError("not a placeholder transaction")
    return json.loads(raw[1:].decode())


def _canonical(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value
