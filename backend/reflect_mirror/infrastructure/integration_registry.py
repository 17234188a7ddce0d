"""In-Memory Integration Registry: process-wide IntegrationStore for the mirror.

Invariants:
    - One asyncio.Lock per integration id; mutations of one id are serialized,
      different ids proceed in parallel
    - Every committed mutation bumps version by exactly 1 and appends one event
    - expected_version mismatch raises ConcurrencyError before the mutation runs
    - A mutation that raises leaves the record and the event log untouched
    - once(): the first producer for an idempotency key runs; later callers get its result
    - At most max_idempotency_keys results are kept; the least recently used is evicted
    - Without expected_version concurrent writers are last-writer-wins

Design Decisions:
    - Placeholder for a real store: owned by AppServices, created in the lifespan,
      closed at shutdown; nothing is persisted
    - Clock injected so tests can pin timestamps
"""

import asyncio
import logging
import uuid
from collections import OrderedDict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Awaitable, Callable, TypeVar

from reflect_mirror.core.api_keys import generate_api_key
from reflect_mirror.core.domain_types import (
    EventId, EventKind, IntegrationId, StablecoinSymbol, WalletAddress,
)
from reflect_mirror.core.errors import ConcurrencyError, ResourceNotFoundError
from reflect_mirror.core.integrations import IntegrationRecord
from reflect_mirror.core.repository_protocols import Mutation
from reflect_mirror.schemas.events import IntegrationEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryIntegrationRegistry:
    """Dict-backed IntegrationStore with per-integration locks and versioning."""

    def __init__(
        self,
        api_key_prefix: str,
        clock: Clock = utc_now,
        max_idempotency_keys: int = 1024,
    ):
        self._api_key_prefix = api_key_prefix
        self._clock = clock
        self._records: dict[str, IntegrationRecord] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._events: list[IntegrationEvent] = []
        self._registry_lock = asyncio.Lock()
        self._max_idempotency_keys = max_idempotency_keys
        self._idempotent_results: OrderedDict[str, object] = OrderedDict()
        self._idempotency_locks: dict[str, asyncio.Lock] = {}
        self._closed = False

    def now(self) -> datetime:
        return self._clock()

    async def create(
        self, authority: str, name: str, stablecoin: str, fee_bps: int,
    ) -> IntegrationRecord:
        now = self.now()
        record = IntegrationRecord(
            integration_id=IntegrationId(uuid.uuid4().hex),
            authority=WalletAddress(authority),
            name=name,
            stablecoin=StablecoinSymbol(stablecoin),
            fee_bps=fee_bps,
            api_key=generate_api_key(self._api_key_prefix),
            key_version=1,
            key_rotated_at=now,
            created_at=now,
            updated_at=now,
        )
        async with self._registry_lock:
            self._ensure_open()
            self._records[record.integration_id] = record
            self._locks[record.integration_id] = asyncio.Lock()
            self._append_event(
                record, EventKind.INTEGRATION_INITIALIZED, authority,
                {"name": name, "stablecoin": stablecoin},
            )
        logger.info(
            f"Integration {record.integration_id} initialized",
            extra={"integration_id": record.integration_id},
        )
        return record

    async def get(self, integration_id: str) -> IntegrationRecord:
        record = self._records.get(integration_id)
        if record is None:
            raise ResourceNotFoundError("Integration", integration_id)
        return record

    async def list_by_authority(self, authority: str) -> list[IntegrationRecord]:
        return sorted(
            (r for r in self._records.values() if r.authority == authority),
            key=lambda r: (r.created_at, r.integration_id),
        )

    async def mutate(
        self,
        integration_id: str,
        mutation: Mutation[T],
        event_kind: EventKind,
        signer: str | None = None,
        expected_version: int | None = None,
        payload: dict | None = None,
    ) -> tuple[IntegrationRecord, T]:
        """Apply mutation under the integration's lock and commit it."""
        lock = self._locks.get(integration_id)
        if lock is None:
            raise ResourceNotFoundError("Integration", integration_id)
        async with lock:
            self._ensure_open()
            current = self._records[integration_id]
            if expected_version is not None and expected_version != current.version:
                raise ConcurrencyError(
                    integration_id, expected_version, current.version,
                )
            updated, result = mutation(current)
            committed = replace(
                updated,
                integration_id=current.integration_id,
                version=current.version + 1,
                updated_at=self.now(),
            )
            self._records[integration_id] = committed
            self._append_event(
                committed, event_kind, signer or current.authority, payload or {},
            )
        logger.info(
            f"Integration {integration_id} {event_kind.value} -> v{committed.version}",
            extra={"integration_id": integration_id},
        )
        return committed, result

    async def events(
        self,
        integration_id: str | None = None,
        signer: str | None = None,
        kind: EventKind | None = None,
        limit: int = 20,
    ) -> list[IntegrationEvent]:
        """Recorded events, newest first, filtered and truncated to limit."""
        selected = [
            e for e in reversed(self._events)
            if (integration_id is None or e.integration_id == integration_id)
            and (signer is None or e.signer == signer)
            and (kind is None or e.kind == kind)
        ]
        return selected[:limit]

    async def once(
        self, idempotency_key: str, produce: Callable[[], Awaitable[T]],
    ) -> T:
        """Run produce at most once per key; replay the stored result afterwards."""
        async with self._registry_lock:
            lock = self._idempotency_locks.setdefault(idempotency_key, asyncio.Lock())
        async with lock:
            if idempotency_key in self._idempotent_results:
                logger.info(f"Idempotent replay for key {idempotency_key}")
                self._idempotent_results.move_to_end(idempotency_key)
                return self._idempotent_results[idempotency_key]  # type: ignore[return-value]
            result = await produce()
            self._idempotent_results[idempotency_key] = result
            self._evict_idempotent_results()
            return result

    def _evict_idempotent_results(self) -> None:
        while len(self._idempotent_results) > self._max_idempotency_keys:
            evicted, _ = self._idempotent_results.popitem(last=False)
            lock = self._idempotency_locks.get(evicted)
            if lock is not None and not lock.locked():
                del self._idempotency_locks[evicted]
            logger.debug(f"Evicted idempotency key {evicted}")
        # locks left behind by failed producers
        if len(self._idempotency_locks) > self._max_idempotency_keys:
            stale = [
                key for key, lock in self._idempotency_locks.items()
                if key not in self._idempotent_results and not lock.locked()
            ]
            for key in stale:
                del self._idempotency_locks[key]

    async def close(self) -> None:
        async with self._registry_lock:
            self._closed = True
            count = len(self._records)
            self._records.clear()
            self._locks.clear()
            self._events.clear()
            self._idempotent_results.clear()
            self._idempotency_locks.clear()
        logger.info(f"Integration registry closed ({count} integrations dropped)")

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Integration registry is closed")

    def _append_event(
        self, record: IntegrationRecord, kind: EventKind, signer: str, payload: dict,
    ) -> None:
        self._events.append(IntegrationEvent(
            event_id=EventId(f"evt_{uuid.uuid4().hex[:16]}"),
            integration_id=record.integration_id,
            kind=kind,
            signer=signer,
            timestamp=record.updated_at,
            payload=payload,
        ))
