# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Redis-backed ledger substrate.

Layout, under a configurable prefix:

- ``{prefix}:state:{key}``: current value of a public key
- ``{prefix}:history:{key}``: list of JSON modification entries, oldest first
- ``{prefix}:private:{collection}``: hash of private values by key

Every key read inside a transaction is WATCHed on the transaction's own
connection, and the buffered writes go out in one MULTI/EXEC. A concurrent
change to a watched key makes EXEC fail, which surfaces as
``LedgerConflictError``.
"""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from attrs import field, frozen
from beartype import beartype
from redis.exceptions import RedisError, WatchError

from ..core.config import get_settings
from ..core.errors import LedgerConflictError, LedgerIOError
from .base import Ledger, LedgerTransaction
from .stub import KeyModification

__all__ = ["RedisLedger", "RedisLedgerConfig", "RedisTransaction"]

if TYPE_CHECKING:
    from redis.asyncio import Redis as RedisType
else:
    RedisType = redis.Redis


@frozen
class RedisLedgerConfig:
    """Immutable redis ledger configuration."""

    url: str = field()
    prefix: str = field(default="ledger")
    max_connections: int = field(default=10)


class RedisLedger(Ledger):
    """Ledger stored in Redis.

    Accepts an already-created client (tests pass a fakeredis instance);
    otherwise :py:meth:`connect` builds one from settings.
    """

    def __init__(
        self,
        redis_client: RedisType | None = None,
        config: RedisLedgerConfig | None = None,
    ) -> None:
        self._redis: RedisType | None = redis_client
        self._config = config or self._get_config()

    @staticmethod
    def _get_config() -> RedisLedgerConfig:
        settings = get_settings()
        return RedisLedgerConfig(url=settings.redis_url, prefix=settings.ledger_key_prefix)

    @beartype
    async def connect(self) -> None:
        """Create the Redis connection pool."""
        if self._redis is not None:
            return

        # Values are raw bytes; never decode responses
        self._redis = redis.from_url(
            self._config.url,
            max_connections=self._config.max_connections,
            decode_responses=False,
        )

    @beartype
    async def disconnect(self) -> None:
        """Close the Redis connection pool."""
        if self._redis is None:
            return

        await self._redis.aclose()
        self._redis = None

    @property
    def client(self) -> Any:
        if self._redis is None:
            raise LedgerIOError("Redis ledger not connected")
        return self._redis

    def state_key(self, key: str) -> str:
        return f"{self._config.prefix}:state:{key}"

    def history_key(self, key: str) -> str:
        return f"{self._config.prefix}:history:{key}"

    def private_key(self, collection: str) -> str:
        return f"{self._config.prefix}:private:{collection}"

    def _open(self) -> RedisTransaction:
        return RedisTransaction(self)


def _encode_modification(modification: KeyModification) -> bytes:
    return json.dumps(
        {
            "tx_id": modification.tx_id,
            "timestamp": modification.timestamp,
            "is_delete": modification.is_delete,
            "value": base64.b64encode(modification.value).decode("ascii"),
        },
        separators=(",", ":"),
    ).encode("utf-8")


def _decode_modification(raw: bytes) -> KeyModification:
    data = json.loads(raw)
    return KeyModification(
        tx_id=data["tx_id"],
        timestamp=data["timestamp"],
        is_delete=bool(data.get("is_delete", False)),
        value=base64.b64decode(data.get("value", "")),
    )


class RedisTransaction(LedgerTransaction):
    """Transaction holding a dedicated pipeline connection while it runs."""

    def __init__(self, ledger: RedisLedger) -> None:
        super().__init__()
        self._ledger = ledger
        self._pipe = ledger.client.pipeline(transaction=True)

    async def _read_state(self, key: str) -> bytes:
        state_key = self._ledger.state_key(key)
        try:
            # Once watching, the pipeline executes commands immediately
            await self._pipe.watch(state_key)
            value = await self._pipe.get(state_key)
        except RedisError as exc:
            raise LedgerIOError(str(exc)) from exc
        return value or b""

    async def _read_history(self, key: str) -> list[KeyModification]:
        try:
            entries = await self._ledger.client.lrange(
                self._ledger.history_key(key), 0, -1
            )
        except RedisError as exc:
            raise LedgerIOError(str(exc)) from exc
        return [_decode_modification(entry) for entry in entries]

    async def _read_private(self, collection: str, key: str) -> bytes:
        try:
            value = await self._ledger.client.hget(
                self._ledger.private_key(collection), key
            )
        except RedisError as exc:
            raise LedgerIOError(str(exc)) from exc
        return value or b""

    async def _apply(self, timestamp: str) -> None:
        ledger = self._ledger
        pipe = self._pipe
        pipe.multi()
        for key, value in self._writes.items():
            pipe.set(ledger.state_key(key), value)
            pipe.rpush(
                ledger.history_key(key),
                _encode_modification(
                    KeyModification(
                        tx_id=self.tx_id,
                        timestamp=timestamp,
                        is_delete=False,
                        value=value,
                    )
                ),
            )
        for (collection, key), value in self._private_writes.items():
            pipe.hset(ledger.private_key(collection), key, value)

        try:
            await pipe.execute()
        except WatchError as exc:
            raise LedgerConflictError(
                f"MVCC_READ_CONFLICT: a key read by tx {self.tx_id} changed before commit"
            ) from exc
        except RedisError as exc:
            raise LedgerIOError(str(exc)) from exc

    async def _release(self) -> None:
        await self._pipe.reset()
