# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Transactional ledger substrate shared by the concrete backends.

A transaction behaves like an endorsement on a permissioned ledger:

- reads see committed state only, never the transaction's own writes;
- writes are buffered and applied together at commit;
- the commit is rejected wholesale if a key read during the transaction was
  changed by someone else in the meantime.

No retries happen here; a rejected commit raises ``LedgerConflictError`` and
the caller decides what to do.
"""

import uuid
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from beartype import beartype

from ..core.errors import LedgerIOError
from ..core.logging_utils import get_logger
from ..models.base import iso_timestamp
from .stub import HistoryIterator, KeyModification, SnapshotHistoryIterator

logger = get_logger(__name__)


class LedgerTransaction(ABC):
    """One unit of work against the ledger; satisfies ``LedgerStub``."""

    def __init__(self) -> None:
        self.tx_id = uuid.uuid4().hex
        self._writes: dict[str, bytes] = {}
        self._private_writes: dict[tuple[str, str], bytes] = {}
        self._finished = False

    @property
    def finished(self) -> bool:
        """Committed or rolled back."""
        return self._finished

    @property
    def pending_keys(self) -> list[str]:
        """Public keys written so far, in write order."""
        return list(self._writes)

    @beartype
    async def get_state(self, key: str) -> bytes:
        """Committed value of ``key``; empty bytes when absent."""
        self._ensure_open()
        self._check_key(key)
        return await self._read_state(key)

    @beartype
    async def put_state(self, key: str, value: bytes) -> None:
        """Buffer a write of ``key`` until commit."""
        self._ensure_open()
        self._check_key(key)
        self._writes[key] = bytes(value)

    @beartype
    async def get_history_for_key(self, key: str) -> HistoryIterator:
        """Oldest-first iterator over every committed version of ``key``."""
        self._ensure_open()
        self._check_key(key)
        return SnapshotHistoryIterator(await self._read_history(key))

    @beartype
    async def get_private_data(self, collection: str, key: str) -> bytes:
        """Committed private value; empty bytes when absent."""
        self._ensure_open()
        self._check_collection(collection)
        self._check_key(key)
        return await self._read_private(collection, key)

    @beartype
    async def put_private_data(self, collection: str, key: str, value: bytes) -> None:
        """Buffer a private write until commit."""
        self._ensure_open()
        self._check_collection(collection)
        self._check_key(key)
        self._private_writes[(collection, key)] = bytes(value)

    @beartype
    async def commit(self) -> None:
        """Apply every buffered write atomically, then close."""
        if self._finished:
            return
        try:
            if self._writes or self._private_writes:
                await self._apply(iso_timestamp())
                logger.debug(
                    "Committed tx %s (%d public, %d private writes)",
                    self.tx_id,
                    len(self._writes),
                    len(self._private_writes),
                )
        finally:
            self._finished = True
            await self._release()

    @beartype
    async def rollback(self) -> None:
        """Drop every buffered write, then close."""
        if self._finished:
            return
        self._writes.clear()
        self._private_writes.clear()
        self._finished = True
        await self._release()
        logger.debug("Rolled back tx %s", self.tx_id)

    def _ensure_open(self) -> None:
        if self._finished:
            raise LedgerIOError(f"transaction {self.tx_id} is already finished")

    @staticmethod
    def _check_key(key: str) -> None:
        if not key:
            raise LedgerIOError("key must not be an empty string")

    @staticmethod
    def _check_collection(collection: str) -> None:
        if not collection:
            raise LedgerIOError("collection must not be an empty string")

    @abstractmethod
    async def _read_state(self, key: str) -> bytes: ...

    @abstractmethod
    async def _read_history(self, key: str) -> list[KeyModification]: ...

    @abstractmethod
    async def _read_private(self, collection: str, key: str) -> bytes: ...

    @abstractmethod
    async def _apply(self, timestamp: str) -> None:
        """Write buffered values under ``self.tx_id`` or raise."""

    async def _release(self) -> None:
        """Free substrate resources held by the transaction."""
        return None


class Ledger(ABC):
    """A ledger substrate handing out transactions."""

    @abstractmethod
    def _open(self) -> LedgerTransaction: ...

    async def connect(self) -> None:
        """Acquire backend resources."""
        return None

    async def disconnect(self) -> None:
        """Release backend resources."""
        return None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[LedgerTransaction]:
        """Open a transaction, committing on clean exit.

        An exception inside the block rolls the transaction back. A block
        that calls ``rollback()`` itself leaves nothing to commit.
        """
        txn = self._open()
        try:
            yield txn
        except BaseException:
            await txn.rollback()
            raise
        await txn.commit()
