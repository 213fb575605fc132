# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Process-local ledger with versioned keys and full history."""

import asyncio
from collections import defaultdict

from beartype import beartype

from ..core.errors import LedgerConflictError
from .base import Ledger, LedgerTransaction
from .stub import KeyModification


class InMemoryLedger(Ledger):
    """Ledger kept in memory; used for development and tests.

    Every key carries a version counter. A transaction remembers the
    version of each key it read, and its commit is rejected if any of them
    moved on.
    """

    def __init__(self) -> None:
        self._state: dict[str, bytes] = {}
        self._versions: dict[str, int] = defaultdict(int)
        self._history: dict[str, list[KeyModification]] = defaultdict(list)
        self._private: dict[tuple[str, str], bytes] = {}
        self._commit_lock = asyncio.Lock()

    def _open(self) -> "InMemoryTransaction":
        return InMemoryTransaction(self)

    @beartype
    def keys(self) -> list[str]:
        """Keys present in the world state."""
        return sorted(self._state)

    @beartype
    def version_of(self, key: str) -> int:
        """Number of committed writes to ``key``."""
        return self._versions.get(key, 0)


class InMemoryTransaction(LedgerTransaction):
    """Transaction against an ``InMemoryLedger``."""

    def __init__(self, ledger: InMemoryLedger) -> None:
        super().__init__()
        self._ledger = ledger
        self._read_versions: dict[str, int] = {}

    async def _read_state(self, key: str) -> bytes:
        self._read_versions.setdefault(key, self._ledger.version_of(key))
        return self._ledger._state.get(key, b"")

    async def _read_history(self, key: str) -> list[KeyModification]:
        return list(self._ledger._history.get(key, ()))

    async def _read_private(self, collection: str, key: str) -> bytes:
        return self._ledger._private.get((collection, key), b"")

    async def _apply(self, timestamp: str) -> None:
        ledger = self._ledger
        async with ledger._commit_lock:
            for key, seen in self._read_versions.items():
                if ledger.version_of(key) != seen:
                    raise LedgerConflictError(
                        f"MVCC_READ_CONFLICT: key {key} changed after tx {self.tx_id} read it"
                    )

            for key, value in self._writes.items():
                ledger._state[key] = value
                ledger._versions[key] += 1
                ledger._history[key].append(
                    KeyModification(
                        tx_id=self.tx_id,
                        timestamp=timestamp,
                        is_delete=False,
                        value=value,
                    )
                )
            ledger._private.update(self._private_writes)
