# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Narrow interface the contract services use to reach the ledger.

These protocols are **runtime_checkable** so beartype ``isinstance`` checks
succeed against any substrate transaction, and against test doubles, as long
as the five operations exist.
"""

from collections.abc import Iterable
from types import TracebackType
from typing import Protocol, runtime_checkable

from attrs import field, frozen
from beartype import beartype


@frozen
class KeyModification:
    """One committed version of a key as reported by the substrate."""

    tx_id: str = field()
    timestamp: str = field()
    is_delete: bool = field(default=False)
    value: bytes = field(default=b"")


@runtime_checkable
class HistoryIterator(Protocol):
    """Oldest-first stream of modifications; must be closed after use."""

    def __aiter__(self) -> "HistoryIterator": ...  # noqa: D105,E701

    async def __anext__(self) -> KeyModification: ...  # noqa: D105

    async def close(self) -> None: ...


@runtime_checkable
class LedgerStub(Protocol):
    """The five ledger operations available inside one transaction."""

    async def get_state(self, key: str) -> bytes: ...  # noqa: D102,E701

    async def put_state(self, key: str, value: bytes) -> None: ...  # noqa: D102

    async def get_history_for_key(self, key: str) -> HistoryIterator: ...  # noqa: D102

    async def get_private_data(self, collection: str, key: str) -> bytes: ...  # noqa: D102

    async def put_private_data(  # noqa: D102
        self, collection: str, key: str, value: bytes
    ) -> None: ...


class SnapshotHistoryIterator:
    """History iterator over modifications captured when it was opened.

    Usable with ``async for`` and as an async context manager; iteration
    after ``close()`` ends immediately.
    """

    def __init__(self, modifications: Iterable[KeyModification]) -> None:
        self._pending = list(modifications)
        self._position = 0
        self._closed = False

    def __aiter__(self) -> "SnapshotHistoryIterator":
        return self

    async def __anext__(self) -> KeyModification:
        if self._closed or self._position >= len(self._pending):
            raise StopAsyncIteration
        modification = self._pending[self._position]
        self._position += 1
        return modification

    @beartype
    async def close(self) -> None:
        """Release the snapshot."""
        self._closed = True
        self._pending = []

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "SnapshotHistoryIterator":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
