"""Ledger test doubles."""

from policy_ledger.core.errors import LedgerIOError
from policy_ledger.ledger.stub import HistoryIterator, LedgerStub


class FailingWriteStub:
    """Delegates reads to a real stub and rejects every write."""

    def __init__(self, inner: LedgerStub, message: str = "endorsement failed: disk full") -> None:
        self._inner = inner
        self.message = message
        self.write_attempts = 0

    async def get_state(self, key: str) -> bytes:
        return await self._inner.get_state(key)

    async def put_state(self, key: str, value: bytes) -> None:
        self.write_attempts += 1
        raise LedgerIOError(self.message)

    async def get_history_for_key(self, key: str) -> HistoryIterator:
        return await self._inner.get_history_for_key(key)

    async def get_private_data(self, collection: str, key: str) -> bytes:
        return await self._inner.get_private_data(collection, key)

    async def put_private_data(self, collection: str, key: str, value: bytes) -> None:
        self.write_attempts += 1
        raise LedgerIOError(self.message)


class FailingReadStub(FailingWriteStub):
    """Rejects reads as well as writes."""

    async def get_state(self, key: str) -> bytes:
        raise LedgerIOError(self.message)

    async def get_history_for_key(self, key: str) -> HistoryIterator:
        raise LedgerIOError(self.message)

    async def get_private_data(self, collection: str, key: str) -> bytes:
        raise LedgerIOError(self.message)
