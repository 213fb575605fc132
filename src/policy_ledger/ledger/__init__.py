"""Ledger access interface and the substrates implementing it."""

from beartype import beartype

from ..core.config import Settings
from .base import Ledger, LedgerTransaction
from .memory import InMemoryLedger
from .redis_ledger import RedisLedger, RedisLedgerConfig
from .stub import HistoryIterator, KeyModification, LedgerStub, SnapshotHistoryIterator

__all__ = [
    "HistoryIterator",
    "InMemoryLedger",
    "KeyModification",
    "Ledger",
    "LedgerStub",
    "LedgerTransaction",
    "RedisLedger",
    "RedisLedgerConfig",
    "SnapshotHistoryIterator",
    "create_ledger",
]


@beartype
def create_ledger(settings: Settings) -> Ledger:
    """Build the substrate selected by ``settings.ledger_backend``."""
    if settings.ledger_backend == "redis":
        return RedisLedger(
            config=RedisLedgerConfig(
                url=settings.redis_url, prefix=settings.ledger_key_prefix
            )
        )
    return InMemoryLedger()
