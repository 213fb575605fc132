"""Test configuration and fixtures.

Provides an in-memory ledger, a gateway over it, a fixed clock so stored
timestamps are predictable, and a fakeredis client for the Redis substrate.
"""

from collections.abc import AsyncGenerator, Callable, Generator
from datetime import datetime
from typing import Any

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis

from policy_ledger.contract import InsuranceContract
from policy_ledger.core.config import Settings, clear_settings_cache
from policy_ledger.gateway import LedgerGateway
from policy_ledger.ledger.memory import InMemoryLedger
from policy_ledger.ledger.redis_ledger import RedisLedger, RedisLedgerConfig
from tests.fixtures.test_data import FIXED_MOMENT


@pytest.fixture(autouse=True)
def fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings around every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory ledger in development mode."""
    return Settings(ledger_backend="memory", api_env="development", log_level="DEBUG")


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns the same moment."""
    return lambda: FIXED_MOMENT


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def gateway(ledger: InMemoryLedger, fixed_clock: Callable[[], datetime]) -> LedgerGateway:
    """Gateway committing to the in-memory ledger with a fixed clock."""
    return LedgerGateway(ledger, InsuranceContract(clock=fixed_clock))


@pytest_asyncio.fixture  # type: ignore[misc]
async def redis_client() -> AsyncGenerator[Any, None]:
    """Fake Redis client returning raw bytes."""
    client = FakeAsyncRedis(decode_responses=False)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def redis_ledger(redis_client: Any) -> RedisLedger:
    """Redis ledger over the fake client."""
    return RedisLedger(
        redis_client,
        config=RedisLedgerConfig(url="redis://localhost:6379/15", prefix="test"),
    )
