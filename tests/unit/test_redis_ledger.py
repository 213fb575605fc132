"""Unit tests for the Redis ledger substrate, run against fakeredis."""

from typing import Any

import pytest
from fakeredis import FakeAsyncRedis

from policy_ledger.core.config import Settings
from policy_ledger.core.errors import ErrorKind, LedgerConflictError, LedgerIOError
from policy_ledger.gateway import LedgerGateway
from policy_ledger.ledger import RedisLedger, RedisLedgerConfig, create_ledger


class TestRedisLedgerLayout:
    """Test key layout and connection handling."""

    def test_key_helpers_use_prefix(self) -> None:
        """Every key is namespaced under the configured prefix."""
        redis_ledger = RedisLedger(
            FakeAsyncRedis(), RedisLedgerConfig(url="redis://x", prefix="test")
        )

        assert redis_ledger.state_key("POL-1") == "test:state:POL-1"
        assert redis_ledger.history_key("POL-1") == "test:history:POL-1"
        assert redis_ledger.private_key("coll") == "test:private:coll"

    def test_unconnected_client_raises(self) -> None:
        """Opening a transaction before connecting is a substrate error."""
        ledger = RedisLedger(config=RedisLedgerConfig(url="redis://localhost:6379/15"))
        with pytest.raises(LedgerIOError, match="not connected"):
            _ = ledger.client

    def test_factory_selects_backend(self) -> None:
        """Settings choose between the memory and redis substrates."""
        redis_settings = Settings(ledger_backend="redis", ledger_key_prefix="p")

        assert isinstance(create_ledger(redis_settings), RedisLedger)
        assert type(create_ledger(Settings())).__name__ == "InMemoryLedger"

    @pytest.mark.asyncio
    async def test_disconnect_releases_client(self) -> None:
        """Disconnect closes the client and forgets it."""
        ledger = RedisLedger(FakeAsyncRedis(), RedisLedgerConfig(url="redis://x"))
        await ledger.disconnect()

        with pytest.raises(LedgerIOError):
            _ = ledger.client


class TestRedisTransactions:
    """Test commit, history and conflicts on Redis."""

    @pytest.mark.asyncio
    async def test_commit_writes_state_history_and_private(
        self, redis_ledger: RedisLedger, redis_client: Any
    ) -> None:
        """A commit writes every buffered value in one MULTI/EXEC."""
        async with redis_ledger.transaction() as txn:
            await txn.put_state("POL-1", b'{"ID":"POL-1"}')
            await txn.put_private_data("coll", "POL-1", b"\x00secret")

        assert await redis_client.get("test:state:POL-1") == b'{"ID":"POL-1"}'
        assert await redis_client.hget("test:private:coll", "POL-1") == b"\x00secret"
        assert await redis_client.llen("test:history:POL-1") == 1

        async with redis_ledger.transaction() as reader:
            assert await reader.get_state("POL-1") == b'{"ID":"POL-1"}'
            iterator = await reader.get_history_for_key("POL-1")
            modifications = [mod async for mod in iterator]
            await iterator.close()

        assert len(modifications) == 1
        assert modifications[0].tx_id == txn.tx_id
        assert modifications[0].value == b'{"ID":"POL-1"}'

    @pytest.mark.asyncio
    async def test_rollback_writes_nothing(
        self, redis_ledger: RedisLedger, redis_client: Any
    ) -> None:
        """A rolled back transaction never reaches Redis."""
        async with redis_ledger.transaction() as txn:
            await txn.put_state("POL-1", b"v")
            await txn.rollback()

        assert await redis_client.exists("test:state:POL-1") == 0
        assert await redis_client.exists("test:history:POL-1") == 0

    @pytest.mark.asyncio
    async def test_watched_key_change_conflicts(
        self, redis_ledger: RedisLedger, redis_client: Any
    ) -> None:
        """A write to a key read by an open transaction makes EXEC fail."""
        async with redis_ledger.transaction() as seed:
            await seed.put_state("POL-1", b"v0")

        with pytest.raises(LedgerConflictError, match="MVCC_READ_CONFLICT"):
            async with redis_ledger.transaction() as txn:
                assert await txn.get_state("POL-1") == b"v0"
                await redis_client.set("test:state:POL-1", b"changed")
                await txn.put_state("POL-1", b"v1")

        assert await redis_client.get("test:state:POL-1") == b"changed"
        assert await redis_client.llen("test:history:POL-1") == 1

    @pytest.mark.asyncio
    async def test_gateway_over_redis(
        self, redis_ledger: RedisLedger, redis_client: Any
    ) -> None:
        """The full contract runs unchanged on the Redis substrate."""
        gateway = LedgerGateway(redis_ledger)

        created = await gateway.submit_transaction(
            "crearPoliza", "POL-1", "Ana", "Auto", "20000", "12"
        )
        claimed = await gateway.submit_transaction(
            "registrarReclamacion", "C1", "POL-1", "Choque", "1500"
        )
        history = await gateway.evaluate_transaction("obtenerHistorialPoliza", "POL-1")
        missing = await gateway.evaluate_transaction("consultarPoliza", "POL-2")

        assert created.is_ok()
        assert claimed.is_ok()
        assert history.is_ok()
        assert history.unwrap().count('"TxId"') == 2
        assert missing.unwrap_err().kind == ErrorKind.NOT_FOUND
