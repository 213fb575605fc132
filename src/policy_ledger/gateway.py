"""Client-side gateway: one ledger transaction per invocation.

``submit`` commits the transaction when the operation succeeds and rolls it
back when it returns ``Err``; ``evaluate`` always rolls back, so queries
never write. Commit conflicts and substrate failures come back as ``Err``
and are never retried here.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from beartype import beartype

from .contract import InsuranceContract
from .core.errors import ContractError, LedgerError
from .core.logging_utils import get_logger
from .core.result_types import Err, Result
from .ledger.base import Ledger
from .ledger.stub import LedgerStub

logger = get_logger(__name__)

Operation = Callable[[LedgerStub], Awaitable[Any]]


class LedgerGateway:
    """Runs contract operations against a ledger substrate."""

    def __init__(self, ledger: Ledger, contract: InsuranceContract | None = None) -> None:
        self._ledger = ledger
        self._contract = contract or InsuranceContract()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def contract(self) -> InsuranceContract:
        return self._contract

    async def connect(self) -> None:
        await self._ledger.connect()

    async def disconnect(self) -> None:
        await self._ledger.disconnect()

    async def _run(self, operation: Operation, commit: bool) -> Result[Any, ContractError]:
        try:
            async with self._ledger.transaction() as txn:
                result = await operation(txn)
                if not commit or isinstance(result, Err):
                    await txn.rollback()
        except LedgerError as exc:
            logger.warning("Transaction rejected by the ledger: %s", exc)
            return Err(ContractError.from_ledger(exc))
        return result

    @beartype
    async def submit(self, operation: Operation) -> Result[Any, ContractError]:
        """Run ``operation`` in a transaction and commit its writes on success."""
        return await self._run(operation, commit=True)

    @beartype
    async def evaluate(self, operation: Operation) -> Result[Any, ContractError]:
        """Run ``operation`` in a transaction that is never committed."""
        return await self._run(operation, commit=False)

    @beartype
    async def submit_transaction(self, name: str, *args: str) -> Result[str, ContractError]:
        """Invoke a named transaction and commit it."""
        return await self.submit(lambda stub: self._contract.invoke(stub, name, args))

    @beartype
    async def evaluate_transaction(self, name: str, *args: str) -> Result[str, ContractError]:
        """Invoke a named transaction as a read-only query."""
        return await self.evaluate(lambda stub: self._contract.invoke(stub, name, args))
