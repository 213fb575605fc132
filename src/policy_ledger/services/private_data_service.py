"""Restricted-visibility partition for client data."""

from beartype import beartype

from ..core.config import get_settings
from ..core.errors import ContractError, LedgerError
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..ledger.stub import LedgerStub

logger = get_logger(__name__)


class PrivateDataService:
    """Opaque payloads keyed by policy id in a private collection.

    The partition is independent from the public ledger: nothing checks that
    the policy exists before storing.
    """

    def __init__(self, stub: LedgerStub, collection: str | None = None) -> None:
        if not isinstance(stub, LedgerStub):
            raise ValueError("Ledger stub required and must expose the ledger operations")
        self._stub = stub
        self._collection = collection or get_settings().private_collection

    @property
    def collection(self) -> str:
        return self._collection

    @beartype
    async def store_private(self, policy_id: str, payload: bytes) -> Result[None, ContractError]:
        """Store ``payload`` for ``policy_id``."""
        try:
            await self._stub.put_private_data(self._collection, policy_id, payload)
        except LedgerError as exc:
            logger.warning("Private write failed for %s: %s", policy_id, exc)
            return Err(ContractError.from_ledger(exc))

        logger.info("Stored %d private bytes for policy %s", len(payload), policy_id)
        return Ok(None)

    @beartype
    async def get_private(self, policy_id: str) -> Result[bytes, ContractError]:
        """Exact bytes previously stored for ``policy_id``."""
        try:
            payload = await self._stub.get_private_data(self._collection, policy_id)
        except LedgerError as exc:
            logger.warning("Private read failed for %s: %s", policy_id, exc)
            return Err(ContractError.from_ledger(exc))

        if not payload:
            return Err(ContractError.private_data_not_found(policy_id))
        return Ok(payload)
