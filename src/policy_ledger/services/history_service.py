"""Read-only projection of a key's modification history."""

import json

from beartype import beartype

from ..core.errors import ContractError, LedgerError
from ..core.logging_utils import get_logger
from ..core.result_types import Err, Ok, Result
from ..ledger.stub import KeyModification, LedgerStub
from ..models.history import HistoryEntry, RawValue, StructuredValue

logger = get_logger(__name__)


@beartype
def project_modification(modification: KeyModification) -> HistoryEntry:
    """Normalize one modification; JSON objects become structured values."""
    text = modification.value.decode("utf-8", errors="replace")
    try:
        decoded = json.loads(text)
    except ValueError:
        decoded = None

    value: StructuredValue | RawValue
    if isinstance(decoded, dict):
        value = StructuredValue(record=decoded)
    else:
        value = RawValue(text=text)

    return HistoryEntry(
        tx_id=modification.tx_id,
        timestamp=modification.timestamp,
        is_deleted=modification.is_delete,
        value=value,
    )


class HistoryService:
    """Audit reader over the ledger's append-only change stream."""

    def __init__(self, stub: LedgerStub) -> None:
        if not isinstance(stub, LedgerStub):
            raise ValueError("Ledger stub required and must expose the ledger operations")
        self._stub = stub

    @beartype
    async def get_history(self, policy_id: str) -> Result[list[HistoryEntry], ContractError]:
        """Every version of ``policy_id``, oldest first.

        Versions with an empty value are skipped. A key that has never been
        written is reported as not found.
        """
        entries: list[HistoryEntry] = []
        seen = 0
        try:
            iterator = await self._stub.get_history_for_key(policy_id)
            try:
                async for modification in iterator:
                    seen += 1
                    if modification.value:
                        entries.append(project_modification(modification))
            finally:
                await iterator.close()
        except LedgerError as exc:
            logger.warning("History read failed for %s: %s", policy_id, exc)
            return Err(ContractError.from_ledger(exc))

        if not seen:
            return Err(ContractError.history_not_found(policy_id))

        return Ok(entries)
