"""Unit tests for the transaction dispatcher and the gateway."""

import json

import pytest

from policy_ledger.contract import PRIVATE_DATA_STORED, InsuranceContract
from policy_ledger.core.errors import ContractError, ErrorKind, LedgerConflictError
from policy_ledger.core.result_types import Err, Ok
from policy_ledger.gateway import LedgerGateway
from policy_ledger.ledger import InMemoryLedger, LedgerStub
from tests.fixtures.test_data import FIXED_TIMESTAMP, VALID_POLICY_ARGS


class TestDispatcher:
    """Test name resolution and argument checks."""

    def test_canonical_and_legacy_names(self) -> None:
        """Every transaction answers to both spellings."""
        names = InsuranceContract().transaction_names

        for canonical, legacy in [
            ("init_ledger", "initLedger"),
            ("create_policy", "crearPoliza"),
            ("get_policy", "consultarPoliza"),
            ("register_claim", "registrarReclamacion"),
            ("process_claim", "procesarReclamacion"),
            ("get_history", "obtenerHistorialPoliza"),
            ("renew_policy", "renovarPoliza"),
            ("cancel_policy", "cancelarPoliza"),
            ("calculate_premium", "calcularPrima"),
            ("store_private", "guardarDatosPrivados"),
            ("get_private", "obtenerDatosPrivados"),
        ]:
            assert canonical in names
            assert legacy in names

    @pytest.mark.asyncio
    async def test_unknown_transaction(self, gateway: LedgerGateway) -> None:
        """Unknown names are invalid input."""
        result = await gateway.submit_transaction("borrarPoliza", "POL-001")

        assert result.unwrap_err().kind == ErrorKind.INVALID_INPUT
        assert result.unwrap_err().message == "La transacción borrarPoliza no existe"

    @pytest.mark.asyncio
    async def test_wrong_arity(self, gateway: LedgerGateway) -> None:
        """Argument count must match the transaction's parameters."""
        result = await gateway.submit_transaction("crearPoliza", "POL-001", "Ana")

        error = result.unwrap_err()
        assert error.kind == ErrorKind.INVALID_INPUT
        assert "espera 5 argumentos" in error.message
        assert "recibió 2" in error.message

    @pytest.mark.asyncio
    async def test_init_ledger_writes_nothing(
        self, gateway: LedgerGateway, ledger: InMemoryLedger
    ) -> None:
        """Initialization is a no-op that succeeds."""
        result = await gateway.submit_transaction("initLedger")

        assert result == Ok("")
        assert ledger.keys() == []


class TestContractRendering:
    """Test the text each transaction returns."""

    @pytest.mark.asyncio
    async def test_create_returns_stored_json(
        self, gateway: LedgerGateway, ledger: InMemoryLedger
    ) -> None:
        """The returned text is exactly the stored value."""
        result = await gateway.submit_transaction("crearPoliza", *VALID_POLICY_ARGS)

        text = result.unwrap()
        async with ledger.transaction() as txn:
            assert (await txn.get_state("POL-001")).decode("utf-8") == text
        assert json.loads(text)["FechaCreacion"] == FIXED_TIMESTAMP

    @pytest.mark.asyncio
    async def test_claim_flow(self, gateway: LedgerGateway) -> None:
        """Registering and processing return the claim alone."""
        await gateway.submit_transaction("create_policy", *VALID_POLICY_ARGS)
        registered = await gateway.submit_transaction(
            "registrarReclamacion", "C1", "POL-001", "Choque", "1500"
        )
        processed = await gateway.submit_transaction(
            "procesarReclamacion", "C1", "POL-001", "APROBADA", "ok"
        )

        assert json.loads(registered.unwrap())["Estado"] == "PENDIENTE"
        assert json.loads(processed.unwrap()) == {
            "ID": "C1",
            "Descripcion": "Choque",
            "Monto": "1500",
            "Estado": "APROBADA",
            "FechaRegistro": FIXED_TIMESTAMP,
            "Comentario": "ok",
            "FechaProcesamiento": FIXED_TIMESTAMP,
        }

    @pytest.mark.asyncio
    async def test_history_text(self, gateway: LedgerGateway) -> None:
        """History is a JSON array of entries with string delete flags."""
        await gateway.submit_transaction("create_policy", *VALID_POLICY_ARGS)
        await gateway.submit_transaction("renovarPoliza", "POL-001", "24")

        entries = json.loads(
            (await gateway.evaluate_transaction("obtenerHistorialPoliza", "POL-001")).unwrap()
        )

        assert [entry["Value"]["Duracion"] for entry in entries] == ["12", "24"]
        assert all(entry["IsDelete"] == "false" for entry in entries)
        assert set(entries[0]) == {"TxId", "Timestamp", "IsDelete", "Value"}

    @pytest.mark.asyncio
    async def test_premium_text(self, gateway: LedgerGateway) -> None:
        """Premiums come back as a prima object."""
        result = await gateway.evaluate_transaction("calcularPrima", "Auto", "20000", "BAJO")

        assert json.loads(result.unwrap()) == {"prima": "800.00"}

    @pytest.mark.asyncio
    async def test_private_data_text(self, gateway: LedgerGateway) -> None:
        """Storing acknowledges; reading returns the payload text."""
        stored = await gateway.submit_transaction(
            "guardarDatosPrivados", "POL-001", '{"dni":"123"}'
        )
        fetched = await gateway.evaluate_transaction("obtenerDatosPrivados", "POL-001")

        assert stored.unwrap() == PRIVATE_DATA_STORED
        assert fetched.unwrap() == '{"dni":"123"}'

    @pytest.mark.asyncio
    async def test_private_collection_override(self, ledger: InMemoryLedger) -> None:
        """The contract can be bound to another private collection."""
        gateway = LedgerGateway(ledger, InsuranceContract(private_collection="otra"))
        await gateway.submit_transaction("store_private", "POL-001", "x")

        async with ledger.transaction() as txn:
            assert await txn.get_private_data("otra", "POL-001") == b"x"


class TestGateway:
    """Test submit and evaluate transaction handling."""

    @pytest.mark.asyncio
    async def test_evaluate_never_commits(
        self, gateway: LedgerGateway, ledger: InMemoryLedger
    ) -> None:
        """Even a writing transaction leaves no trace when evaluated."""
        result = await gateway.evaluate_transaction("crearPoliza", *VALID_POLICY_ARGS)

        assert result.is_ok()
        assert ledger.keys() == []

    @pytest.mark.asyncio
    async def test_failed_operation_is_rolled_back(
        self, gateway: LedgerGateway, ledger: InMemoryLedger
    ) -> None:
        """Writes made before an Err is returned are discarded."""

        async def write_then_fail(stub: LedgerStub) -> Err[ContractError]:
            await stub.put_state("POL-001", b"partial")
            return Err(ContractError.invalid_input("nope"))

        result = await gateway.submit(write_then_fail)

        assert result.unwrap_err().message == "nope"
        assert ledger.keys() == []

    @pytest.mark.asyncio
    async def test_commit_conflict_is_reported(
        self, gateway: LedgerGateway, ledger: InMemoryLedger
    ) -> None:
        """A conflict at commit comes back as LEDGER_CONFLICT, not retried."""
        await gateway.submit_transaction("crearPoliza", *VALID_POLICY_ARGS)
        attempts = 0

        async def racing_renewal(stub: LedgerStub) -> Ok[str]:
            nonlocal attempts
            attempts += 1
            renewal = await gateway.contract.invoke(stub, "renovarPoliza", ("POL-001", "24"))
            await gateway.submit_transaction("renovarPoliza", "POL-001", "36")
            return renewal

        result = await gateway.submit(racing_renewal)

        assert attempts == 1
        assert result.unwrap_err().kind == ErrorKind.LEDGER_CONFLICT
        assert "MVCC_READ_CONFLICT" in result.unwrap_err().message
        current = await gateway.evaluate_transaction("consultarPoliza", "POL-001")
        policy = json.loads(current.unwrap())
        assert policy["Duracion"] == "36"

    def test_conflict_error_mapping(self) -> None:
        """Substrate exceptions keep their message when converted."""
        error = ContractError.from_ledger(LedgerConflictError("MVCC_READ_CONFLICT: k"))

        assert error.kind == ErrorKind.LEDGER_CONFLICT
        assert str(error) == "MVCC_READ_CONFLICT: k"
