# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Named-transaction dispatcher.

Ledger clients invoke the contract by transaction name with positional
string arguments and receive text back. This module maps those names, both
the Python ones and the names existing clients already use, onto the
services, and renders results as JSON text.
"""

import json
from collections.abc import Awaitable, Callable, Sequence

from attrs import field, frozen
from beartype import beartype

from .core.errors import ContractError
from .core.logging_utils import get_logger
from .core.result_types import Err, Ok, Result
from .ledger.stub import LedgerStub
from .services.claim_service import ClaimService
from .services.history_service import HistoryService
from .services.policy_service import Clock, PolicyService
from .services.premium_calculator import calculate_premium
from .services.private_data_service import PrivateDataService

logger = get_logger(__name__)

PRIVATE_DATA_STORED = "Datos privados guardados"

Handler = Callable[[LedgerStub, Sequence[str]], Awaitable[Result[str, ContractError]]]


@frozen
class TransactionDef:
    """A callable transaction: canonical name, legacy name and arity."""

    name: str = field()
    legacy_name: str = field()
    params: tuple[str, ...] = field()
    handler: Handler = field()


class InsuranceContract:
    """Routes transaction names to the policy, claim and data services."""

    def __init__(
        self,
        clock: Clock | None = None,
        private_collection: str | None = None,
    ) -> None:
        self._clock = clock
        self._private_collection = private_collection
        self._transactions: dict[str, TransactionDef] = {}
        for definition in (
            TransactionDef("init_ledger", "initLedger", (), self._init_ledger),
            TransactionDef(
                "create_policy",
                "crearPoliza",
                ("id", "holder", "kind", "insured_value", "term_months"),
                self._create_policy,
            ),
            TransactionDef("get_policy", "consultarPoliza", ("id",), self._get_policy),
            TransactionDef(
                "register_claim",
                "registrarReclamacion",
                ("claim_id", "policy_id", "description", "amount"),
                self._register_claim,
            ),
            TransactionDef(
                "process_claim",
                "procesarReclamacion",
                ("claim_id", "policy_id", "status", "comment"),
                self._process_claim,
            ),
            TransactionDef(
                "get_history", "obtenerHistorialPoliza", ("id",), self._get_history
            ),
            TransactionDef(
                "renew_policy", "renovarPoliza", ("id", "term_months"), self._renew_policy
            ),
            TransactionDef(
                "cancel_policy", "cancelarPoliza", ("id", "reason"), self._cancel_policy
            ),
            TransactionDef(
                "calculate_premium",
                "calcularPrima",
                ("kind", "insured_value", "risk_tier"),
                self._calculate_premium,
            ),
            TransactionDef(
                "store_private",
                "guardarDatosPrivados",
                ("policy_id", "payload"),
                self._store_private,
            ),
            TransactionDef(
                "get_private", "obtenerDatosPrivados", ("policy_id",), self._get_private
            ),
        ):
            self._transactions[definition.name] = definition
            self._transactions[definition.legacy_name] = definition

    @property
    def transaction_names(self) -> list[str]:
        """Every accepted name, canonical and legacy."""
        return sorted(self._transactions)

    @beartype
    async def invoke(
        self, stub: LedgerStub, function: str, args: Sequence[str] = ()
    ) -> Result[str, ContractError]:
        """Run one named transaction against ``stub``."""
        definition = self._transactions.get(function)
        if definition is None:
            return Err(
                ContractError.invalid_input(f"La transacción {function} no existe")
            )
        if len(args) != len(definition.params):
            return Err(
                ContractError.invalid_input(
                    f"La transacción {definition.name} espera {len(definition.params)} "
                    f"argumentos ({', '.join(definition.params)}) y recibió {len(args)}"
                )
            )

        logger.info("Invoking %s", definition.name)
        return await definition.handler(stub, args)

    def _policies(self, stub: LedgerStub) -> PolicyService:
        return PolicyService(stub, clock=self._clock)

    def _claims(self, stub: LedgerStub) -> ClaimService:
        return ClaimService(stub, clock=self._clock)

    async def _init_ledger(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        logger.info("Insurance contract initialized")
        return Ok("")

    async def _create_policy(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = await self._policies(stub).create_policy(*args)
        return result.map(lambda policy: policy.to_json())

    async def _get_policy(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = await self._policies(stub).get_policy(args[0])
        return result.map(lambda policy: policy.to_json())

    async def _renew_policy(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = await self._policies(stub).renew_policy(args[0], args[1])
        return result.map(lambda policy: policy.to_json())

    async def _cancel_policy(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = await self._policies(stub).cancel_policy(args[0], args[1])
        return result.map(lambda policy: policy.to_json())

    async def _register_claim(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = await self._claims(stub).register_claim(*args)
        return result.map(lambda claim: claim.to_json())

    async def _process_claim(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = await self._claims(stub).process_claim(*args)
        return result.map(lambda claim: claim.to_json())

    async def _get_history(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = await HistoryService(stub).get_history(args[0])
        return result.map(
            lambda entries: json.dumps(
                [entry.to_wire() for entry in entries],
                ensure_ascii=False,
                separators=(",", ":"),
            )
        )

    async def _calculate_premium(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        result = calculate_premium(args[0], args[1], args[2])
        return result.map(lambda premium: json.dumps({"prima": premium}))

    async def _store_private(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        service = PrivateDataService(stub, collection=self._private_collection)
        result = await service.store_private(args[0], args[1].encode("utf-8"))
        return result.map(lambda _: PRIVATE_DATA_STORED)

    async def _get_private(
        self, stub: LedgerStub, args: Sequence[str]
    ) -> Result[str, ContractError]:
        service = PrivateDataService(stub, collection=self._private_collection)
        result = await service.get_private(args[0])
        return result.map(lambda payload: payload.decode("utf-8", errors="replace"))
