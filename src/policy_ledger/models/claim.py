# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Claim models.

A claim never has a ledger key of its own: it lives inside the
``Reclamaciones`` list of its parent policy.
"""

from enum import Enum

from pydantic import AliasChoices, ConfigDict, Field

from .base import BaseModelConfig, LedgerRecord


class ClaimStatus(str, Enum):
    """Well-known claim states.

    Only ``PENDING`` is assigned by the system. Processing stores whatever
    outcome string the processor supplies; the others are conventional.
    """

    PENDING = "PENDIENTE"
    APPROVED = "APROBADA"
    REJECTED = "RECHAZADA"


class Claim(LedgerRecord):
    """One filed claim, embedded in a policy record."""

    id: str = Field(..., alias="ID", description="Claim id, unique within its policy")
    description: str = Field(..., alias="Descripcion")
    amount: str = Field(..., alias="Monto", description="Claimed amount as decimal text")
    status: str = Field(default=ClaimStatus.PENDING.value, alias="Estado")
    filed_at: str = Field(..., alias="FechaRegistro")
    comment: str | None = Field(default=None, alias="Comentario")
    processed_at: str | None = Field(default=None, alias="FechaProcesamiento")

    @property
    def is_pending(self) -> bool:
        """True until a processor has recorded an outcome."""
        return self.processed_at is None


class ClaimCreate(BaseModelConfig):
    """Body for filing a claim against a policy."""

    model_config = ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=False)

    claim_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("claimId", "claim_id", "id"),
    )
    description: str = Field(
        ..., validation_alias=AliasChoices("description", "descripcion")
    )
    amount: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("amount", "monto")
    )


class ClaimProcess(BaseModelConfig):
    """Body for recording a claim outcome."""

    model_config = ConfigDict(str_strip_whitespace=False)

    status: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("status", "estado")
    )
    comment: str = Field(
        default="", validation_alias=AliasChoices("comment", "comentario")
    )
