# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Policy domain models.

``Policy`` is the document stored under its own id on the public ledger.
Numeric fields stay decimal text end to end; only the premium calculator
turns them into numbers.
"""

from enum import Enum

from pydantic import AliasChoices, ConfigDict, Field

from .base import BaseModelConfig, LedgerRecord
from .claim import Claim


class PolicyKind(str, Enum):
    """Categories with a dedicated base rate. Any other text is accepted."""

    AUTO = "Auto"
    HOME = "Home"
    LIFE = "Life"


class PolicyStatus(str, Enum):
    """Enumeration of policy lifecycle states. CANCELLED is terminal."""

    ACTIVE = "ACTIVA"
    CANCELLED = "CANCELADA"


class Policy(LedgerRecord):
    """Complete policy record as stored on the ledger."""

    id: str = Field(..., alias="ID", description="Business id and ledger key")
    holder: str = Field(..., alias="Titular")
    kind: str = Field(..., alias="Tipo")
    insured_value: str = Field(..., alias="Valor", description="Decimal text")
    term_months: str = Field(..., alias="Duracion", description="Term in months")
    status: PolicyStatus = Field(default=PolicyStatus.ACTIVE, alias="Estado")
    created_at: str = Field(..., alias="FechaCreacion")
    claims: tuple[Claim, ...] = Field(default=(), alias="Reclamaciones")
    renewed_at: str | None = Field(default=None, alias="FechaRenovacion")
    cancellation_reason: str | None = Field(default=None, alias="MotivoCancelacion")
    cancelled_at: str | None = Field(default=None, alias="FechaCancelacion")

    @property
    def is_cancelled(self) -> bool:
        """Check whether the policy reached its terminal state."""
        return self.status == PolicyStatus.CANCELLED

    def find_claim(self, claim_id: str) -> int | None:
        """Index of the first claim with ``claim_id``, in filing order."""
        for index, claim in enumerate(self.claims):
            if claim.id == claim_id:
                return index
        return None


class PolicyCreate(BaseModelConfig):
    """Request body for creating a policy.

    Accepts both the English keys and the Spanish ones older clients send.
    Values are kept exactly as sent and unknown keys are ignored.
    """

    model_config = ConfigDict(
        coerce_numbers_to_str=True, extra="ignore", str_strip_whitespace=False
    )

    id: str = Field(..., min_length=1, description="Policy id, also the ledger key")
    holder: str = Field(..., validation_alias=AliasChoices("holder", "titular"))
    kind: str = Field(..., validation_alias=AliasChoices("kind", "tipo"))
    insured_value: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("insuredValue", "insured_value", "valor"),
    )
    term_months: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("termMonths", "term_months", "duracion"),
    )


class PolicyRenew(BaseModelConfig):
    """Request body for renewing a policy."""

    model_config = ConfigDict(coerce_numbers_to_str=True, str_strip_whitespace=False)

    term_months: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("termMonths", "term_months", "duracion"),
    )


class PolicyCancel(BaseModelConfig):
    """Request body for cancelling a policy."""

    model_config = ConfigDict(str_strip_whitespace=False)

    reason: str = Field(..., validation_alias=AliasChoices("reason", "motivo"))
