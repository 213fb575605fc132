# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Premium calculation from the published lookup tables.

premium = insured value x base rate (by policy kind) x risk multiplier,
rounded half-up to cents. Unknown kinds and tiers fall back to defaults;
only an insured value that is not a finite number is rejected.
"""

from decimal import (
    ROUND_HALF_UP,
    Decimal,
    DecimalException,
    InvalidOperation,
    localcontext,
)
from typing import Final

from beartype import beartype

from ..core.errors import ContractError
from ..core.result_types import Err, Ok, Result
from ..models.policy import PolicyKind
from ..models.premium import RiskTier

CENTS: Final = Decimal("0.01")

DEFAULT_BASE_RATE: Final = Decimal("0.03")
DEFAULT_RISK_MULTIPLIER: Final = Decimal("1.0")

BASE_RATES: Final[dict[str, Decimal]] = {
    PolicyKind.AUTO.value: Decimal("0.05"),
    PolicyKind.HOME.value: Decimal("0.02"),
    "Hogar": Decimal("0.02"),
    PolicyKind.LIFE.value: Decimal("0.01"),
    "Vida": Decimal("0.01"),
}

RISK_MULTIPLIERS: Final[dict[RiskTier, Decimal]] = {
    RiskTier.LOW: Decimal("0.8"),
    RiskTier.MEDIUM: Decimal("1.0"),
    RiskTier.HIGH: Decimal("1.5"),
}


class PremiumCalculator:
    """Pure premium arithmetic; never touches the ledger."""

    @staticmethod
    @beartype
    def base_rate(kind: str) -> Decimal:
        """Base rate for a policy kind, 0.03 for anything unlisted."""
        return BASE_RATES.get(kind, DEFAULT_BASE_RATE)

    @staticmethod
    @beartype
    def risk_multiplier(risk_tier: str) -> Decimal:
        """Multiplier for a risk tier, 1.0 for anything unlisted."""
        try:
            return RISK_MULTIPLIERS[RiskTier(risk_tier)]
        except ValueError:
            return DEFAULT_RISK_MULTIPLIER

    @staticmethod
    @beartype
    def parse_insured_value(insured_value: str) -> Result[Decimal, ContractError]:
        """Parse decimal text, rejecting NaN and infinities."""
        try:
            value = Decimal(insured_value.strip())
        except InvalidOperation:
            return Err(
                ContractError.invalid_input(
                    f"El valor asegurado '{insured_value}' no es un número válido"
                )
            )
        if not value.is_finite():
            return Err(
                ContractError.invalid_input(
                    f"El valor asegurado '{insured_value}' no es un número válido"
                )
            )
        return Ok(value)

    @staticmethod
    @beartype
    def calculate(
        kind: str, insured_value: str, risk_tier: str
    ) -> Result[str, ContractError]:
        """Premium as two-decimal fixed-point text."""
        rate = PremiumCalculator.base_rate(kind) * PremiumCalculator.risk_multiplier(
            risk_tier
        )

        def price(value: Decimal) -> Result[str, ContractError]:
            with localcontext() as context:
                # Exact product and every digit up to the cents
                context.prec = max(
                    context.prec,
                    len(value.as_tuple().digits) + 6,
                    value.adjusted() + 6,
                )
                try:
                    premium = (value * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
                except DecimalException:
                    # Exponent beyond what Decimal can represent
                    return Err(
                        ContractError.invalid_input(
                            f"El valor asegurado '{insured_value}' está fuera de rango"
                        )
                    )
                return Ok(f"{premium:.2f}")

        return PremiumCalculator.parse_insured_value(insured_value).and_then(price)


@beartype
def calculate_premium(
    kind: str, insured_value: str, risk_tier: str
) -> Result[str, ContractError]:
    """Module-level shortcut for :py:meth:`PremiumCalculator.calculate`."""
    return PremiumCalculator.calculate(kind, insured_value, risk_tier)
