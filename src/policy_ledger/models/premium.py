"""Premium quote request and response bodies."""

from enum import Enum

from pydantic import AliasChoices, ConfigDict, Field

from .base import BaseModelConfig


class RiskTier(str, Enum):
    """Risk tiers of a quote. The original Spanish spellings resolve here too."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def _missing_(cls, value: object) -> "RiskTier | None":
        return SPANISH_RISK_TIERS.get(value) if isinstance(value, str) else None


SPANISH_RISK_TIERS: dict[str, RiskTier] = {
    "BAJO": RiskTier.LOW,
    "MEDIO": RiskTier.MEDIUM,
    "ALTO": RiskTier.HIGH,
}


class PremiumRequest(BaseModelConfig):
    """Inputs of a premium quote."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    kind: str = Field(..., validation_alias=AliasChoices("kind", "tipo"))
    insured_value: str = Field(
        ..., validation_alias=AliasChoices("insuredValue", "insured_value", "valor")
    )
    risk_tier: str = Field(
        default=RiskTier.MEDIUM.value,
        validation_alias=AliasChoices("riskTier", "risk_tier", "historialRiesgo"),
    )


class PremiumQuote(BaseModelConfig):
    """Calculated premium, serialized as ``{"prima": "800.00"}``."""

    model_config = ConfigDict(populate_by_name=True)

    premium: str = Field(..., alias="prima", description="Two-decimal fixed point")
