"""Unit tests for the premium calculator.

Tests verify:
- The published rate and multiplier tables
- Half-up rounding to cents
- Fallbacks for unknown kinds and tiers
- Rejection of values that are not finite numbers
"""

from decimal import Decimal

import pytest

from policy_ledger.core.errors import ErrorKind
from policy_ledger.models import RiskTier
from policy_ledger.services.premium_calculator import (
    DEFAULT_BASE_RATE,
    DEFAULT_RISK_MULTIPLIER,
    PremiumCalculator,
    calculate_premium,
)


class TestLookupTables:
    """Test base rates and risk multipliers."""

    @pytest.mark.parametrize(
        ("kind", "rate"),
        [
            ("Auto", Decimal("0.05")),
            ("Home", Decimal("0.02")),
            ("Hogar", Decimal("0.02")),
            ("Life", Decimal("0.01")),
            ("Vida", Decimal("0.01")),
        ],
    )
    def test_known_kinds(self, kind: str, rate: Decimal) -> None:
        """Each listed kind has its own base rate."""
        assert PremiumCalculator.base_rate(kind) == rate

    def test_unknown_kind_uses_default_rate(self) -> None:
        """Anything unlisted, including a different case, falls back to 0.03."""
        assert PremiumCalculator.base_rate("Boat") == DEFAULT_BASE_RATE
        assert PremiumCalculator.base_rate("auto") == DEFAULT_BASE_RATE
        assert PremiumCalculator.base_rate("") == DEFAULT_BASE_RATE

    @pytest.mark.parametrize(
        ("tier", "multiplier"),
        [
            ("LOW", Decimal("0.8")),
            ("BAJO", Decimal("0.8")),
            ("MEDIUM", Decimal("1.0")),
            ("MEDIO", Decimal("1.0")),
            ("HIGH", Decimal("1.5")),
            ("ALTO", Decimal("1.5")),
        ],
    )
    def test_known_tiers(self, tier: str, multiplier: Decimal) -> None:
        """Both spellings of each tier map to the same multiplier."""
        assert PremiumCalculator.risk_multiplier(tier) == multiplier

    def test_unknown_tier_uses_neutral_multiplier(self) -> None:
        """Unlisted tiers are priced as neutral risk."""
        assert PremiumCalculator.risk_multiplier("EXTREME") == DEFAULT_RISK_MULTIPLIER
        assert PremiumCalculator.risk_multiplier("low") == DEFAULT_RISK_MULTIPLIER


class TestCalculate:
    """Test premium computation."""

    @pytest.mark.parametrize(
        ("kind", "insured_value", "tier", "expected"),
        [
            ("Auto", "20000", "LOW", "800.00"),
            ("Home", "100000", "MEDIUM", "2000.00"),
            ("Life", "50000", "HIGH", "750.00"),
            ("Boat", "10000", "MEDIUM", "300.00"),
            ("Auto", "10000", "UNKNOWN", "500.00"),
            ("Auto", "0", "LOW", "0.00"),
        ],
    )
    def test_table_values(
        self, kind: str, insured_value: str, tier: str, expected: str
    ) -> None:
        """Known inputs produce the published premiums."""
        result = calculate_premium(kind, insured_value, tier)

        assert result.is_ok()
        assert result.unwrap() == expected

    def test_rounds_half_up_to_cents(self) -> None:
        """A premium of exactly half a cent rounds up."""
        assert calculate_premium("Life", "12.5", "MEDIUM").unwrap() == "0.13"
        assert calculate_premium("Auto", "0.1", "MEDIUM").unwrap() == "0.01"

    def test_accepts_fractional_and_padded_values(self) -> None:
        """Decimal text with surrounding whitespace is parsed."""
        assert calculate_premium("Home", " 1234.56 ", "ALTO").unwrap() == "37.04"

    def test_always_two_decimals(self) -> None:
        """Whole premiums still carry two decimals and no exponent."""
        assert calculate_premium("Auto", "1E+6", "MEDIUM").unwrap() == "50000.00"

    @pytest.mark.parametrize("insured_value", ["abc", "", "12,5", "NaN", "Infinity", "-inf"])
    def test_invalid_insured_value(self, insured_value: str) -> None:
        """Values that are not finite numbers are invalid input."""
        result = calculate_premium("Auto", insured_value, "LOW")

        assert result.is_err()
        error = result.unwrap_err()
        assert error.kind == ErrorKind.INVALID_INPUT
        assert "no es un número válido" in error.message

    @pytest.mark.parametrize(
        ("insured_value", "expected"),
        [
            ("1E+27", "40000000000000000000000000.00"),
            ("1E+40", "4" + "0" * 38 + ".00"),
            ("123456789012345678901234567890.125", "4938271560493827156049382715.61"),
        ],
    )
    def test_large_values_are_priced_exactly(
        self, insured_value: str, expected: str
    ) -> None:
        """Values past the default Decimal precision keep every digit."""
        assert calculate_premium("Auto", insured_value, "LOW").unwrap() == expected

    def test_out_of_range_value(self) -> None:
        """Values whose premium exceeds the Decimal exponent range are rejected."""
        result = calculate_premium("Auto", "1E+999999999", "LOW")

        assert result.is_err()
        assert result.unwrap_err().kind == ErrorKind.INVALID_INPUT
        assert "fuera de rango" in result.unwrap_err().message


class TestRiskTier:
    """Test risk tier spellings."""

    @pytest.mark.parametrize(
        ("spelling", "tier"),
        [
            ("LOW", RiskTier.LOW),
            ("BAJO", RiskTier.LOW),
            ("MEDIO", RiskTier.MEDIUM),
            ("ALTO", RiskTier.HIGH),
        ],
    )
    def test_spanish_spellings_resolve(self, spelling: str, tier: RiskTier) -> None:
        """English and Spanish names map to the same member."""
        assert RiskTier(spelling) is tier

    def test_unknown_spelling(self) -> None:
        """Lookups are exact; anything else is not a tier."""
        with pytest.raises(ValueError):
            RiskTier("bajo")
