"""Domain models for policies, claims, history and premiums."""

from .base import BaseModelConfig, LedgerRecord, iso_timestamp
from .claim import Claim, ClaimCreate, ClaimProcess, ClaimStatus
from .history import HistoryEntry, HistoryValue, RawValue, StructuredValue
from .policy import (
    Policy,
    PolicyCancel,
    PolicyCreate,
    PolicyKind,
    PolicyRenew,
    PolicyStatus,
)
from .premium import PremiumQuote, PremiumRequest, RiskTier

__all__ = [
    "BaseModelConfig",
    "Claim",
    "ClaimCreate",
    "ClaimProcess",
    "ClaimStatus",
    "HistoryEntry",
    "HistoryValue",
    "LedgerRecord",
    "Policy",
    "PolicyCancel",
    "PolicyCreate",
    "PolicyKind",
    "PolicyRenew",
    "PolicyStatus",
    "PremiumQuote",
    "PremiumRequest",
    "RawValue",
    "RiskTier",
    "StructuredValue",
    "iso_timestamp",
]
