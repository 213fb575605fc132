"""Contract services: policies, claims, history, private data, premiums."""

from .claim_service import ClaimService
from .history_service import HistoryService, project_modification
from .policy_service import PolicyService, load_policy, store_policy
from .premium_calculator import PremiumCalculator, calculate_premium
from .private_data_service import PrivateDataService

__all__ = [
    "ClaimService",
    "HistoryService",
    "PolicyService",
    "PremiumCalculator",
    "PrivateDataService",
    "calculate_premium",
    "load_policy",
    "project_modification",
    "store_policy",
]
