"""
Domain models and value objects.

Contains fundamental domain entities: Investor, Offering, ApplicationRecord,
DrawResult and the money helpers.
"""

from src.core.domain.application import (
    ACTIVE_STATUSES,
    FAILURE_STATUSES,
    ApplicationRecord,
    ApplicationStatus,
)
from src.core.domain.draw_result import DrawResult
from src.core.domain.investor import Investor
from src.core.domain.money import (
    ZERO,
    is_positive,
    lot_cost,
    to_money,
    validate_non_negative,
)
from src.core.domain.offering import Offering, OfferingPhase

__all__ = [
    # Money module
    "ZERO",
    "to_money",
    "lot_cost",
    "is_positive",
    "validate_non_negative",
    # Investor model
    "Investor",
    # Offering model
    "Offering",
    "OfferingPhase",
    # Application record model
    "ApplicationRecord",
    "ApplicationStatus",
    "ACTIVE_STATUSES",
    "FAILURE_STATUSES",
    # Draw result
    "DrawResult",
]
