"""Subscription — подача заявок на размещение с резервированием и компенсацией."""

from .service import (
    REASON_DEADLINE_PASSED,
    REASON_DUPLICATE,
    REASON_INSUFFICIENT_FUNDS,
    REASON_INVESTOR_NOT_FOUND,
    REASON_OFFERING_NOT_FOUND,
    REASON_SOLD_OUT,
    ApplicationResult,
    SubscriptionConfig,
    SubscriptionService,
)

__all__ = [
    "SubscriptionService",
    "ApplicationResult",
    "SubscriptionConfig",
    "REASON_INVESTOR_NOT_FOUND",
    "REASON_OFFERING_NOT_FOUND",
    "REASON_DEADLINE_PASSED",
    "REASON_DUPLICATE",
    "REASON_SOLD_OUT",
    "REASON_INSUFFICIENT_FUNDS",
]
