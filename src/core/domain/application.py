"""
ApplicationRecord — Модель заявки на участие в размещении

Immutable Pydantic модель. Запись создаётся один раз и больше не удаляется
(журнал аудита). Единственный переход статуса (PENDING → WON/LOST)
выполняется созданием нового экземпляра через with_status().
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, Field, model_validator

from .money import lot_cost


# =============================================================================
# ENUMS
# =============================================================================


class ApplicationStatus(str, Enum):
    """
    Статус заявки.

    PENDING → WON | LOST (только DrawEngine).
    FAILED_* — терминальные статусы, выставляемые при подаче.
    """

    PENDING = "PENDING"
    WON = "WON"
    LOST = "LOST"
    FAILED_FUNDS = "FAILED_FUNDS"
    FAILED_DUPLICATE = "FAILED_DUPLICATE"
    FAILED_DEADLINE = "FAILED_DEADLINE"
    FAILED_SOLD_OUT = "FAILED_SOLD_OUT"

    @property
    def is_failure(self) -> bool:
        return self in FAILURE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self is not ApplicationStatus.PENDING


FAILURE_STATUSES: FrozenSet[ApplicationStatus] = frozenset(
    {
        ApplicationStatus.FAILED_FUNDS,
        ApplicationStatus.FAILED_DUPLICATE,
        ApplicationStatus.FAILED_DEADLINE,
        ApplicationStatus.FAILED_SOLD_OUT,
    }
)

# Статусы, занимающие пару (investor_id, stock_id)
ACTIVE_STATUSES: FrozenSet[ApplicationStatus] = frozenset(
    {ApplicationStatus.PENDING, ApplicationStatus.WON, ApplicationStatus.LOST}
)


# =============================================================================
# APPLICATION RECORD MODEL
# =============================================================================


class ApplicationRecord(BaseModel):
    """
    Модель заявки.

    price_per_lot — снапшот цены на момент подачи; возврат проигравшему
    считается от него, а не от текущей цены размещения.
    """

    record_id: str = Field(..., min_length=1, description="Идентификатор заявки")
    investor_id: str = Field(..., min_length=1, description="Идентификатор инвестора")
    stock_id: str = Field(..., min_length=1, description="Идентификатор размещения")
    quantity: int = Field(..., ge=1, description="Количество лотов")
    price_per_lot: Decimal = Field(..., ge=0, description="Цена лота на момент подачи")
    apply_time: datetime = Field(..., description="Время подачи")
    status: ApplicationStatus = Field(
        default=ApplicationStatus.PENDING, description="Статус заявки"
    )
    failure_reason: Optional[str] = Field(
        default=None, description="Причина отказа (только для FAILED_*)"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_failure_reason(self) -> "ApplicationRecord":
        """failure_reason допустим только для FAILED_* статусов."""
        if self.failure_reason is not None and not self.status.is_failure:
            raise ValueError(
                f"failure_reason set for non-failed status {self.status.value}"
            )
        return self

    @property
    def total_cost(self) -> Decimal:
        """Сумма, удержанная при подаче: price_per_lot * quantity."""
        return lot_cost(self.price_per_lot, self.quantity)

    @property
    def is_active(self) -> bool:
        """Заявка занимает пару (investor_id, stock_id)."""
        return self.status in ACTIVE_STATUSES

    def with_status(self, status: ApplicationStatus) -> "ApplicationRecord":
        """Новый экземпляр с итоговым статусом розыгрыша."""
        return self.model_copy(update={"status": status, "failure_reason": None})
