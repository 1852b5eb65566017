"""
Offering — Модель размещения (IPO)

Pydantic модель, неизменяемая после публикации, за исключением one-way
флага draw_executed (False → True ровно один раз, через compare-and-set).
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from src.core.concurrency.atomic import AtomicBoolean

from .money import lot_cost


# =============================================================================
# ENUMS
# =============================================================================


class OfferingPhase(str, Enum):
    """Фаза размещения для отображения."""

    AVAILABLE = "AVAILABLE"  # приём заявок открыт
    ENDED = "ENDED"  # дедлайн прошёл, розыгрыш не проведён
    FINISHED = "FINISHED"  # розыгрыш проведён


# =============================================================================
# OFFERING MODEL
# =============================================================================


class Offering(BaseModel):
    """
    Модель размещения.

    Временные границы:
    - заявки принимаются при now < deadline
    - розыгрыш допустим при now >= deadline
    """

    stock_id: str = Field(..., min_length=1, description="Идентификатор размещения")
    stock_name: str = Field(..., min_length=1, description="Название компании")
    stock_symbol: str = Field(..., min_length=1, description="Тикер")
    price: Decimal = Field(..., gt=0, description="Цена одного лота")
    total_quantity: int = Field(..., gt=0, description="Общее количество лотов")
    deadline: datetime = Field(..., description="Окончание приёма заявок (timezone-aware)")
    issuer_name: str = Field(..., min_length=1, description="Эмитент")

    model_config = {"frozen": True}

    _draw_executed: Any = PrivateAttr(default_factory=AtomicBoolean)

    @field_validator("deadline")
    @classmethod
    def validate_deadline_aware(cls, v: datetime) -> datetime:
        """Naive datetime запрещён: сравнения с часами идут в UTC."""
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("deadline must be timezone-aware")
        return v

    @property
    def draw_executed(self) -> bool:
        return self._draw_executed.get()

    def try_mark_draw_executed(self) -> bool:
        """
        Атомарный переход draw_executed False → True.

        Returns:
            True только для одного вызывающего; остальные получают False
        """
        return self._draw_executed.compare_and_set(False, True)

    def accepts_applications(self, now: datetime) -> bool:
        """Приём заявок открыт (now < deadline)."""
        return now < self.deadline

    def is_expired(self, now: datetime) -> bool:
        """Дедлайн наступил (now >= deadline)."""
        return now >= self.deadline

    def is_open(self, now: datetime) -> bool:
        return not self.draw_executed and self.accepts_applications(now)

    def phase(self, now: datetime) -> OfferingPhase:
        if self.draw_executed:
            return OfferingPhase.FINISHED
        if self.is_expired(now):
            return OfferingPhase.ENDED
        return OfferingPhase.AVAILABLE

    def cost_of(self, quantity: int) -> Decimal:
        """Стоимость quantity лотов по текущей цене."""
        return lot_cost(self.price, quantity)

    def to_view(self) -> Dict[str, Any]:
        """JSON-совместимое представление для отображения (контракт offering)."""
        view = self.model_dump(mode="json")
        view["draw_executed"] = self.draw_executed
        return view
