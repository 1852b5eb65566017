"""
Investor — Модель инвестора

Pydantic модель с неизменяемыми идентификационными полями.
Текущий баланс и история заявок — приватное состояние, которое изменяется
только через add_balance / deduct_balance / append_record под
per-investor lock.
"""

from decimal import Decimal
from threading import Lock
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, Field, PrivateAttr

from .money import ZERO, MoneyLike, is_positive, to_money


class Investor(BaseModel):
    """
    Модель инвестора.

    Инварианты:
    - balance >= 0 в любой наблюдаемый момент
    - списание и зачисление для одного инвестора сериализованы
    - история заявок только дополняется (record_id в порядке подачи)
    """

    investor_id: str = Field(..., min_length=1, description="Уникальный идентификатор инвестора")
    display_name: str = Field(..., min_length=1, description="Отображаемое имя")
    opening_balance: Decimal = Field(
        default=ZERO, ge=0, description="Баланс на момент создания"
    )

    model_config = {"frozen": True}

    _balance: Decimal = PrivateAttr(default=ZERO)
    _history: List[str] = PrivateAttr(default_factory=list)
    _lock: Any = PrivateAttr(default_factory=Lock)

    def model_post_init(self, __context: Any) -> None:
        self._balance = self.opening_balance

    @property
    def balance(self) -> Decimal:
        """Текущий баланс."""
        with self._lock:
            return self._balance

    def add_balance(self, amount: MoneyLike) -> Decimal:
        """
        Зачисление средств (депозит, возврат проигравшему).

        Неположительные суммы игнорируются.

        Returns:
            Баланс после операции
        """
        value = to_money(amount)
        with self._lock:
            if is_positive(value):
                self._balance += value
            return self._balance

    def deduct_balance(self, amount: MoneyLike) -> bool:
        """
        Списание средств.

        Args:
            amount: Сумма списания

        Returns:
            True если списание выполнено (неположительная сумма — no-op, True);
            False если средств недостаточно, баланс не изменён
        """
        value = to_money(amount)
        with self._lock:
            if not is_positive(value):
                return True
            if self._balance < value:
                return False
            self._balance -= value
            return True

    def append_record(self, record_id: str) -> None:
        """Добавить заявку в историю."""
        if not record_id:
            return
        with self._lock:
            self._history.append(record_id)

    def history_ids(self) -> Tuple[str, ...]:
        """Снапшот истории заявок (record_id в порядке подачи)."""
        with self._lock:
            return tuple(self._history)

    def to_view(self) -> Dict[str, Any]:
        """JSON-совместимое представление для отображения (контракт investor)."""
        with self._lock:
            balance = self._balance
            history = list(self._history)
        return {
            "investor_id": self.investor_id,
            "display_name": self.display_name,
            "balance": str(balance),
            "history": history,
        }
