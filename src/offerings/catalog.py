"""OfferingCatalog — публикация размещений и read-only списки для отображения.

Порядок list_for_display():
1. AVAILABLE — приём заявок открыт
2. ENDED — дедлайн прошёл, розыгрыш ожидается
3. FINISHED — розыгрыш проведён
Внутри фазы — по возрастанию дедлайна.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from src.core.domain.money import MoneyLike, to_money
from src.core.domain.offering import Offering, OfferingPhase
from src.ledger.store import Ledger, utc_now

logger = logging.getLogger(__name__)

_PHASE_ORDER = {
    OfferingPhase.AVAILABLE: 0,
    OfferingPhase.ENDED: 1,
    OfferingPhase.FINISHED: 2,
}


class OfferingCatalog:
    """Каталог размещений поверх Ledger."""

    def __init__(self, ledger: Ledger, clock: Optional[Callable[[], datetime]] = None):
        self.ledger = ledger
        self._clock = clock or utc_now

    def publish(
        self,
        stock_name: str,
        stock_symbol: str,
        price: MoneyLike,
        total_quantity: int,
        deadline: datetime,
        issuer_name: str,
    ) -> Offering:
        """
        Опубликовать размещение.

        Raises:
            pydantic.ValidationError: невалидные параметры (цена <= 0,
                total_quantity <= 0, naive deadline, пустые строки)
        """
        offering = Offering(
            stock_id=self.ledger.next_stock_id(),
            stock_name=stock_name,
            stock_symbol=stock_symbol,
            price=to_money(price),
            total_quantity=total_quantity,
            deadline=deadline,
            issuer_name=issuer_name,
        )
        self.ledger.save_stock(offering)
        logger.info(
            "Published %s (%s) price=%s lots=%d deadline=%s",
            offering.stock_id, offering.stock_name, offering.price,
            offering.total_quantity, offering.deadline.isoformat(),
        )
        return offering

    def find(self, stock_id: str) -> Optional[Offering]:
        return self.ledger.find_stock(stock_id)

    def list_open_offerings(self, now: Optional[datetime] = None) -> List[Offering]:
        return self.ledger.find_open_stocks(now or self._clock())

    def list_all_offerings(self) -> List[Offering]:
        return self.ledger.find_all_stocks()

    def list_for_display(self, now: Optional[datetime] = None) -> List[Offering]:
        now = now or self._clock()
        return sorted(
            self.ledger.find_all_stocks(),
            key=lambda stock: (_PHASE_ORDER[stock.phase(now)], stock.deadline),
        )

    def phase(self, offering: Offering, now: Optional[datetime] = None) -> OfferingPhase:
        return offering.phase(now or self._clock())
