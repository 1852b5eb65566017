"""DrawEngine — однократный лотерейный розыгрыш размещения.

Предусловия execute_draw():
- размещение существует → иначе NotFoundError
- now >= deadline → иначе InvalidStateError("Cannot draw before deadline")
- compare-and-set draw_executed False → True → иначе
  InvalidStateError("Draw already executed"), без побочных эффектов
- флаг выставляется и PENDING заявки собираются атомарно относительно
  записи новых PENDING заявок (Ledger.begin_draw)

Алгоритм:
1. Все PENDING заявки размещения
2. Равномерная случайная перестановка (Fisher–Yates через random.shuffle)
3. Проход с remaining = total_quantity: WON пока заявка помещается,
   иначе LOST (+ возврат price_per_lot * quantity при refund_losers)
"""

import logging
import random
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

from src.core.domain.application import ApplicationStatus
from src.core.domain.draw_result import DrawResult
from src.core.domain.money import ZERO
from src.core.errors import InvalidStateError, NotFoundError
from src.ledger.store import Ledger, utc_now

logger = logging.getLogger(__name__)


class DrawEngine:
    """Исполнитель розыгрыша.

    Источник перестановок внедряется: random.SystemRandom() в продакшене,
    random.Random(seed) в тестах для воспроизводимости.
    """

    def __init__(
        self,
        ledger: Ledger,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_draw_executed: Optional[Callable[[str], object]] = None,
    ):
        """
        Args:
            ledger: общее хранилище
            rng: источник случайных перестановок
            clock: источник текущего времени (UTC)
            on_draw_executed: вызывается с stock_id после завершения розыгрыша
                (например, KeyedLockRegistry.evict_stock)
        """
        self.ledger = ledger
        self._rng = rng or random.SystemRandom()
        self._clock = clock or utc_now
        self._on_draw_executed = on_draw_executed

    def execute_draw(self, stock_id: str, refund_losers: bool = False) -> DrawResult:
        """Провести розыгрыш.

        Raises:
            NotFoundError: размещение не найдено
            InvalidStateError: дедлайн не наступил или розыгрыш уже проведён
        """
        stock = self.ledger.find_stock(stock_id)
        if stock is None:
            raise NotFoundError("Stock not found")

        if not stock.is_expired(self._clock()):
            logger.warning("Draw rejected for %s: deadline not reached", stock_id)
            raise InvalidStateError("Cannot draw before deadline")

        pending = self.ledger.begin_draw(stock)
        if pending is None:
            logger.warning("Draw rejected for %s: already executed", stock_id)
            raise InvalidStateError("Draw already executed")

        self._rng.shuffle(pending)

        remaining = stock.total_quantity
        winners = 0
        losers = 0
        refunded: Decimal = ZERO

        for record in pending:
            if remaining >= record.quantity:
                self.ledger.transition_record(record.record_id, ApplicationStatus.WON)
                winners += 1
                remaining -= record.quantity
                continue

            self.ledger.transition_record(record.record_id, ApplicationStatus.LOST)
            losers += 1
            if refund_losers:
                investor = self.ledger.find_investor(record.investor_id)
                if investor is None:
                    logger.warning(
                        "Refund skipped for %s: investor %s not found",
                        record.record_id, record.investor_id,
                    )
                    continue
                investor.add_balance(record.total_cost)
                refunded += record.total_cost

        result = DrawResult(
            stock_id=stock_id,
            allocated_lots=stock.total_quantity - remaining,
            total_pending=len(pending),
            winners=winners,
            losers=losers,
            refunded_amount=refunded,
        )
        logger.info(
            "Draw %s: allocated=%d/%d pending=%d winners=%d losers=%d refunded=%s",
            stock_id, result.allocated_lots, stock.total_quantity,
            result.total_pending, winners, losers, refunded,
        )

        if self._on_draw_executed is not None:
            try:
                self._on_draw_executed(stock_id)
            except Exception:
                logger.exception("on_draw_executed hook failed for %s", stock_id)
        return result
