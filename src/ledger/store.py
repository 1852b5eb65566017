"""Ledger — потокобезопасное in-memory хранилище.

Хранит инвесторов, размещения, журнал заявок и счётчики резервирования
лотов. Единственное разделяемое изменяемое состояние системы; создаётся один
раз и передаётся сервисам по ссылке.

Инварианты:
- 0 <= reserved_lots(stock_id) <= total_quantity в любой момент
- не более одной активной (PENDING/WON/LOST) заявки на пару investor/stock
- записи журнала не удаляются (кроме reset/clear)
"""

import itertools
import logging
from datetime import datetime, timezone
from threading import Lock, RLock
from typing import Callable, Dict, List, Optional

from src.core.concurrency.atomic import AtomicInteger
from src.core.domain.application import ApplicationRecord, ApplicationStatus
from src.core.domain.investor import Investor
from src.core.domain.offering import Offering
from src.core.errors import InvalidStateError, NotFoundError
from src.ledger.seed import SeedConfig, seed_demo_data

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Sequence:
    """Потокобезопасный генератор идентификаторов PREFIX-N."""

    def __init__(self, prefix: str, start: int):
        self._prefix = prefix
        self._start = start
        self._lock = Lock()
        self._counter = itertools.count(start + 1)

    def next(self) -> str:
        with self._lock:
            return f"{self._prefix}-{next(self._counter)}"

    def reset(self) -> None:
        with self._lock:
            self._counter = itertools.count(self._start + 1)


class Ledger:
    """In-memory хранилище с атомарными счётчиками резервирования."""

    def __init__(self, seed_config: Optional[SeedConfig] = None, clock: Optional[Clock] = None):
        """
        Args:
            seed_config: конфигурация демо-данных (по умолчанию — засеять)
            clock: источник текущего времени для дедлайнов демо-данных
        """
        self.seed_config = seed_config or SeedConfig()
        self._clock = clock or utc_now

        self._lock = RLock()
        self._investors: Dict[str, Investor] = {}
        self._stocks: Dict[str, Offering] = {}
        self._records: Dict[str, ApplicationRecord] = {}
        self._reservations: Dict[str, AtomicInteger] = {}

        self._investor_seq = _Sequence("INV", 1000)
        self._stock_seq = _Sequence("STK", 2000)
        self._record_seq = _Sequence("REC", 3000)

        if self.seed_config.seed_demo_data:
            seed_demo_data(self, self._clock(), self.seed_config)

    # -------------------------------------------------------------------------
    # Identifiers
    # -------------------------------------------------------------------------

    def next_investor_id(self) -> str:
        return self._investor_seq.next()

    def next_stock_id(self) -> str:
        return self._stock_seq.next()

    def next_record_id(self) -> str:
        return self._record_seq.next()

    # -------------------------------------------------------------------------
    # Investors
    # -------------------------------------------------------------------------

    def save_investor(self, investor: Investor) -> Investor:
        with self._lock:
            self._investors[investor.investor_id] = investor
        return investor

    def save_investor_if_absent(self, investor: Investor) -> Investor:
        """
        Атомарно сохранить инвестора, если id свободен.

        Returns:
            Уже существующий инвестор с этим id либо сохранённый investor
        """
        with self._lock:
            return self._investors.setdefault(investor.investor_id, investor)

    def find_investor(self, investor_id: str) -> Optional[Investor]:
        with self._lock:
            return self._investors.get(investor_id)

    def find_all_investors(self) -> List[Investor]:
        with self._lock:
            return list(self._investors.values())

    # -------------------------------------------------------------------------
    # Offerings
    # -------------------------------------------------------------------------

    def save_stock(self, stock: Offering) -> Offering:
        """Сохранить размещение и создать его счётчик резервирования."""
        with self._lock:
            self._stocks[stock.stock_id] = stock
            self._reservations.setdefault(stock.stock_id, AtomicInteger(0))
        return stock

    def find_stock(self, stock_id: str) -> Optional[Offering]:
        with self._lock:
            return self._stocks.get(stock_id)

    def find_all_stocks(self) -> List[Offering]:
        with self._lock:
            return list(self._stocks.values())

    def find_open_stocks(self, now: datetime) -> List[Offering]:
        return [stock for stock in self.find_all_stocks() if stock.is_open(now)]

    # -------------------------------------------------------------------------
    # Application records
    # -------------------------------------------------------------------------

    def save_record(self, record: ApplicationRecord) -> ApplicationRecord:
        """
        Добавить заявку в журнал.

        Raises:
            ValueError: если record_id уже записан
        """
        with self._lock:
            if record.record_id in self._records:
                raise ValueError(f"Record {record.record_id} already saved")
            self._records[record.record_id] = record
        return record

    def save_pending_record(self, record: ApplicationRecord, stock: Offering) -> bool:
        """
        Добавить PENDING заявку, если розыгрыш размещения ещё не начат.

        Взаимоисключающе с begin_draw(): заявка либо попадает в выборку
        розыгрыша, либо не сохраняется.

        Returns:
            False без изменений, если draw_executed уже выставлен

        Raises:
            ValueError: если record_id уже записан
        """
        with self._lock:
            if stock.draw_executed:
                return False
            self.save_record(record)
            return True

    def begin_draw(self, stock: Offering) -> Optional[List[ApplicationRecord]]:
        """
        Атомарно выставить draw_executed и забрать PENDING заявки размещения.

        Returns:
            Список PENDING заявок; None, если розыгрыш уже проведён
        """
        with self._lock:
            if not stock.try_mark_draw_executed():
                return None
            return self.find_pending_by_stock(stock.stock_id)

    def find_record(self, record_id: str) -> Optional[ApplicationRecord]:
        with self._lock:
            return self._records.get(record_id)

    def find_records_by_investor(self, investor_id: str) -> List[ApplicationRecord]:
        with self._lock:
            return [r for r in self._records.values() if r.investor_id == investor_id]

    def find_records_by_stock(self, stock_id: str) -> List[ApplicationRecord]:
        with self._lock:
            return [r for r in self._records.values() if r.stock_id == stock_id]

    def find_pending_by_stock(self, stock_id: str) -> List[ApplicationRecord]:
        with self._lock:
            return [
                r for r in self._records.values()
                if r.stock_id == stock_id and r.status is ApplicationStatus.PENDING
            ]

    def has_record(self, investor_id: str, stock_id: str) -> bool:
        """Есть ли активная (не FAILED_*) заявка пары investor/stock."""
        with self._lock:
            return any(
                r.investor_id == investor_id and r.stock_id == stock_id and r.is_active
                for r in self._records.values()
            )

    def transition_record(self, record_id: str, status: ApplicationStatus) -> ApplicationRecord:
        """
        Итоговый переход заявки PENDING → WON | LOST.

        Raises:
            NotFoundError: заявка не найдена
            ValueError: целевой статус не WON/LOST
            InvalidStateError: заявка уже не PENDING
        """
        if status not in (ApplicationStatus.WON, ApplicationStatus.LOST):
            raise ValueError(f"Draw transition must be WON or LOST, got {status.value}")
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise NotFoundError(f"Record {record_id} not found")
            if record.status is not ApplicationStatus.PENDING:
                raise InvalidStateError(
                    f"Record {record_id} is {record.status.value}, expected PENDING"
                )
            updated = record.with_status(status)
            self._records[record_id] = updated
            return updated

    # -------------------------------------------------------------------------
    # Reservations
    # -------------------------------------------------------------------------

    def _counter(self, stock_id: str) -> AtomicInteger:
        with self._lock:
            return self._reservations.setdefault(stock_id, AtomicInteger(0))

    def reserve_lots(self, stock_id: str, quantity: int, capacity: int) -> bool:
        """
        Оптимистичное резервирование лотов (compare-and-set retry loop).

        Returns:
            False без изменений, если current + quantity > capacity
        """
        counter = self._counter(stock_id)
        while True:
            current = counter.get()
            if current + quantity > capacity:
                return False
            if counter.compare_and_set(current, current + quantity):
                return True
            logger.debug("Reservation contention on stock=%s, retrying", stock_id)

    def release_lots(self, stock_id: str, quantity: int) -> None:
        """Компенсирующее освобождение лотов; счётчик не опускается ниже нуля."""
        with self._lock:
            counter = self._reservations.get(stock_id)
        if counter is None:
            return
        counter.update_and_get(lambda value: max(0, value - quantity))

    def reserved_lots(self, stock_id: str) -> int:
        with self._lock:
            counter = self._reservations.get(stock_id)
        return counter.get() if counter is not None else 0

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """Удалить всё состояние и сбросить генераторы идентификаторов."""
        with self._lock:
            self._investors.clear()
            self._stocks.clear()
            self._records.clear()
            self._reservations.clear()
            for seq in (self._investor_seq, self._stock_seq, self._record_seq):
                seq.reset()

    def reset(self) -> None:
        """Очистить хранилище и заново засеять демо-данные."""
        with self._lock:
            self.clear()
            seed_demo_data(self, self._clock(), self.seed_config)
            seeded = len(self._stocks)
        logger.info("Ledger reset: %d offerings seeded", seeded)
