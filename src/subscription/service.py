"""SubscriptionService — подача заявки на размещение.

Порядок проверок apply():
1. Инвестор существует → иначе investor_not_found (без записи)
2. Размещение существует → иначе offering_not_found (без записи)
3. now < deadline → иначе FAILED_DEADLINE
4. Нет активной заявки пары → иначе FAILED_DUPLICATE

Критическая секция под KeyedLockRegistry.hold(investor_id, stock_id):
- повторная проверка дубликата (гонка между шагом 4 и захватом lock)
- reserve_lots → иначе FAILED_SOLD_OUT (средства не трогаются)
- deduct price * quantity → иначе release_lots (компенсация) + FAILED_FUNDS
- запись PENDING + история инвестора
- если розыгрыш уже начат к моменту записи → возврат средств, release_lots,
  FAILED_DEADLINE

Каждый исход после шага 2 оставляет ровно одну запись в журнале.
Бизнес-отказы возвращаются как ApplicationResult, не как исключения.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from src.core.concurrency.keyed_locks import KeyedLockRegistry
from src.core.domain.application import ApplicationRecord, ApplicationStatus
from src.core.domain.investor import Investor
from src.core.domain.offering import Offering
from src.ledger.store import Ledger, utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# REASONS
# =============================================================================

REASON_INVESTOR_NOT_FOUND = "investor_not_found"
REASON_OFFERING_NOT_FOUND = "offering_not_found"
REASON_DEADLINE_PASSED = "deadline_passed"
REASON_DUPLICATE = "duplicate_application"
REASON_SOLD_OUT = "sold_out"
REASON_INSUFFICIENT_FUNDS = "insufficient_funds"


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class SubscriptionConfig:
    """Конфигурация приёма заявок.

    oversubscription_ratio: сколько лотов можно зарезервировать заявками
    относительно total_quantity. 1 — резерв не превышает размещение (каждая
    PENDING заявка гарантированно выигрывает); N > 1 — лотерея среди
    заявок на объём до N * total_quantity.
    """
    oversubscription_ratio: int = 1

    def __post_init__(self):
        if self.oversubscription_ratio < 1:
            raise ValueError(
                f"oversubscription_ratio must be >= 1, got {self.oversubscription_ratio}"
            )

    def application_capacity(self, total_quantity: int) -> int:
        return total_quantity * self.oversubscription_ratio


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class ApplicationResult:
    """Результат подачи заявки."""

    success: bool
    reason: str  # "" при успехе
    message: str  # человекочитаемое сообщение для отображения

    # Запись журнала (None только для not-found отказов)
    record: Optional[ApplicationRecord]

    @property
    def status(self) -> Optional[ApplicationStatus]:
        return self.record.status if self.record is not None else None


# =============================================================================
# SERVICE
# =============================================================================


class SubscriptionService:
    """Оркестрация заявки: валидация, резервирование, списание, компенсация."""

    def __init__(
        self,
        ledger: Ledger,
        lock_registry: Optional[KeyedLockRegistry] = None,
        clock: Optional[Callable[[], datetime]] = None,
        config: Optional[SubscriptionConfig] = None,
    ):
        """
        Args:
            ledger: общее хранилище
            lock_registry: реестр per-pair блокировок
            clock: источник текущего времени (UTC)
            config: конфигурация приёма заявок
        """
        self.ledger = ledger
        self.config = config or SubscriptionConfig()
        self.lock_registry = lock_registry or KeyedLockRegistry()
        self._clock = clock or utc_now

    def apply(self, investor_id: str, stock_id: str, quantity: int = 1) -> ApplicationResult:
        """Подать заявку на quantity лотов.

        Raises:
            ValueError: quantity < 1 (ошибка вызывающей стороны)
        """
        if quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {quantity}")

        investor = self.ledger.find_investor(investor_id)
        if investor is None:
            return ApplicationResult(
                success=False,
                reason=REASON_INVESTOR_NOT_FOUND,
                message="Investor not found",
                record=None,
            )
        stock = self.ledger.find_stock(stock_id)
        if stock is None:
            return ApplicationResult(
                success=False,
                reason=REASON_OFFERING_NOT_FOUND,
                message="IPO not found",
                record=None,
            )

        now = self._clock()
        if not stock.accepts_applications(now):
            return self._reject_deadline(investor, stock, quantity, now)
        if self.ledger.has_record(investor_id, stock_id):
            return self._reject_duplicate(investor, stock, quantity, now)

        with self.lock_registry.hold(investor_id, stock_id):
            if self.ledger.has_record(investor_id, stock_id):
                return self._reject_duplicate(investor, stock, quantity, now)

            if not self.ledger.reserve_lots(
                stock_id, quantity, self.config.application_capacity(stock.total_quantity)
            ):
                return self._reject(
                    investor, stock, quantity, now,
                    status=ApplicationStatus.FAILED_SOLD_OUT,
                    reason=REASON_SOLD_OUT,
                    message="IPO sold out",
                    failure_reason="Sold out",
                )

            return self._commit(investor, stock, quantity, now)

    def history(self, investor_id: str) -> List[ApplicationRecord]:
        return self.ledger.find_records_by_investor(investor_id)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _commit(
        self, investor: Investor, stock: Offering, quantity: int, now: datetime
    ) -> ApplicationResult:
        """Списание и запись PENDING; лоты уже зарезервированы вызывающим."""
        cost = stock.cost_of(quantity)
        try:
            deducted = investor.deduct_balance(cost)
        except Exception:
            self.ledger.release_lots(stock.stock_id, quantity)
            raise

        if not deducted:
            self.ledger.release_lots(stock.stock_id, quantity)
            logger.debug(
                "Released %d lots of %s after failed deduction", quantity, stock.stock_id
            )
            return self._reject(
                investor, stock, quantity, now,
                status=ApplicationStatus.FAILED_FUNDS,
                reason=REASON_INSUFFICIENT_FUNDS,
                message="Insufficient balance",
                failure_reason="Insufficient funds",
            )

        try:
            record = self._create_record(investor, stock, quantity, now, ApplicationStatus.PENDING)
            saved = self.ledger.save_pending_record(record, stock)
        except Exception:
            investor.add_balance(cost)
            self.ledger.release_lots(stock.stock_id, quantity)
            raise

        if not saved:
            # розыгрыш начался после проверки дедлайна
            investor.add_balance(cost)
            self.ledger.release_lots(stock.stock_id, quantity)
            return self._reject_deadline(investor, stock, quantity, now)

        investor.append_record(record.record_id)
        logger.info(
            "Investor %s applied for %s x%d (%s)",
            investor.investor_id, stock.stock_name, quantity, record.record_id,
        )
        return ApplicationResult(
            success=True,
            reason="",
            message="Application submitted",
            record=record,
        )

    def _reject_deadline(
        self, investor: Investor, stock: Offering, quantity: int, now: datetime
    ) -> ApplicationResult:
        return self._reject(
            investor, stock, quantity, now,
            status=ApplicationStatus.FAILED_DEADLINE,
            reason=REASON_DEADLINE_PASSED,
            message="IPO deadline passed",
            failure_reason="Deadline passed",
        )

    def _reject_duplicate(
        self, investor: Investor, stock: Offering, quantity: int, now: datetime
    ) -> ApplicationResult:
        return self._reject(
            investor, stock, quantity, now,
            status=ApplicationStatus.FAILED_DUPLICATE,
            reason=REASON_DUPLICATE,
            message="Duplicate application detected",
            failure_reason="Duplicate application",
        )

    def _reject(
        self,
        investor: Investor,
        stock: Offering,
        quantity: int,
        now: datetime,
        status: ApplicationStatus,
        reason: str,
        message: str,
        failure_reason: str,
    ) -> ApplicationResult:
        """Сохранить FAILED_* запись и вернуть отказ."""
        record = self._create_record(investor, stock, quantity, now, status, failure_reason)
        self.ledger.save_record(record)
        logger.warning(
            "%s investor=%s stock=%s qty=%d",
            status.value, investor.investor_id, stock.stock_id, quantity,
        )
        return ApplicationResult(success=False, reason=reason, message=message, record=record)

    def _create_record(
        self,
        investor: Investor,
        stock: Offering,
        quantity: int,
        now: datetime,
        status: ApplicationStatus,
        failure_reason: Optional[str] = None,
    ) -> ApplicationRecord:
        return ApplicationRecord(
            record_id=self.ledger.next_record_id(),
            investor_id=investor.investor_id,
            stock_id=stock.stock_id,
            quantity=quantity,
            price_per_lot=stock.price,
            apply_time=now,
            status=status,
            failure_reason=failure_reason,
        )
