"""InvestorService — учётные записи инвесторов.

Вход/регистрация (для identity-коллаборатора), депозит и история заявок.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from src.core.domain.application import ApplicationRecord
from src.core.domain.investor import Investor
from src.core.domain.money import MoneyLike, is_positive, to_money, validate_non_negative
from src.core.errors import NotFoundError
from src.ledger.store import Ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountsConfig:
    """Конфигурация учётных записей."""
    default_balance: Decimal = Decimal("100000")


class InvestorService:
    """Сервис инвесторов поверх Ledger."""

    def __init__(self, ledger: Ledger, config: Optional[AccountsConfig] = None):
        self.ledger = ledger
        self.config = config or AccountsConfig()

    def find_investor(self, investor_id: str) -> Optional[Investor]:
        return self.ledger.find_investor(investor_id)

    def get_all_investors(self) -> List[Investor]:
        return self.ledger.find_all_investors()

    def login_or_create(self, investor_id: str) -> Investor:
        """
        Найти инвестора или создать нового с балансом по умолчанию.

        Имя нового инвестора совпадает с его идентификатором.

        Raises:
            ValueError: пустой investor_id
        """
        if not investor_id:
            raise ValueError("investor_id must be non-empty")
        existing = self.ledger.find_investor(investor_id)
        if existing is not None:
            return existing
        candidate = Investor(
            investor_id=investor_id,
            display_name=investor_id,
            opening_balance=self.config.default_balance,
        )
        investor = self.ledger.save_investor_if_absent(candidate)
        if investor is not candidate:
            return investor
        logger.info("Created investor %s with balance %s", investor_id, investor.balance)
        return investor

    def create_investor(self, display_name: str, initial_balance: MoneyLike) -> Investor:
        """Создать инвестора с идентификатором, выданным Ledger."""
        balance = validate_non_negative(to_money(initial_balance), "initial_balance")
        investor = Investor(
            investor_id=self.ledger.next_investor_id(),
            display_name=display_name,
            opening_balance=balance,
        )
        self.ledger.save_investor(investor)
        return investor

    def register_investor(
        self, investor_id: str, display_name: str, initial_balance: MoneyLike
    ) -> Investor:
        """
        Зарегистрировать инвестора с заданным идентификатором.

        Raises:
            ValueError: инвестор уже существует или баланс отрицателен
        """
        balance = validate_non_negative(to_money(initial_balance), "initial_balance")
        investor = Investor(
            investor_id=investor_id,
            display_name=display_name,
            opening_balance=balance,
        )
        if self.ledger.save_investor_if_absent(investor) is not investor:
            raise ValueError("Investor already exists")
        return investor

    def deposit(self, investor_id: str, amount: MoneyLike) -> Decimal:
        """
        Пополнить баланс.

        Returns:
            Баланс после пополнения

        Raises:
            ValueError: сумма не положительна
            NotFoundError: инвестор не найден
        """
        value = to_money(amount)
        if not is_positive(value):
            raise ValueError("Deposit amount must be positive")
        investor = self.ledger.find_investor(investor_id)
        if investor is None:
            raise NotFoundError("Investor not found")
        balance = investor.add_balance(value)
        logger.info("Deposit investor=%s amount=%s balance=%s", investor_id, value, balance)
        return balance

    def history(self, investor_id: str) -> List[ApplicationRecord]:
        return self.ledger.find_records_by_investor(investor_id)
