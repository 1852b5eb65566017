"""Демо-данные для Ledger.reset().

Один демо-инвестор и набор размещений с дедлайнами относительно now:
два уже закрыты (готовы к розыгрышу), остальные открыты.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, List, Tuple

from src.core.domain.investor import Investor
from src.core.domain.offering import Offering

if TYPE_CHECKING:
    from src.ledger.store import Ledger


@dataclass(frozen=True)
class SeedConfig:
    """Конфигурация демо-данных."""
    seed_demo_data: bool = True
    demo_investor_name: str = "Demo Investor"
    demo_investor_balance: Decimal = Decimal("50000")


# (stock_name, symbol, price, total_quantity, deadline offset, issuer)
DEMO_OFFERINGS: List[Tuple[str, str, str, int, timedelta, str]] = [
    ("TSMC", "2330", "1000", 10, timedelta(minutes=-1), "TSMC"),
    ("MediaTek", "2454", "1200", 5, timedelta(days=2), "MediaTek"),
    ("Evergreen", "2603", "150", 100, timedelta(days=5), "Evergreen Marine"),
    ("Yang Ming", "2609", "120", 80, timedelta(days=5), "Yang Ming Marine"),
    ("Fubon Financial", "2881", "60", 500, timedelta(days=7), "Fubon"),
    ("Mega Financial", "2886", "40", 600, timedelta(days=7), "Mega"),
    ("Old Corp", "0000", "200", 50, timedelta(days=-1), "Legacy Holdings"),
    ("Urgent Corp", "9999", "300", 30, timedelta(hours=1), "Urgent Ventures"),
    ("Penny Stock", "1111", "10", 1000, timedelta(days=4), "Penny Inc"),
    ("Luxury Corp", "8888", "5000", 1, timedelta(days=6), "Luxury Holdings"),
]


def seed_demo_data(ledger: "Ledger", now: datetime, config: SeedConfig) -> None:
    """Заполнить ledger демо-инвестором и размещениями."""
    ledger.save_investor(
        Investor(
            investor_id=ledger.next_investor_id(),
            display_name=config.demo_investor_name,
            opening_balance=config.demo_investor_balance,
        )
    )
    for name, symbol, price, total, offset, issuer in DEMO_OFFERINGS:
        ledger.save_stock(
            Offering(
                stock_id=ledger.next_stock_id(),
                stock_name=name,
                stock_symbol=symbol,
                price=Decimal(price),
                total_quantity=total,
                deadline=now + offset,
                issuer_name=issuer,
            )
        )
