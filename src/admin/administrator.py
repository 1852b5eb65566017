"""
Administrator — Модель администратора

Immutable Pydantic модель оператора, публикующего размещения и
запускающего розыгрыши. Сам по себе не хранит состояние: все действия
делегируются в OfferingCatalog и DrawEngine.
"""

import logging
from datetime import datetime

from pydantic import BaseModel, Field

from src.core.domain.draw_result import DrawResult
from src.core.domain.money import MoneyLike
from src.core.domain.offering import Offering
from src.draw.engine import DrawEngine
from src.offerings.catalog import OfferingCatalog

logger = logging.getLogger(__name__)


class Administrator(BaseModel):
    """Администратор системы."""

    admin_id: str = Field(..., min_length=1, description="Идентификатор администратора")
    name: str = Field(..., min_length=1, description="Имя администратора")

    model_config = {"frozen": True}

    def publish_ipo(
        self,
        catalog: OfferingCatalog,
        stock_name: str,
        stock_symbol: str,
        price: MoneyLike,
        total_quantity: int,
        deadline: datetime,
        issuer_name: str,
    ) -> Offering:
        """Опубликовать размещение через каталог."""
        offering = catalog.publish(
            stock_name=stock_name,
            stock_symbol=stock_symbol,
            price=price,
            total_quantity=total_quantity,
            deadline=deadline,
            issuer_name=issuer_name,
        )
        logger.info("Admin %s published %s", self.admin_id, offering.stock_id)
        return offering

    def execute_draw(
        self, stock_id: str, refund_losers: bool, engine: DrawEngine
    ) -> DrawResult:
        """Запустить розыгрыш размещения."""
        logger.info(
            "Admin %s executes draw for %s (refund_losers=%s)",
            self.admin_id, stock_id, refund_losers,
        )
        return engine.execute_draw(stock_id, refund_losers)
