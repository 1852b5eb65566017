"""
DrawResult — итог розыгрыша размещения.

Immutable Pydantic модель для отображения оператору.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class DrawResult(BaseModel):
    """
    Итог розыгрыша.

    allocated_lots = total_quantity - remaining
    total_pending = winners + losers
    """

    stock_id: str = Field(..., min_length=1, description="Идентификатор размещения")
    allocated_lots: int = Field(..., ge=0, description="Распределено лотов")
    total_pending: int = Field(..., ge=0, description="Заявок в розыгрыше")
    winners: int = Field(..., ge=0, description="Выигравших заявок")
    losers: int = Field(..., ge=0, description="Проигравших заявок")
    refunded_amount: Decimal = Field(
        default=Decimal("0"), ge=0, description="Сумма возвратов проигравшим"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_counts(self) -> "DrawResult":
        if self.winners + self.losers != self.total_pending:
            raise ValueError(
                f"winners ({self.winners}) + losers ({self.losers}) "
                f"!= total_pending ({self.total_pending})"
            )
        return self
