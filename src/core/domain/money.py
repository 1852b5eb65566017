"""
Money — Централизованный модуль денежных величин

Единственный допустимый способ преобразований между:
- входными значениями (str / int / Decimal)
- денежными суммами (Decimal, точная арифметика)
- стоимостью лотов (price_per_lot * quantity)

ЗАПРЕЩЕНО использовать float для балансов и цен: все суммы проходят через
to_money() из этого модуля.
"""

from decimal import Decimal, InvalidOperation
from typing import Final, Union


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Нулевая сумма
ZERO: Final[Decimal] = Decimal("0")

MoneyLike = Union[Decimal, int, str]


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def to_money(value: MoneyLike) -> Decimal:
    """
    Конверсия входного значения в Decimal.

    float отклоняется: двоичное представление не даёт точной суммы.

    Args:
        value: Сумма (Decimal, int или строка)

    Returns:
        Decimal сумма

    Raises:
        TypeError: Если передан float или неподдерживаемый тип
        ValueError: Если строка не является числом или сумма не конечна
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"Money amount must not be {type(value).__name__}: {value!r}")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, str)):
        try:
            amount = Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Invalid money amount: {value!r}")
    else:
        raise TypeError(f"Unsupported money type: {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"Money amount must be finite: {value!r}")
    return amount


def lot_cost(price_per_lot: MoneyLike, quantity: int) -> Decimal:
    """
    Стоимость заявки: price_per_lot * quantity.

    Args:
        price_per_lot: Цена одного лота
        quantity: Количество лотов (>= 1)

    Returns:
        Полная стоимость заявки

    Raises:
        ValueError: Если quantity < 1
    """
    if quantity < 1:
        raise ValueError(f"quantity must be >= 1, got {quantity}")
    return to_money(price_per_lot) * quantity


def validate_non_negative(amount: Decimal, field_name: str = "amount") -> Decimal:
    """
    Проверка неотрицательности суммы.

    Raises:
        ValueError: Если сумма отрицательна
    """
    if amount < ZERO:
        raise ValueError(f"{field_name} must be non-negative, got {amount}")
    return amount


def is_positive(amount: Decimal) -> bool:
    """True если сумма строго больше нуля."""
    return amount > ZERO
