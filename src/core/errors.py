"""
Errors — исключения ядра распределения.

Бизнес-отказы заявки (дубликат, sold out, нехватка средств, дедлайн) НЕ
являются исключениями: они возвращаются как ApplicationResult с записью
аудита. Исключения ниже сообщают об ошибках вызывающей стороны.
"""


class AllocationError(Exception):
    """Базовое исключение ядра."""


class NotFoundError(AllocationError, LookupError):
    """Инвестор или размещение не найдены."""


class InvalidStateError(AllocationError, RuntimeError):
    """Операция недопустима в текущем состоянии (ранний или повторный розыгрыш)."""
