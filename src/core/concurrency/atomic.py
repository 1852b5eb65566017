"""
Atomic primitives — атомарные ячейки с compare-and-set.

Каждая ячейка хранит значение под собственным коротким threading.Lock;
compare_and_set() — единственная операция записи с условием, на которой
строятся оптимистичные retry-циклы (резервирование лотов, флаг розыгрыша).
"""

from threading import Lock
from typing import Callable


class AtomicInteger:
    """Целое число с атомарными get / compare_and_set / update_and_get."""

    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = Lock()

    def get(self) -> int:
        with self._lock:
            return self._value

    def compare_and_set(self, expected: int, new_value: int) -> bool:
        """
        Записать new_value только если текущее значение равно expected.

        Returns:
            True если запись выполнена
        """
        with self._lock:
            if self._value != expected:
                return False
            self._value = new_value
            return True

    def update_and_get(self, fn: Callable[[int], int]) -> int:
        """Атомарно применить fn к значению и вернуть новое значение."""
        with self._lock:
            self._value = fn(self._value)
            return self._value

    def __repr__(self) -> str:
        return f"AtomicInteger({self.get()})"


class AtomicBoolean:
    """Булев флаг с compare_and_set (используется для one-way переходов)."""

    def __init__(self, initial: bool = False):
        self._value = initial
        self._lock = Lock()

    def get(self) -> bool:
        with self._lock:
            return self._value

    def compare_and_set(self, expected: bool, new_value: bool) -> bool:
        with self._lock:
            if self._value is not expected:
                return False
            self._value = new_value
            return True

    def __repr__(self) -> str:
        return f"AtomicBoolean({self.get()})"
