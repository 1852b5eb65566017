"""KeyedLockRegistry — взаимное исключение по ключу (investor_id, stock_id).

- Lock создаётся лениво при первом обращении к ключу
- Разные ключи никогда не блокируют друг друга
- Один и тот же ключ сериализуется
- Запись хранит счётчик пользователей (holder + ожидающие); запись без
  пользователей можно удалить, не нарушая взаимного исключения
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

LockKey = Tuple[str, str]


@dataclass(frozen=True)
class LockRegistryConfig:
    """Конфигурация реестра.

    evict_when_idle=True: запись удаляется, как только её покидает последний
    пользователь (размер реестра ограничен числом вызовов в полёте).
    evict_when_idle=False: записи живут до evict_stock() / clear().
    """
    evict_when_idle: bool = True


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = Lock()
        self.users = 0


class KeyedLockRegistry:
    """Реестр per-key блокировок для критической секции apply()."""

    def __init__(self, config: Optional[LockRegistryConfig] = None):
        self.config = config or LockRegistryConfig()
        self._entries: Dict[LockKey, _Entry] = {}
        self._guard = Lock()

    @contextmanager
    def hold(self, investor_id: str, stock_id: str) -> Iterator[None]:
        """Захватить lock пары (investor_id, stock_id) на время блока with."""
        key = (investor_id, stock_id)
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0 and self.config.evict_when_idle:
                    # запись могла быть уже удалена evict_stock()
                    if self._entries.get(key) is entry:
                        del self._entries[key]

    def evict_stock(self, stock_id: str) -> int:
        """Удалить все простаивающие записи размещения.

        Returns:
            Количество удалённых записей
        """
        with self._guard:
            idle = [
                key for key, entry in self._entries.items()
                if key[1] == stock_id and entry.users == 0
            ]
            for key in idle:
                del self._entries[key]
        if idle:
            logger.debug("Evicted %d idle lock entries for stock=%s", len(idle), stock_id)
        return len(idle)

    def size(self) -> int:
        with self._guard:
            return len(self._entries)

    def clear(self) -> None:
        """Удалить простаивающие записи всех ключей."""
        with self._guard:
            for key in [k for k, e in self._entries.items() if e.users == 0]:
                del self._entries[key]
