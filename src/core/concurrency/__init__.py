"""
Concurrency primitives.

Атомарные ячейки с compare-and-set и реестр per-key блокировок.
"""

from src.core.concurrency.atomic import AtomicBoolean, AtomicInteger
from src.core.concurrency.keyed_locks import KeyedLockRegistry, LockRegistryConfig

__all__ = [
    "AtomicInteger",
    "AtomicBoolean",
    "KeyedLockRegistry",
    "LockRegistryConfig",
]
