"""Ledger — in-memory хранилище инвесторов, размещений и журнала заявок."""

from .seed import DEMO_OFFERINGS, SeedConfig, seed_demo_data
from .store import Ledger, utc_now

__all__ = [
    "Ledger",
    "SeedConfig",
    "DEMO_OFFERINGS",
    "seed_demo_data",
    "utc_now",
]
