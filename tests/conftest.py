"""Общие fixtures: управляемые часы и пустой Ledger."""

from datetime import datetime, timedelta, timezone

import pytest

from src.ledger import Ledger, SeedConfig


START = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Часы с ручной перемоткой."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ledger(clock):
    """Ledger без демо-данных."""
    return Ledger(seed_config=SeedConfig(seed_demo_data=False), clock=clock)
