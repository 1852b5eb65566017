"""
Tests for OfferingCatalog

Покрывает:
- publish: идентификатор, валидация параметров
- list_open_offerings
- list_for_display: порядок AVAILABLE → ENDED → FINISHED, затем по дедлайну
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.domain import OfferingPhase
from src.offerings import OfferingCatalog


@pytest.fixture
def catalog(ledger, clock):
    return OfferingCatalog(ledger, clock=clock)


def publish(catalog, clock, name, deadline_offset, price="100", quantity=10):
    return catalog.publish(
        stock_name=name,
        stock_symbol=name[:3].upper(),
        price=price,
        total_quantity=quantity,
        deadline=clock() + deadline_offset,
        issuer_name=f"{name} Issuer",
    )


def test_publish_assigns_id_and_saves(catalog, clock, ledger):
    offering = publish(catalog, clock, "Alpha", timedelta(days=1), price="12.50")
    assert offering.stock_id == "STK-2001"
    assert offering.price == Decimal("12.50")
    assert ledger.find_stock("STK-2001") is offering
    assert ledger.reserved_lots("STK-2001") == 0


def test_publish_rejects_invalid_quantity(catalog, clock):
    with pytest.raises(ValidationError):
        publish(catalog, clock, "Beta", timedelta(days=1), quantity=0)


def test_publish_rejects_non_positive_price(catalog, clock):
    with pytest.raises(ValidationError):
        publish(catalog, clock, "Gamma", timedelta(days=1), price="0")


def test_publish_rejects_float_price(catalog, clock):
    with pytest.raises(TypeError):
        publish(catalog, clock, "Delta", timedelta(days=1), price=99.9)


def test_list_open_offerings(catalog, clock):
    open_one = publish(catalog, clock, "Open", timedelta(hours=1))
    publish(catalog, clock, "Closed", timedelta(hours=-1))

    assert catalog.list_open_offerings() == [open_one]


def test_list_for_display_order(catalog, clock):
    finished = publish(catalog, clock, "Finished", timedelta(hours=-2))
    ended = publish(catalog, clock, "Ended", timedelta(hours=-1))
    later = publish(catalog, clock, "Later", timedelta(days=3))
    sooner = publish(catalog, clock, "Sooner", timedelta(days=1))
    finished.try_mark_draw_executed()

    ordered = catalog.list_for_display()

    assert [o.stock_id for o in ordered] == [
        sooner.stock_id,
        later.stock_id,
        ended.stock_id,
        finished.stock_id,
    ]
    assert catalog.phase(ended) == OfferingPhase.ENDED
    assert catalog.phase(finished) == OfferingPhase.FINISHED


def test_phase_follows_clock(catalog, clock):
    offering = publish(catalog, clock, "Ticking", timedelta(minutes=5))
    assert catalog.phase(offering) == OfferingPhase.AVAILABLE
    clock.advance(minutes=5)
    assert catalog.phase(offering) == OfferingPhase.ENDED
