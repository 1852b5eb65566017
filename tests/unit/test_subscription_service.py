"""
Tests for SubscriptionService

Покрывает:
- Not-found отказы без записи в журнале
- FAILED_DEADLINE / FAILED_DUPLICATE / FAILED_SOLD_OUT / FAILED_FUNDS
- Компенсация: освобождение лотов и возврат средств
- Точное списание price_per_lot * quantity
- Oversubscription ratio
- Розыгрыш, начатый до записи PENDING
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from src.core.domain import ApplicationStatus, Investor, Offering
from src.draw import DrawEngine
from src.subscription import (
    REASON_DEADLINE_PASSED,
    REASON_DUPLICATE,
    REASON_INSUFFICIENT_FUNDS,
    REASON_INVESTOR_NOT_FOUND,
    REASON_OFFERING_NOT_FOUND,
    REASON_SOLD_OUT,
    SubscriptionConfig,
    SubscriptionService,
)


# =============================================================================
# FIXTURES
# =============================================================================


def add_investor(ledger, investor_id, balance):
    return ledger.save_investor(
        Investor(investor_id=investor_id, display_name=investor_id, opening_balance=Decimal(balance))
    )


def add_stock(ledger, clock, price="100", total_quantity=10, deadline_offset=timedelta(hours=1)):
    return ledger.save_stock(
        Offering(
            stock_id=ledger.next_stock_id(),
            stock_name="Subscription Corp",
            stock_symbol="SUB",
            price=Decimal(price),
            total_quantity=total_quantity,
            deadline=clock() + deadline_offset,
            issuer_name="Issuer",
        )
    )


@pytest.fixture
def service(ledger, clock):
    return SubscriptionService(ledger, clock=clock)


@pytest.fixture
def alice(ledger):
    return add_investor(ledger, "alice", "1000")


@pytest.fixture
def stock(ledger, clock):
    return add_stock(ledger, clock)


# =============================================================================
# NOT FOUND
# =============================================================================


def test_unknown_investor_leaves_no_record(service, ledger, stock):
    result = service.apply("ghost", stock.stock_id)

    assert not result.success
    assert result.reason == REASON_INVESTOR_NOT_FOUND
    assert result.message == "Investor not found"
    assert result.record is None
    assert result.status is None
    assert ledger.find_records_by_stock(stock.stock_id) == []


def test_unknown_offering_leaves_no_record(service, ledger, alice):
    result = service.apply(alice.investor_id, "STK-404")

    assert not result.success
    assert result.reason == REASON_OFFERING_NOT_FOUND
    assert result.message == "IPO not found"
    assert ledger.find_records_by_investor(alice.investor_id) == []


def test_quantity_below_one_is_caller_error(service, alice, stock):
    with pytest.raises(ValueError):
        service.apply(alice.investor_id, stock.stock_id, 0)


# =============================================================================
# SUCCESS
# =============================================================================


def test_successful_application(service, ledger, alice, stock):
    result = service.apply(alice.investor_id, stock.stock_id, 3)

    assert result.success
    assert result.reason == ""
    assert result.message == "Application submitted"
    assert result.status is ApplicationStatus.PENDING
    assert result.record.quantity == 3
    assert result.record.price_per_lot == Decimal("100")
    assert alice.balance == Decimal("700")
    assert ledger.reserved_lots(stock.stock_id) == 3
    assert alice.history_ids() == (result.record.record_id,)


def test_exact_decimal_deduction(service, ledger, clock):
    investor = add_investor(ledger, "bob", "100")
    cheap = add_stock(ledger, clock, price="12.50")

    result = service.apply("bob", cheap.stock_id, 3)

    assert result.success
    assert investor.balance == Decimal("62.50")


# =============================================================================
# FAILURES
# =============================================================================


def test_deadline_passed(service, ledger, clock, alice):
    closed = add_stock(ledger, clock, deadline_offset=timedelta(minutes=-1))

    result = service.apply(alice.investor_id, closed.stock_id)

    assert not result.success
    assert result.reason == REASON_DEADLINE_PASSED
    assert result.message == "IPO deadline passed"
    assert result.status is ApplicationStatus.FAILED_DEADLINE
    assert result.record.failure_reason == "Deadline passed"
    assert alice.balance == Decimal("1000")
    assert ledger.reserved_lots(closed.stock_id) == 0


def test_deadline_instant_is_closed(service, clock, alice, stock):
    clock.now = stock.deadline
    result = service.apply(alice.investor_id, stock.stock_id)
    assert result.status is ApplicationStatus.FAILED_DEADLINE


def test_duplicate_application(service, ledger, alice, stock):
    first = service.apply(alice.investor_id, stock.stock_id)
    second = service.apply(alice.investor_id, stock.stock_id)

    assert first.success
    assert not second.success
    assert second.reason == REASON_DUPLICATE
    assert second.message == "Duplicate application detected"
    assert second.record.failure_reason == "Duplicate application"
    assert alice.balance == Decimal("900")
    assert ledger.reserved_lots(stock.stock_id) == 1
    assert len(ledger.find_records_by_investor(alice.investor_id)) == 2
    # история инвестора содержит только успешную заявку
    assert alice.history_ids() == (first.record.record_id,)


def test_sold_out(service, ledger, clock):
    small = add_stock(ledger, clock, total_quantity=2)
    add_investor(ledger, "a", "1000")
    carl = add_investor(ledger, "c", "1000")

    assert service.apply("a", small.stock_id, 2).success
    result = service.apply("c", small.stock_id, 1)

    assert result.reason == REASON_SOLD_OUT
    assert result.message == "IPO sold out"
    assert result.status is ApplicationStatus.FAILED_SOLD_OUT
    assert result.record.failure_reason == "Sold out"
    assert carl.balance == Decimal("1000")
    assert ledger.reserved_lots(small.stock_id) == 2


def test_insufficient_funds_releases_lots(service, ledger, stock):
    poor = add_investor(ledger, "poor", "99.99")

    result = service.apply("poor", stock.stock_id)

    assert not result.success
    assert result.reason == REASON_INSUFFICIENT_FUNDS
    assert result.message == "Insufficient balance"
    assert result.record.failure_reason == "Insufficient funds"
    assert poor.balance == Decimal("99.99")
    assert ledger.reserved_lots(stock.stock_id) == 0


def test_retry_after_failed_funds(service, ledger, stock):
    investor = add_investor(ledger, "retry", "50")
    assert service.apply("retry", stock.stock_id).status is ApplicationStatus.FAILED_FUNDS

    investor.add_balance(Decimal("50"))
    result = service.apply("retry", stock.stock_id)

    assert result.success
    assert investor.balance == Decimal("0")


def test_save_failure_restores_balance_and_lots(service, ledger, monkeypatch, alice, stock):
    def broken_save(record):
        raise RuntimeError("storage unavailable")

    monkeypatch.setattr(ledger, "save_record", broken_save)

    with pytest.raises(RuntimeError, match="storage unavailable"):
        service.apply(alice.investor_id, stock.stock_id, 2)

    assert alice.balance == Decimal("1000")
    assert ledger.reserved_lots(stock.stock_id) == 0
    assert alice.history_ids() == ()


# =============================================================================
# CONFIG
# =============================================================================


def test_oversubscription_ratio_allows_more_pending(ledger, clock):
    service = SubscriptionService(
        ledger, clock=clock, config=SubscriptionConfig(oversubscription_ratio=2)
    )
    single = add_stock(ledger, clock, total_quantity=1)
    for investor_id in ("x", "y", "z"):
        add_investor(ledger, investor_id, "1000")

    statuses = [service.apply(i, single.stock_id).status for i in ("x", "y", "z")]

    assert statuses == [
        ApplicationStatus.PENDING,
        ApplicationStatus.PENDING,
        ApplicationStatus.FAILED_SOLD_OUT,
    ]
    assert ledger.reserved_lots(single.stock_id) == 2


def test_invalid_oversubscription_ratio():
    with pytest.raises(ValueError):
        SubscriptionConfig(oversubscription_ratio=0)


def test_history_lists_all_records(service, alice, stock):
    service.apply(alice.investor_id, stock.stock_id)
    service.apply(alice.investor_id, stock.stock_id)
    statuses = [r.status for r in service.history(alice.investor_id)]
    assert statuses == [ApplicationStatus.PENDING, ApplicationStatus.FAILED_DUPLICATE]


# =============================================================================
# DRAW RACE
# =============================================================================


def test_draw_started_before_commit_rejects_application(service, ledger, monkeypatch, alice, stock):
    """Розыгрыш, начавшийся между проверкой дедлайна и записью, не оставляет PENDING."""
    engine = DrawEngine(ledger, clock=lambda: stock.deadline + timedelta(seconds=5))
    draws = []
    real_reserve = ledger.reserve_lots

    def reserve_after_draw(stock_id, quantity, capacity):
        draws.append(engine.execute_draw(stock_id, refund_losers=True))
        return real_reserve(stock_id, quantity, capacity)

    monkeypatch.setattr(ledger, "reserve_lots", reserve_after_draw)

    result = service.apply(alice.investor_id, stock.stock_id, 2)

    assert not result.success
    assert result.reason == REASON_DEADLINE_PASSED
    assert result.status is ApplicationStatus.FAILED_DEADLINE
    assert draws[0].total_pending == 0
    assert stock.draw_executed
    assert alice.balance == Decimal("1000")
    assert ledger.reserved_lots(stock.stock_id) == 0
    assert ledger.find_pending_by_stock(stock.stock_id) == []
    assert [r.status for r in ledger.find_records_by_stock(stock.stock_id)] == [
        ApplicationStatus.FAILED_DEADLINE
    ]
    assert alice.history_ids() == ()
