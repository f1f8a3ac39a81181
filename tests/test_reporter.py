from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from plateworks.core import reporter


def make_event(ts, liters, order_id=None, area=None, cost=None):
    return SimpleNamespace(
        order_id=order_id,
        timestamp=ts,
        liters_consumed=liters,
        area_processed_m2=area if area is not None else liters / 10,
        cost_incurred=cost if cost is not None else liters * 42.444,
    )


def test_fill_percentage_is_clamped():
    assert reporter.fill_percentage(100, 1) == 50.0
    assert reporter.fill_percentage(-20, 1) == 0.0
    assert reporter.fill_percentage(500, 1) == 100.0
    # no barrels ever added
    assert reporter.fill_percentage(0, 0) == 0.0


def test_remaining_barrels():
    assert reporter.remaining_barrels(450) == 2
    assert reporter.remaining_barrels(-10) == 0


def test_monthly_stats_counts_distinct_orders():
    now = datetime(2025, 10, 20, 12, 0)
    events = [
        make_event(datetime(2025, 10, 1, 9), 7.0, order_id=1),
        make_event(datetime(2025, 10, 5, 9), 3.0, order_id=2),
        make_event(datetime(2025, 10, 6, 9), 2.0, order_id=None),
        make_event(datetime(2025, 9, 30, 23), 50.0, order_id=3),
    ]
    stats = reporter.monthly_stats(events, now)
    assert stats["year"] == 2025 and stats["month"] == 10
    assert stats["orders_processed"] == 2
    assert stats["total_liters_used"] == pytest.approx(12.0)
    assert stats["total_area_processed_m2"] == pytest.approx(1.2)


def test_days_remaining_none_without_history():
    now = datetime(2025, 10, 20)
    assert reporter.estimated_days_remaining(400, [], now) is None
    old = [make_event(now - timedelta(days=45), 100)]
    assert reporter.estimated_days_remaining(400, old, now) is None


def test_days_remaining_uses_trailing_average():
    now = datetime(2025, 10, 20)
    events = [make_event(now - timedelta(days=d), 10.0) for d in range(1, 7)]
    # 60 L over a 30 day window -> 2 L/day
    assert reporter.estimated_days_remaining(400, events, now, window_days=30) == 200


def test_days_remaining_never_negative():
    now = datetime(2025, 10, 20)
    events = [make_event(now - timedelta(days=1), 30.0)]
    assert reporter.estimated_days_remaining(-50, events, now) == 0


def test_monthly_report_recycling_and_efficiency():
    ledger = SimpleNamespace(
        recycling_frequency=30,
        recycling_cost_per_barrel=800.0,
        recycling_rate=0.7,
        cost_per_square_meter=424.44,
    )
    events = [make_event(datetime(2025, 10, 3), 10.0, order_id=1, area=1.0, cost=424.44)]
    report = reporter.monthly_report(ledger, events, 2025, 10)
    assert report["recycling_costs"] == 24000.0
    assert report["processing_costs"] == 424.44
    assert report["orders_processed"] == 1
    assert report["liters_used"] == pytest.approx(10.0)
    assert report["efficiency"]["actual_liters_consumed"] == pytest.approx(3.0)
