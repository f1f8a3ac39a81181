from datetime import datetime

import pytest

from plateworks import crud, schemas
from plateworks.core.ledger import ResourceLedgerService
from plateworks.exceptions import DuplicateUsage, InvalidGeometry, InvalidQuantity, InvalidSetting

NOW = datetime(2025, 10, 20, 12, 0)


def make_service(db, now=NOW):
    return ResourceLedgerService(db, now=lambda: now)


def make_order(db, title="Label run"):
    return crud.create_order(db, schemas.OrderCreate(
        title=title,
        dimensions=schemas.Dimensions(width=100, height=70),
    ))


def test_refill_adds_whole_barrels(db):
    service = make_service(db)
    result = service.refill(3)
    db.commit()
    assert result == {"new_total_barrels": 3, "new_current_liters": 600.0}

    result = service.refill(1)
    assert result["new_total_barrels"] == 4
    assert result["new_current_liters"] == 800.0


@pytest.mark.parametrize("count", [0, -2, 2.5, "3", True, None])
def test_refill_rejects_invalid_quantity(db, count):
    service = make_service(db)
    with pytest.raises(InvalidQuantity):
        service.refill(count)
    ledger = service.get_ledger()
    assert ledger.total_barrels == 0
    assert ledger.current_liters == 0.0


def test_record_usage_decrements_inventory(db):
    service = make_service(db)
    service.refill(1)
    recording = service.record_usage(None, 0.7)
    db.commit()

    assert recording.warnings == []
    assert recording.event.liters_consumed == pytest.approx(7.0)
    assert recording.event.cost_incurred == pytest.approx(297.108)
    assert recording.event.timestamp == NOW
    assert recording.remaining_liters == pytest.approx(193.0)


def test_inventory_change_matches_event_totals(db):
    service = make_service(db)
    service.refill(2)
    for area in (0.5, 1.25, 2.0):
        service.record_usage(None, area)
    db.commit()

    ledger = service.get_ledger()
    events = crud.list_usage_events_since(db, datetime(2025, 1, 1))
    assert ledger.current_liters == pytest.approx(400.0 - sum(e.liters_consumed for e in events))


def test_usage_may_drive_inventory_negative_with_warning(db):
    service = make_service(db)
    recording = service.record_usage(None, 2.0)
    db.commit()

    assert recording.remaining_liters == pytest.approx(-20.0)
    assert len(recording.warnings) == 1
    assert recording.warnings[0]["error"] == "insufficient_inventory"
    assert recording.warnings[0]["details"]["required"] == pytest.approx(20.0)


def test_second_usage_for_same_order_is_rejected(db):
    order = make_order(db)
    service = make_service(db)
    service.refill(1)
    first = service.record_usage(order.id, 0.7)
    db.commit()

    with pytest.raises(DuplicateUsage) as exc_info:
        service.record_usage(order.id, 0.7)
    assert exc_info.value.existing_event_id == first.event.id
    assert service.get_ledger().current_liters == pytest.approx(193.0)


@pytest.mark.parametrize("area", [0, -1.5, "big"])
def test_usage_rejects_non_positive_area(db, area):
    with pytest.raises(InvalidGeometry):
        make_service(db).record_usage(None, area)


def test_settings_update_is_partial(db):
    service = make_service(db)
    ledger = service.update_settings({"cost_per_square_meter": 500, "recycling_frequency": 12})
    db.commit()
    assert ledger.cost_per_square_meter == 500
    assert ledger.recycling_frequency == 12
    assert ledger.liters_per_square_meter == 10.0
    assert ledger.recycling_rate == pytest.approx(0.70)


def test_invalid_setting_leaves_ledger_unchanged(db):
    service = make_service(db)
    with pytest.raises(InvalidSetting):
        service.update_settings({"cost_per_square_meter": 500, "recycling_rate": 1.5})
    ledger = service.get_ledger()
    assert ledger.cost_per_square_meter == pytest.approx(424.44)
    assert ledger.recycling_rate == pytest.approx(0.70)


@pytest.mark.parametrize("partial", [
    {"cost_per_barrel": -1},
    {"recycling_frequency": 2.5},
    {"liters_per_m2": 12},
])
def test_settings_validation(db, partial):
    with pytest.raises(InvalidSetting):
        make_service(db).update_settings(partial)


def test_new_settings_apply_to_later_usage(db):
    service = make_service(db)
    service.update_settings({"liters_per_square_meter": 12})
    recording = service.record_usage(None, 1.0)
    assert recording.event.liters_consumed == pytest.approx(12.0)


def test_status_and_history(db):
    service = make_service(db)
    service.refill(2)
    order = make_order(db)
    service.record_usage(order.id, 1.0)
    service.record_usage(None, 0.5)
    db.commit()

    status = service.status()
    assert status["current_liters"] == pytest.approx(385.0)
    assert status["metrics"]["max_capacity"] == 400.0
    assert status["metrics"]["fill_percentage"] == 96.25
    assert status["metrics"]["remaining_barrels"] == 1
    # 15 L over the 30 day window -> 0.5 L/day
    assert status["metrics"]["estimated_days_remaining"] == 770
    assert status["monthly_stats"]["orders_processed"] == 1

    history = service.history(2025, 10)
    assert len(history["usage_history"]) == 2
    assert history["monthly_stats"]["total_liters_used"] == pytest.approx(15.0)
    assert service.history(2025, 9)["usage_history"] == []
