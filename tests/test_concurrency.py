import pytest

from plateworks import crud, models, schemas
from plateworks.core.ledger import ResourceLedgerService
from plateworks.core.workflow import WorkflowFacade
from plateworks.db import SessionLocal
from plateworks.exceptions import ConcurrentUpdate, DuplicateUsage


def setup_order(status_path=()):
    """建一个订单并推进到指定状态，返回订单ID"""
    with SessionLocal() as session:
        order = crud.create_order(session, schemas.OrderCreate(
            title="Shrink sleeve",
            dimensions=schemas.Dimensions(width=50, height=70, width_repeat_count=2),
        ))
        order_id = order.id
        facade = WorkflowFacade(session)
        for status in status_path:
            facade.set_status(order_id, status)
    return order_id


def test_stale_order_write_raises_concurrent_update(monkeypatch):
    order_id = setup_order()

    stale = SessionLocal(expire_on_commit=False)
    try:
        stale_order = crud.get_order(stale, order_id)
        stale.commit()  # keep the loaded version, release the read

        with SessionLocal() as other:
            WorkflowFacade(other).set_status(order_id, "Designing")

        facade = WorkflowFacade(stale)
        monkeypatch.setattr(facade, "_load_order", lambda _id: stale_order)
        with pytest.raises(ConcurrentUpdate) as exc_info:
            facade.set_status(order_id, "Cancelled")
        assert exc_info.value.status_code == 409
    finally:
        stale.close()

    with SessionLocal() as check:
        assert crud.get_order(check, order_id).status == models.OrderStatus.DESIGNING


def test_stale_ledger_during_washout_becomes_warning(monkeypatch):
    order_id = setup_order(("Designing", "Design Done", "In Prepress"))

    stale = SessionLocal(expire_on_commit=False)
    try:
        stale_ledger = crud.get_ledger(stale)
        stale.commit()

        with SessionLocal() as other:
            WorkflowFacade(other).refill_resource(1)

        facade = WorkflowFacade(stale)
        monkeypatch.setattr(facade.ledger, "get_ledger", lambda for_update=False: stale_ledger)
        outcome = facade.apply_sub_process_update(order_id, "washout", "Completed")
        assert outcome.usage_event is None
        assert outcome.usage_recorded_now is False
        assert [w["error"] for w in outcome.warnings] == ["concurrent_update"]
    finally:
        stale.close()

    with SessionLocal() as check:
        order = crud.get_order(check, order_id)
        assert order.get_sub_process("washout").status == models.SubProcessStatus.COMPLETED
        assert order.usage_recorded is False
        assert crud.get_usage_event_for_order(check, order_id) is None
        assert crud.get_ledger(check).current_liters == 200.0


def test_event_inserted_after_duplicate_check_is_reported(db, monkeypatch):
    order_id = setup_order()
    service = ResourceLedgerService(db)
    service.refill(1)
    db.add(models.UsageEvent(
        order_id=order_id,
        area_processed_m2=0.7,
        liters_consumed=7.0,
        cost_incurred=297.108,
        source=models.UsageSource.MANUAL,
        timestamp=service.now(),
    ))
    db.commit()
    existing = crud.get_usage_event_for_order(db, order_id)

    real_lookup = crud.get_usage_event_for_order
    calls = []

    def lookup_misses_first_time(session, lookup_order_id):
        calls.append(lookup_order_id)
        if len(calls) == 1:
            return None
        return real_lookup(session, lookup_order_id)

    monkeypatch.setattr(crud, "get_usage_event_for_order", lookup_misses_first_time)

    with pytest.raises(DuplicateUsage) as exc_info:
        service.record_usage(order_id, 0.7)
    assert exc_info.value.existing_event_id == existing.id
    assert len(calls) == 2
    db.commit()
    assert service.get_ledger().current_liters == 200.0


def test_order_numbers_stay_unique_after_delete(db):
    first = crud.create_order(db, schemas.OrderCreate(title="A"))
    second = crud.create_order(db, schemas.OrderCreate(title="B"))
    db.delete(first)
    db.commit()

    third = crud.create_order(db, schemas.OrderCreate(title="C"))
    assert third.order_number != second.order_number
    assert third.order_number.endswith(f"-{third.id:04d}")
    assert third.order_number.startswith("ORD-")
