from datetime import datetime

import pytest

from plateworks import models
from plateworks.core import state_machine
from plateworks.core.templates import BUILTIN_TEMPLATES
from plateworks.exceptions import IllegalTransition, PrepressIncomplete, UnknownSubProcess
from plateworks.models import OrderStatus, StageStatus, SubProcessStatus

NOW = datetime(2025, 10, 20, 9, 30)
STANDARD = BUILTIN_TEMPLATES["standard"]["sub_processes"]


def build_order(status=OrderStatus.SUBMITTED, sub_processes=STANDARD):
    order = models.Order(
        order_number="ORD-2510-0001",
        title="Test",
        workflow_template="standard",
        status=status,
        usage_recorded=False,
    )
    for idx, name in enumerate(models.STAGE_NAMES, start=1):
        order.stages.append(models.OrderStage(name=name, seq=idx, status=StageStatus.PENDING))
    for idx, name in enumerate(sub_processes, start=1):
        order.sub_processes.append(models.OrderSubProcess(name=name, seq=idx, status=SubProcessStatus.PENDING))
    return order


def complete_all(order):
    for name in order.sub_process_names():
        state_machine.update_sub_process(order, name, "Completed", NOW)
    state_machine.sync_prepress_stage(order, NOW)


def test_forward_path_updates_stages():
    order = build_order()
    state_machine.set_status(order, "Designing", NOW)
    assert order.get_stage("design").status == StageStatus.IN_PROGRESS
    state_machine.set_status(order, "Design Done", NOW)
    assert order.get_stage("design").status == StageStatus.COMPLETED
    state_machine.set_status(order, "In Prepress", NOW)
    assert order.get_stage("prepress").status == StageStatus.IN_PROGRESS
    assert order.get_stage("prepress").started_at == NOW

    complete_all(order)
    state_machine.set_status(order, OrderStatus.READY_FOR_DELIVERY, NOW)
    assert order.get_stage("production").status == StageStatus.COMPLETED
    assert order.get_stage("delivery").status == StageStatus.IN_PROGRESS

    state_machine.set_status(order, "Delivered", NOW)
    state_machine.set_status(order, "Completed", NOW)
    assert order.status == OrderStatus.COMPLETED
    assert all(s.status == StageStatus.COMPLETED for s in order.stages)


def test_skipping_states_is_illegal():
    order = build_order()
    with pytest.raises(IllegalTransition):
        state_machine.set_status(order, "Completed", NOW)
    with pytest.raises(IllegalTransition):
        state_machine.set_status(order, "In Prepress", NOW)
    assert order.status == OrderStatus.SUBMITTED


def test_unknown_status_is_illegal():
    with pytest.raises(IllegalTransition):
        state_machine.set_status(build_order(), "Shipped", NOW)


@pytest.mark.parametrize("terminal", ["On Hold", "Cancelled"])
def test_hold_and_cancel_are_terminal(terminal):
    order = build_order(OrderStatus.DESIGNING)
    state_machine.set_status(order, terminal, NOW)
    assert state_machine.allowed_targets(order.status) == set()
    with pytest.raises(IllegalTransition):
        state_machine.set_status(order, "Design Done", NOW)


def test_completed_order_cannot_be_cancelled():
    order = build_order(OrderStatus.COMPLETED)
    with pytest.raises(IllegalTransition):
        state_machine.set_status(order, "Cancelled", NOW)


def test_resume_returns_to_status_before_hold():
    order = build_order(OrderStatus.IN_PREPRESS)
    state_machine.set_status(order, "On Hold", NOW)
    assert order.status_before_hold == OrderStatus.IN_PREPRESS
    state_machine.resume(order, NOW)
    assert order.status == OrderStatus.IN_PREPRESS
    assert order.status_before_hold is None


def test_resume_requires_hold():
    with pytest.raises(IllegalTransition):
        state_machine.resume(build_order(OrderStatus.CANCELLED), NOW)


def test_sub_process_requires_in_prepress():
    order = build_order(OrderStatus.DESIGNING)
    with pytest.raises(IllegalTransition):
        state_machine.update_sub_process(order, "washout", "Completed", NOW)


def test_unknown_sub_process_is_rejected():
    order = build_order(OrderStatus.IN_PREPRESS)
    with pytest.raises(UnknownSubProcess) as exc_info:
        state_machine.update_sub_process(order, "uvcExposure", "Completed", NOW)
    assert "washout" in exc_info.value.details["allowed"]


def test_sub_process_completion_timestamps():
    order = build_order(OrderStatus.IN_PREPRESS)
    state_machine.update_sub_process(order, "washout", "Completed", NOW)
    assert order.get_sub_process("washout").completed_at == NOW
    state_machine.update_sub_process(order, "washout", "Pending", NOW)
    assert order.get_sub_process("washout").completed_at is None
    assert order.status == OrderStatus.IN_PREPRESS


def test_prepress_stage_follows_sub_processes():
    order = build_order(OrderStatus.IN_PREPRESS)
    complete_all(order)
    assert order.get_stage("prepress").status == StageStatus.COMPLETED

    state_machine.update_sub_process(order, "drying", "Pending", NOW)
    assert state_machine.sync_prepress_stage(order, NOW) is False
    assert order.get_stage("prepress").status == StageStatus.IN_PROGRESS
    assert order.get_stage("prepress").completed_at is None


def test_mark_prepress_complete_requires_all_sub_processes():
    order = build_order(OrderStatus.IN_PREPRESS)
    state_machine.update_sub_process(order, "positioning", "Completed", NOW)
    with pytest.raises(PrepressIncomplete) as exc_info:
        state_machine.mark_prepress_complete(order, NOW)
    assert "washout" in exc_info.value.pending

    complete_all(order)
    state_machine.mark_prepress_complete(order, NOW)
    assert order.status == OrderStatus.IN_PREPRESS
    assert order.get_stage("prepress").status == StageStatus.COMPLETED


def test_ready_for_delivery_requires_prepress():
    order = build_order(OrderStatus.IN_PREPRESS)
    with pytest.raises(PrepressIncomplete):
        state_machine.set_status(order, "Ready for Delivery", NOW)


def test_progress_and_next_step():
    order = build_order(OrderStatus.IN_PREPRESS)
    assert state_machine.prepress_progress(order) == 0.0
    state_machine.update_sub_process(order, "positioning", "Completed", NOW)
    state_machine.update_sub_process(order, "laserImaging", "Completed", NOW)
    state_machine.update_sub_process(order, "exposure", "Completed", NOW)
    assert state_machine.prepress_progress(order) == 50.0
    assert state_machine.next_step(order) == "Complete prepress processing"
