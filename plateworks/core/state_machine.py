"""订单状态机

管理订单状态与制版工序的合法流转。本模块只修改传入的 ORM 对象，
不查询、不提交数据库，也不写台账；药水消耗由工作流门面根据返回结果触发。

状态流转（正向）：
    Submitted → Designing → Design Done → In Prepress → Ready for Delivery → Delivered / Completed
    Delivered → Completed
任意非终态都可以进入 On Hold 或 Cancelled；Completed、On Hold、Cancelled 不再自动流转，
On Hold 只能通过人工 resume 回到暂停前的状态。
"""

from datetime import datetime
from typing import Optional

from ..exceptions import IllegalTransition, PrepressIncomplete, UnknownSubProcess
from ..logging_config import get_logger
from ..models import OrderStatus, StageStatus, SubProcessStatus

logger = get_logger(__name__)

S = OrderStatus

# 正向流转表
FORWARD_TRANSITIONS = {
    S.SUBMITTED: {S.DESIGNING},
    S.DESIGNING: {S.DESIGN_DONE},
    S.DESIGN_DONE: {S.IN_PREPRESS},
    S.IN_PREPRESS: {S.READY_FOR_DELIVERY},
    S.READY_FOR_DELIVERY: {S.DELIVERED, S.COMPLETED},
    S.DELIVERED: {S.COMPLETED},
}

TERMINAL_STATUSES = frozenset({S.COMPLETED, S.ON_HOLD, S.CANCELLED})
OVERRIDE_STATUSES = frozenset({S.ON_HOLD, S.CANCELLED})

NEXT_STEPS = {
    S.SUBMITTED: "Design and review",
    S.DESIGNING: "Complete design phase",
    S.DESIGN_DONE: "Prepress processing",
    S.IN_PREPRESS: "Complete prepress processing",
    S.READY_FOR_DELIVERY: "Delivery",
    S.DELIVERED: "Confirm completion",
    S.COMPLETED: "Order is complete",
    S.CANCELLED: "Order was cancelled",
    S.ON_HOLD: "Order is on hold",
}


def _coerce_status(value, enum_cls, current: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise IllegalTransition(current, str(value), "unknown status")


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def allowed_targets(current: OrderStatus) -> set:
    """当前状态可以到达的目标状态"""
    if is_terminal(current):
        return set()
    return set(FORWARD_TRANSITIONS.get(current, set())) | set(OVERRIDE_STATUSES)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in allowed_targets(current)


def _start_stage(order, name: str, now: datetime):
    stage = order.get_stage(name)
    if stage is None:
        return
    if stage.status != StageStatus.COMPLETED:
        stage.status = StageStatus.IN_PROGRESS
    if stage.started_at is None:
        stage.started_at = now


def _complete_stage(order, name: str, now: datetime):
    stage = order.get_stage(name)
    if stage is None:
        return
    stage.status = StageStatus.COMPLETED
    if stage.started_at is None:
        stage.started_at = now
    if stage.completed_at is None:
        stage.completed_at = now


def pending_sub_processes(order) -> list:
    return [sp.name for sp in order.sub_processes if sp.status != SubProcessStatus.COMPLETED]


def all_sub_processes_completed(order) -> bool:
    return bool(order.sub_processes) and not pending_sub_processes(order)


def sync_prepress_stage(order, now: Optional[datetime] = None) -> bool:
    """让制版阶段状态跟随工序完成情况

    全部工序完成时制版阶段置为 Completed；有工序被重置时回到 In Progress。
    返回工序是否全部完成。
    """
    now = now or datetime.now()
    stage = order.get_stage("prepress")
    done = all_sub_processes_completed(order)
    if stage is None:
        return done
    if done:
        if stage.status != StageStatus.COMPLETED:
            _complete_stage(order, "prepress", now)
    elif stage.status == StageStatus.COMPLETED:
        stage.status = StageStatus.IN_PROGRESS
        stage.completed_at = None
    return done


def update_sub_process(order, name: str, new_status, now: Optional[datetime] = None):
    """更新单个制版工序的状态

    完成时记录 completed_at，重置为 Pending 时清除。不修改订单状态。
    """
    now = now or datetime.now()
    current = order.status.value
    target = _coerce_status(new_status, SubProcessStatus, current)
    if order.status != S.IN_PREPRESS:
        raise IllegalTransition(
            current, f"{name}:{target.value}",
            'order must be "In Prepress" to update prepress sub-processes',
        )

    sub_process = order.get_sub_process(name)
    if sub_process is None:
        raise UnknownSubProcess(name, order.sub_process_names())

    if sub_process.status == target:
        return order

    sub_process.status = target
    if target == SubProcessStatus.COMPLETED:
        sub_process.completed_at = now
    else:
        sub_process.completed_at = None
    logger.info(f"Order {order.order_number}: sub-process {name} -> {target.value}")
    return order


def mark_prepress_complete(order, now: Optional[datetime] = None):
    """确认制版阶段完成

    要求全部工序已完成；订单状态保持 In Prepress，等待主管审核后再进入交付。
    """
    now = now or datetime.now()
    if order.status != S.IN_PREPRESS:
        raise IllegalTransition(
            order.status.value, "prepress complete",
            'order must be "In Prepress" to mark prepress as completed',
        )
    pending = pending_sub_processes(order)
    if pending or not order.sub_processes:
        raise PrepressIncomplete(pending)
    _complete_stage(order, "prepress", now)
    logger.info(f"Order {order.order_number}: prepress stage completed, awaiting review")
    return order


def set_status(order, target, now: Optional[datetime] = None):
    """按流转表修改订单状态，并同步各阶段的开始/完成时间"""
    now = now or datetime.now()
    current = order.status
    target = _coerce_status(target, OrderStatus, current.value)

    if not can_transition(current, target):
        reason = "order is in a terminal status" if is_terminal(current) else None
        raise IllegalTransition(current.value, target.value, reason)

    if target == S.READY_FOR_DELIVERY:
        stage = order.get_stage("prepress")
        if stage is None or stage.status != StageStatus.COMPLETED:
            raise PrepressIncomplete(pending_sub_processes(order))

    if target == S.ON_HOLD:
        order.status_before_hold = current
    elif target == S.DESIGNING:
        _start_stage(order, "design", now)
    elif target == S.DESIGN_DONE:
        _complete_stage(order, "design", now)
    elif target == S.IN_PREPRESS:
        _complete_stage(order, "design", now)
        _start_stage(order, "prepress", now)
    elif target == S.READY_FOR_DELIVERY:
        _complete_stage(order, "production", now)
        _start_stage(order, "delivery", now)
    elif target in (S.DELIVERED, S.COMPLETED):
        _complete_stage(order, "production", now)
        _complete_stage(order, "delivery", now)

    order.status = target
    logger.info(f"Order {order.order_number}: status {current.value} -> {target.value}")
    return order


def resume(order, now: Optional[datetime] = None):
    """人工恢复暂停的订单到暂停前的状态"""
    if order.status != S.ON_HOLD or order.status_before_hold is None:
        raise IllegalTransition(order.status.value, "resume", "only orders on hold can be resumed")
    previous = order.status_before_hold
    order.status = previous
    order.status_before_hold = None
    logger.info(f"Order {order.order_number}: resumed to {previous.value}")
    return order


def prepress_progress(order) -> float:
    """制版工序完成百分比"""
    total = len(order.sub_processes)
    if total == 0:
        return 0.0
    completed = total - len(pending_sub_processes(order))
    return round(completed / total * 100, 2)


def next_step(order) -> str:
    return NEXT_STEPS.get(order.status, "Processing order")
