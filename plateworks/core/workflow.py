"""工作流门面

外部调用方（API/UI 层）修改订单工作流状态的唯一入口。每个方法对应一次请求：
加锁读取订单 → 状态机校验并修改 → 必要时计算面积并写台账 → 一次性提交。

台账侧的失败（尺寸无效、重复记录、台账并发冲突）回滚到保存点，以警告形式返回，
工序进度照常提交，不因库存记账问题阻塞生产。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from .. import crud, models
from ..exceptions import ConcurrentUpdate, DuplicateUsage, OrderNotFound, PlateworksError, UnknownWorkflowTemplate
from ..logging_config import get_logger
from . import state_machine
from .geometry import compute_area
from .ledger import ResourceLedgerService, UsageRecording
from .templates import DEFAULT_TRIGGER, get_template

logger = get_logger(__name__)


@dataclass
class SubProcessOutcome:
    """apply_sub_process_update 的返回结果"""
    order: models.Order
    all_sub_processes_completed: bool = False
    usage_event: Optional[models.UsageEvent] = None
    usage_recorded_now: bool = False
    warnings: List[dict] = field(default_factory=list)


class WorkflowFacade:
    """协调状态机、面积计算与药水台账"""

    def __init__(self, db: Session, now: Optional[Callable[[], datetime]] = None,
                 ledger: Optional[ResourceLedgerService] = None):
        self.db = db
        self._now = now or datetime.now
        self.ledger = ledger or ResourceLedgerService(db, now=self._now)

    # ------------------------------------------------------------------
    # 内部工具
    # ------------------------------------------------------------------

    def _load_order(self, order_id: int) -> models.Order:
        order = crud.get_order_for_update(self.db, order_id)
        if order is None:
            raise OrderNotFound(order_id)
        return order

    def _execute(self, entity: str, operation: Callable[[], Any]):
        """执行一次修改并提交；任何异常都回滚整个事务"""
        try:
            result = operation()
            self.db.commit()
            return result
        except StaleDataError:
            self.db.rollback()
            logger.warning(f"{entity} changed concurrently, rejecting the update")
            raise ConcurrentUpdate(entity)
        except Exception:
            self.db.rollback()
            raise

    def _touch(self, order: models.Order, now: datetime):
        # child-row changes alone do not bump the order's version
        order.updated_at = now

    def _trigger_name(self, order: models.Order) -> str:
        try:
            return get_template(self.db, order.workflow_template).trigger_sub_process
        except UnknownWorkflowTemplate:
            return DEFAULT_TRIGGER

    # ------------------------------------------------------------------
    # 订单工作流
    # ------------------------------------------------------------------

    def apply_sub_process_update(self, order_id: int, name: str, new_status) -> SubProcessOutcome:
        """更新制版工序；冲洗工序首次完成时自动记录药水消耗"""
        now = self._now()

        def operation():
            order = self._load_order(order_id)
            state_machine.update_sub_process(order, name, new_status, now)
            all_done = state_machine.sync_prepress_stage(order, now)
            self._touch(order, now)
            self.db.flush()

            outcome = SubProcessOutcome(order=order, all_sub_processes_completed=all_done)
            sub_process = order.get_sub_process(name)
            if name == self._trigger_name(order) and sub_process.status == models.SubProcessStatus.COMPLETED:
                self._record_triggered_usage(order, outcome)
            elif order.usage_recorded:
                outcome.usage_event = crud.get_usage_event_for_order(self.db, order.id)
            if all_done:
                logger.info(f"Order {order.order_number}: all prepress sub-processes completed")
            return outcome

        return self._execute("Order", operation)

    def _record_triggered_usage(self, order: models.Order, outcome: SubProcessOutcome):
        if order.usage_recorded:
            # already counted once; re-completing the trigger never deducts again
            outcome.usage_event = crud.get_usage_event_for_order(self.db, order.id)
            return

        dimensions = order.dimensions
        if dimensions is None:
            logger.warning(f"Order {order.order_number}: no dimensions, usage not recorded")
            outcome.warnings.append({
                "error": "usage_skipped",
                "message": "Order has no dimensions; processing solution usage was not recorded",
                "details": {"order_id": order.id},
            })
            return

        savepoint = self.db.begin_nested()
        try:
            area = compute_area(dimensions)
            recording = self.ledger.record_usage(order.id, area, models.UsageSource.AUTOMATIC)
            order.usage_recorded = True
            self.db.flush()
            savepoint.commit()
        except DuplicateUsage:
            savepoint.rollback()
            order.usage_recorded = True
            self.db.flush()
            outcome.usage_event = crud.get_usage_event_for_order(self.db, order.id)
            logger.info(f"Order {order.order_number}: usage already on the ledger, reusing existing event")
            return
        except PlateworksError as exc:
            savepoint.rollback()
            outcome.warnings.append(exc.to_dict())
            logger.warning(f"Order {order.order_number}: usage not recorded: {exc}")
            return
        except StaleDataError:
            savepoint.rollback()
            outcome.warnings.append(ConcurrentUpdate("Resource ledger").to_dict())
            logger.warning(f"Order {order.order_number}: ledger changed concurrently, usage not recorded")
            return

        outcome.usage_event = recording.event
        outcome.usage_recorded_now = True
        outcome.warnings.extend(recording.warnings)

    def mark_prepress_complete(self, order_id: int) -> models.Order:
        now = self._now()

        def operation():
            order = self._load_order(order_id)
            state_machine.mark_prepress_complete(order, now)
            self._touch(order, now)
            return order

        return self._execute("Order", operation)

    def set_status(self, order_id: int, target) -> models.Order:
        now = self._now()

        def operation():
            order = self._load_order(order_id)
            state_machine.set_status(order, target, now)
            self._touch(order, now)
            return order

        return self._execute("Order", operation)

    def resume(self, order_id: int) -> models.Order:
        now = self._now()

        def operation():
            order = self._load_order(order_id)
            state_machine.resume(order, now)
            self._touch(order, now)
            return order

        return self._execute("Order", operation)

    # ------------------------------------------------------------------
    # 药水台账（鉴权由外部负责）
    # ------------------------------------------------------------------

    def resource_status(self) -> dict:
        # commits so a freshly bootstrapped ledger row is kept
        return self._execute("Resource ledger", self.ledger.status)

    def refill_resource(self, barrel_count) -> dict:
        return self._execute("Resource ledger", lambda: self.ledger.refill(barrel_count))

    def update_resource_settings(self, settings: Mapping[str, Any]) -> dict:
        def operation():
            self.ledger.update_settings(settings)
            return self.ledger.status()

        return self._execute("Resource ledger", operation)

    def record_manual_usage(self, order_id: Optional[int], area_processed_m2) -> UsageRecording:
        """授权人员手工补录；订单已有记录时拒绝（DuplicateUsage）"""
        now = self._now()

        def operation():
            order = self._load_order(order_id) if order_id is not None else None
            recording = self.ledger.record_usage(order_id, area_processed_m2, models.UsageSource.MANUAL)
            if order is not None:
                order.usage_recorded = True
                self._touch(order, now)
            return recording

        return self._execute("Resource ledger", operation)
