"""冲洗药水台账

维护单行台账（桶数、存量、成本参数）与只追加的消耗记录：
- refill: 补充整桶药水
- record_usage: 按面积记录一次消耗，每个订单至多一条
- update_settings: 合并部分成本/消耗参数
- status / history / monthly_report: 只读视图，计算交给 reporter

本模块只做 flush，不提交事务；提交由工作流门面或调用方负责，
这样订单与台账的修改可以放在同一个事务里。
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from .. import crud, models
from ..config.settings import settings
from ..exceptions import DuplicateUsage, InsufficientInventory, InvalidGeometry, InvalidQuantity, InvalidSetting
from ..logging_config import get_logger
from ..utils.helpers import month_bounds, resolve_month
from . import reporter
from .geometry import compute_cost, compute_liters_needed

logger = get_logger(__name__)


def _non_negative(field_name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidSetting(field_name, value, "must be a number")
    if value < 0:
        raise InvalidSetting(field_name, value, "must not be negative")
    return float(value)


def _unit_interval(field_name: str, value: Any) -> float:
    value = _non_negative(field_name, value)
    if value > 1:
        raise InvalidSetting(field_name, value, "must be between 0 and 1")
    return value


def _non_negative_int(field_name: str, value: Any) -> int:
    value = _non_negative(field_name, value)
    if not float(value).is_integer():
        raise InvalidSetting(field_name, value, "must be a whole number")
    return int(value)


# 可修改的参数及其校验函数
SETTING_VALIDATORS: Dict[str, Callable[[str, Any], Any]] = {
    "cost_per_barrel": _non_negative,
    "recycling_cost_per_barrel": _non_negative,
    "cost_per_square_meter": _non_negative,
    "liters_per_square_meter": _non_negative,
    "recycling_rate": _unit_interval,
    "recycling_frequency": _non_negative_int,
}


@dataclass
class UsageRecording:
    """一次消耗记录的结果；warnings 中是软错误（如库存不足）"""
    event: models.UsageEvent
    remaining_liters: float
    warnings: List[dict] = field(default_factory=list)


def _validate_barrel_count(barrel_count: Any) -> int:
    if isinstance(barrel_count, bool):
        raise InvalidQuantity(barrel_count)
    if isinstance(barrel_count, float) and barrel_count.is_integer():
        barrel_count = int(barrel_count)
    if not isinstance(barrel_count, int) or barrel_count <= 0:
        raise InvalidQuantity(barrel_count)
    return barrel_count


def _validate_area(area_processed_m2: Any) -> float:
    if isinstance(area_processed_m2, bool) or not isinstance(area_processed_m2, (int, float)):
        raise InvalidGeometry("area_processed_m2 must be a number", value=area_processed_m2)
    if not math.isfinite(area_processed_m2) or area_processed_m2 <= 0:
        raise InvalidGeometry("area_processed_m2 must be greater than 0", value=area_processed_m2)
    return float(area_processed_m2)


class ResourceLedgerService:
    """药水台账服务"""

    def __init__(self, db: Session, now: Optional[Callable[[], datetime]] = None,
                 window_days: Optional[int] = None):
        self.db = db
        self._now = now or datetime.now
        self.window_days = window_days or settings.CONSUMPTION_WINDOW_DAYS

    def now(self) -> datetime:
        return self._now()

    def get_ledger(self, for_update: bool = False) -> models.ResourceLedger:
        return crud.get_or_create_ledger(self.db, for_update=for_update)

    def refill(self, barrel_count: Any) -> dict:
        """补充药水：桶数增加 barrel_count，存量增加 barrel_count × 200 升"""
        count = _validate_barrel_count(barrel_count)
        ledger = self.get_ledger(for_update=True)
        ledger.total_barrels += count
        ledger.current_liters += count * models.BARREL_LITERS
        self.db.flush()
        logger.info(
            f"Refilled {count} barrel(s): total_barrels={ledger.total_barrels}, "
            f"current_liters={ledger.current_liters:.2f}"
        )
        return {
            "new_total_barrels": ledger.total_barrels,
            "new_current_liters": ledger.current_liters,
        }

    def record_usage(self, order_id: Optional[int], area_processed_m2: Any,
                     source: models.UsageSource = models.UsageSource.AUTOMATIC) -> UsageRecording:
        """记录一次消耗

        存量按计算出的升数扣减，可以变为负数；此时返回 InsufficientInventory 警告而不是报错。
        同一订单已有记录时抛出 DuplicateUsage。
        """
        area = _validate_area(area_processed_m2)
        if order_id is not None:
            existing = crud.get_usage_event_for_order(self.db, order_id)
            if existing is not None:
                raise DuplicateUsage(order_id, existing.id)

        ledger = self.get_ledger(for_update=True)
        liters = compute_liters_needed(area, ledger.liters_per_square_meter)
        cost = compute_cost(area, ledger.cost_per_square_meter)

        warnings = []
        if liters > ledger.current_liters:
            shortfall = InsufficientInventory(required=liters, available=ledger.current_liters)
            warnings.append(shortfall.to_dict())
            logger.warning(f"Order {order_id}: {shortfall.message}")

        event = models.UsageEvent(
            order_id=order_id,
            area_processed_m2=area,
            liters_consumed=liters,
            cost_incurred=cost,
            source=source,
            timestamp=self.now(),
        )
        savepoint = self.db.begin_nested()
        try:
            self.db.add(event)
            ledger.current_liters -= liters
            self.db.flush()
            savepoint.commit()
        except IntegrityError:
            # a concurrent request inserted the event for this order first
            savepoint.rollback()
            existing = crud.get_usage_event_for_order(self.db, order_id)
            raise DuplicateUsage(order_id, existing.id if existing else None)
        except StaleDataError:
            savepoint.rollback()
            raise

        logger.info(
            f"Recorded {source.value} usage for order {order_id}: area={area:.3f} m2, "
            f"liters={liters:.2f}, cost={cost:.2f}, remaining={ledger.current_liters:.2f} L"
        )
        return UsageRecording(event=event, remaining_liters=ledger.current_liters, warnings=warnings)

    def update_settings(self, partial: Mapping[str, Any]) -> models.ResourceLedger:
        """合并部分参数；任一字段无效则整体拒绝，台账不变"""
        validated = {}
        for name, value in partial.items():
            if value is None:
                continue
            validator = SETTING_VALIDATORS.get(name)
            if validator is None:
                raise InvalidSetting(name, value, "unknown setting")
            validated[name] = validator(name, value)

        ledger = self.get_ledger(for_update=True)
        for name, value in validated.items():
            setattr(ledger, name, value)
        self.db.flush()
        if validated:
            logger.info(f"Ledger settings updated: {validated}")
        return ledger

    def _events_for_status(self, now: datetime):
        month_start, _ = month_bounds(now.year, now.month)
        window_start = now - timedelta(days=self.window_days)
        return crud.list_usage_events_since(self.db, min(month_start, window_start))

    def status(self) -> dict:
        """台账快照：存量、参数、展示指标与本月统计"""
        ledger = self.get_ledger()
        now = self.now()
        events = self._events_for_status(now)
        return {
            "current_liters": ledger.current_liters,
            "total_barrels": ledger.total_barrels,
            "cost_per_barrel": ledger.cost_per_barrel,
            "recycling_cost_per_barrel": ledger.recycling_cost_per_barrel,
            "cost_per_square_meter": ledger.cost_per_square_meter,
            "liters_per_square_meter": ledger.liters_per_square_meter,
            "recycling_rate": ledger.recycling_rate,
            "recycling_frequency": ledger.recycling_frequency,
            "metrics": {
                "fill_percentage": reporter.fill_percentage(ledger.current_liters, ledger.total_barrels),
                "max_capacity": ledger.max_capacity,
                "estimated_days_remaining": reporter.estimated_days_remaining(
                    ledger.current_liters, events, now, self.window_days
                ),
                "remaining_barrels": reporter.remaining_barrels(ledger.current_liters),
                "efficiency": ledger.recycling_rate * 100,
            },
            "monthly_stats": reporter.monthly_stats(events, now),
        }

    def history(self, year: Optional[int] = None, month: Optional[int] = None) -> dict:
        year, month = resolve_month(year, month, self.now())
        start, end = month_bounds(year, month)
        events = crud.list_usage_events_between(self.db, start, end)
        return {
            "year": year,
            "month": month,
            "usage_history": events,
            "monthly_stats": reporter.monthly_stats(events, start, year, month),
        }

    def monthly_report(self, year: Optional[int] = None, month: Optional[int] = None) -> dict:
        year, month = resolve_month(year, month, self.now())
        start, end = month_bounds(year, month)
        events = crud.list_usage_events_between(self.db, start, end)
        return reporter.monthly_report(self.get_ledger(), events, year, month)
