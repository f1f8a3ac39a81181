"""台账统计（只读）

根据消耗记录计算展示用的派生数据：
- fill_percentage: 当前存量占总容量的百分比，展示时限定在 [0, 100]
- estimated_days_remaining: 按回看窗口内的日均消耗估算剩余天数，无消耗时返回 None
- monthly_stats: 某自然月内的消耗汇总
- monthly_report: 月度报表，额外计算回收成本与回收效率
"""

import math
from datetime import datetime
from typing import Iterable, Optional

from ..models import BARREL_LITERS
from ..utils.helpers import in_month, round_money, trailing_window

DEFAULT_WINDOW_DAYS = 30


def fill_percentage(current_liters: float, total_barrels: int) -> float:
    max_capacity = (total_barrels or 0) * BARREL_LITERS
    if max_capacity <= 0:
        return 0.0
    pct = current_liters / max_capacity * 100
    return round(min(100.0, max(0.0, pct)), 2)


def remaining_barrels(current_liters: float) -> int:
    if current_liters <= 0:
        return 0
    return int(math.floor(current_liters / BARREL_LITERS))


def monthly_stats(events: Iterable, now: datetime, year: Optional[int] = None,
                  month: Optional[int] = None) -> dict:
    """汇总某月（默认 now 所在月）的消耗记录

    orders_processed 统计不同的订单ID，不关联订单的手工记录不计入。
    """
    year = year or now.year
    month = month or now.month
    order_ids = set()
    total_area = 0.0
    total_liters = 0.0
    total_cost = 0.0
    for ev in events:
        if not in_month(ev.timestamp, year, month):
            continue
        if ev.order_id is not None:
            order_ids.add(ev.order_id)
        total_area += ev.area_processed_m2
        total_liters += ev.liters_consumed
        total_cost += ev.cost_incurred
    return {
        "year": year,
        "month": month,
        "orders_processed": len(order_ids),
        "total_area_processed_m2": total_area,
        "total_liters_used": total_liters,
        "total_cost": total_cost,
    }


def average_daily_consumption(events: Iterable, now: datetime,
                              window_days: int = DEFAULT_WINDOW_DAYS) -> float:
    if window_days <= 0:
        window_days = DEFAULT_WINDOW_DAYS
    start, end = trailing_window(now, window_days)
    total = sum(ev.liters_consumed for ev in events
                if ev.timestamp is not None and start <= ev.timestamp <= end)
    return total / window_days


def estimated_days_remaining(current_liters: float, events: Iterable, now: datetime,
                             window_days: int = DEFAULT_WINDOW_DAYS) -> Optional[int]:
    """剩余天数估算；回看窗口内没有消耗时返回 None"""
    rate = average_daily_consumption(events, now, window_days)
    if rate <= 0:
        return None
    return max(0, int(math.floor(current_liters / rate)))


def monthly_report(ledger, events: Iterable, year: int, month: int) -> dict:
    """月度报表

    回收成本只按每月回收次数 × 每桶回收成本计算，不含整桶采购成本。
    """
    stats = monthly_stats(events, datetime(year, month, 1), year, month)
    recycling_costs = (ledger.recycling_frequency or 0) * ledger.recycling_cost_per_barrel
    return {
        "year": year,
        "month": month,
        "recycling_costs": round_money(recycling_costs),
        "processing_costs": round_money(stats["total_cost"]),
        "orders_processed": stats["orders_processed"],
        "total_area_processed_m2": stats["total_area_processed_m2"],
        "liters_used": stats["total_liters_used"],
        "efficiency": {
            "recycling_rate": ledger.recycling_rate,
            "cost_per_m2": ledger.cost_per_square_meter,
            "actual_liters_consumed": stats["total_liters_used"] * (1 - ledger.recycling_rate),
        },
    }
