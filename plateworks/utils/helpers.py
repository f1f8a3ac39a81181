"""工具函数模块

包含一些常用的工具函数
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """返回某个自然月的起止时间 [start, end)"""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def resolve_month(year: Optional[int], month: Optional[int], now: datetime) -> Tuple[int, int]:
    """未指定年月时取 now 所在的月份"""
    return (year or now.year, month or now.month)


def in_month(ts: datetime, year: int, month: int) -> bool:
    return ts is not None and ts.year == year and ts.month == month


def trailing_window(now: datetime, days: int) -> Tuple[datetime, datetime]:
    """回看窗口 [now - days, now]"""
    return now - timedelta(days=days), now


def round_money(value: float) -> float:
    return round(value or 0.0, 2)


def format_order_number(created: datetime, sequence: int) -> str:
    """订单号格式：ORD-年月-序号，例如 ORD-2510-0001"""
    return f"ORD-{created.strftime('%y%m')}-{sequence:04d}"
