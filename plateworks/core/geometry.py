"""版面面积与药水用量计算

纯函数，无副作用。
- compute_area: (宽 × 宽向重复次数) × (高 × 高向重复次数) / 10000，cm² 换算为 m²
- compute_liters_needed: 面积 × 每平方米用量
- compute_cost: 面积 × 每平方米成本
"""

import math
from typing import Any, Mapping, Optional

from ..exceptions import InvalidGeometry

CM2_PER_M2 = 10000.0


def _get(dimensions: Any, field: str):
    if isinstance(dimensions, Mapping):
        return dimensions.get(field)
    return getattr(dimensions, field, None)


def _positive_length(dimensions: Any, field: str) -> float:
    value = _get(dimensions, field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidGeometry(f"{field} must be a number", field=field, value=value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidGeometry(f"{field} must be greater than 0", field=field, value=value)
    return float(value)


def _repeat_count(dimensions: Any, field: str) -> int:
    """重复次数缺失或 <= 0 时按 1 处理"""
    value = _get(dimensions, field)
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1
    if not math.isfinite(value) or value <= 0:
        return 1
    return value


def compute_area(dimensions: Any) -> float:
    """根据订单尺寸计算处理面积（m²）

    dimensions 可以是字典，也可以是带 width/height/width_repeat_count/height_repeat_count 属性的对象。
    """
    if dimensions is None:
        raise InvalidGeometry("dimensions are required")
    width = _positive_length(dimensions, "width")
    height = _positive_length(dimensions, "height")
    total_width_cm = width * _repeat_count(dimensions, "width_repeat_count")
    total_height_cm = height * _repeat_count(dimensions, "height_repeat_count")
    return (total_width_cm * total_height_cm) / CM2_PER_M2


def _non_negative(value: float, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise InvalidGeometry(f"{field} must be a non-negative number", field=field, value=value)
    return float(value)


def compute_liters_needed(area_m2: float, liters_per_square_meter: float) -> float:
    return _non_negative(area_m2, "area_m2") * liters_per_square_meter


def compute_cost(area_m2: float, cost_per_square_meter: float) -> float:
    return _non_negative(area_m2, "area_m2") * cost_per_square_meter


def estimate(dimensions: Any, liters_per_square_meter: float, cost_per_square_meter: float,
             area_m2: Optional[float] = None) -> dict:
    """消耗预估（不写台账），供制版人员在下单前核算"""
    if area_m2 is None:
        area_m2 = compute_area(dimensions)
    width_repeat = _repeat_count(dimensions, "width_repeat_count")
    height_repeat = _repeat_count(dimensions, "height_repeat_count")
    return {
        "dimensions": {
            "width": _get(dimensions, "width"),
            "height": _get(dimensions, "height"),
            "width_repeat_count": width_repeat,
            "height_repeat_count": height_repeat,
            "total_width_cm": _get(dimensions, "width") * width_repeat,
            "total_height_cm": _get(dimensions, "height") * height_repeat,
        },
        "calculations": {
            "total_area_m2": round(area_m2, 3),
            "liters_needed": round(compute_liters_needed(area_m2, liters_per_square_meter), 2),
            "estimated_cost": round(compute_cost(area_m2, cost_per_square_meter), 2),
        },
    }
