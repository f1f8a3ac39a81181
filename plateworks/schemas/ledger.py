"""药水台账数据结构定义

定义台账、消耗记录与报表相关的Pydantic模型
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.enums import UsageSource


class UsageEventRead(BaseModel):
    id: int
    order_id: Optional[int] = None
    area_processed_m2: float
    liters_consumed: float
    cost_incurred: float
    source: UsageSource
    timestamp: datetime

    class Config:
        from_attributes = True


class WarningRead(BaseModel):
    """非阻塞警告，结构与错误响应一致"""
    error: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class RefillRequest(BaseModel):
    # 不在这里限制取值，由台账返回 InvalidQuantity
    barrel_count: Any


class RefillResult(BaseModel):
    new_total_barrels: int
    new_current_liters: float


class SettingsUpdate(BaseModel):
    """台账参数更新（部分字段）

    未知字段和非数字取值原样交给台账校验，返回 InvalidSetting 而不是在这里丢弃。
    """
    cost_per_barrel: Optional[Any] = None
    recycling_cost_per_barrel: Optional[Any] = None
    cost_per_square_meter: Optional[Any] = None
    liters_per_square_meter: Optional[Any] = None
    recycling_rate: Optional[Any] = None
    recycling_frequency: Optional[Any] = None

    class Config:
        extra = "allow"


class UsageRequest(BaseModel):
    """手工补录消耗；order_id 为空表示不关联订单"""
    order_id: Optional[int] = None
    area_processed_m2: float


class UsageResult(BaseModel):
    event: UsageEventRead
    remaining_liters: float
    warnings: List[WarningRead] = Field(default_factory=list)


class CalculateRequest(BaseModel):
    width: float
    height: float
    width_repeat_count: Optional[int] = 1
    height_repeat_count: Optional[int] = 1


class MonthlyStats(BaseModel):
    year: int
    month: int
    orders_processed: int
    total_area_processed_m2: float
    total_liters_used: float
    total_cost: float


class LedgerMetrics(BaseModel):
    fill_percentage: float
    max_capacity: float
    estimated_days_remaining: Optional[int] = None  # 无消耗历史时为空
    remaining_barrels: int
    efficiency: float


class LedgerStatus(BaseModel):
    current_liters: float
    total_barrels: int
    cost_per_barrel: float
    recycling_cost_per_barrel: float
    cost_per_square_meter: float
    liters_per_square_meter: float
    recycling_rate: float
    recycling_frequency: int
    metrics: LedgerMetrics
    monthly_stats: MonthlyStats


class UsageHistory(BaseModel):
    year: int
    month: int
    usage_history: List[UsageEventRead]
    monthly_stats: MonthlyStats


class ReportEfficiency(BaseModel):
    recycling_rate: float
    cost_per_m2: float
    actual_liters_consumed: float


class MonthlyReport(BaseModel):
    year: int
    month: int
    recycling_costs: float
    processing_costs: float
    orders_processed: int
    total_area_processed_m2: float
    liters_used: float
    efficiency: ReportEfficiency
