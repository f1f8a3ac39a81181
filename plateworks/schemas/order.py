"""订单数据结构定义

定义订单相关的Pydantic模型
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.enums import OrderStatus, StageStatus, SubProcessStatus


class Dimensions(BaseModel):
    """版面尺寸（cm）"""
    width: float
    height: float
    width_repeat_count: int = 1
    height_repeat_count: int = 1


class OrderCreate(BaseModel):
    """创建订单时的模型"""
    title: str
    client_name: Optional[str] = None
    workflow_template: Optional[str] = None  # 不填则使用默认模板
    dimensions: Optional[Dimensions] = None


class StageRead(BaseModel):
    name: str
    status: StageStatus
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubProcessRead(BaseModel):
    name: str
    seq: int
    status: SubProcessStatus
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderRead(BaseModel):
    """读取订单时的模型"""
    id: int
    order_number: str
    title: str
    client_name: Optional[str] = None
    workflow_template: str
    status: OrderStatus
    status_before_hold: Optional[OrderStatus] = None
    dimensions: Optional[Dimensions] = None
    usage_recorded: bool
    stages: List[StageRead] = Field(default_factory=list)
    sub_processes: List[SubProcessRead] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubProcessUpdate(BaseModel):
    """制版工序状态更新请求"""
    sub_process: str
    status: str


class StatusUpdate(BaseModel):
    """订单状态更新请求"""
    status: str


class OrderProgress(BaseModel):
    order_id: int
    status: OrderStatus
    prepress_progress: float
    next_step: str
