"""工作流数据结构定义

工序模板与工序更新结果
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .ledger import UsageEventRead, WarningRead
from .order import OrderRead


class WorkflowTemplateCreate(BaseModel):
    key: str
    name: str
    sub_processes: List[str]
    trigger_sub_process: str = "washout"
    description: Optional[str] = None


class WorkflowTemplateRead(WorkflowTemplateCreate):
    id: int

    class Config:
        from_attributes = True


class SubProcessUpdateResult(BaseModel):
    """工序更新结果

    usage_event 为本订单的消耗记录（如有），usage_recorded_now 表示是否由本次更新写入。
    台账侧的失败放在 warnings 中，不影响工序更新本身。
    """
    order: OrderRead
    usage_event: Optional[UsageEventRead] = None
    usage_recorded_now: bool = False
    all_sub_processes_completed: bool = False
    warnings: List[WarningRead] = Field(default_factory=list)
