"""数据库模型模块

定义所有 SQLAlchemy ORM 模型
"""

from ..database.connection import Base
from .enums import OrderStatus, StageStatus, SubProcessStatus, UsageSource, STAGE_NAMES
from .order import Order
from .order_stage import OrderStage
from .order_sub_process import OrderSubProcess
from .workflow_template import WorkflowTemplate
from .resource_ledger import ResourceLedger, LEDGER_ID, BARREL_LITERS
from .usage_event import UsageEvent

__all__ = [
    "Base",
    "OrderStatus",
    "StageStatus",
    "SubProcessStatus",
    "UsageSource",
    "STAGE_NAMES",
    "Order",
    "OrderStage",
    "OrderSubProcess",
    "WorkflowTemplate",
    "ResourceLedger",
    "LEDGER_ID",
    "BARREL_LITERS",
    "UsageEvent",
]
