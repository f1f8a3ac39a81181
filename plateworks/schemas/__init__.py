"""API数据模型模块

定义所有 Pydantic 模型（请求/响应结构体）
"""

from .order import (
    Dimensions,
    OrderCreate,
    OrderRead,
    OrderProgress,
    StageRead,
    StatusUpdate,
    SubProcessRead,
    SubProcessUpdate,
)
from .ledger import (
    CalculateRequest,
    LedgerMetrics,
    LedgerStatus,
    MonthlyReport,
    MonthlyStats,
    RefillRequest,
    RefillResult,
    SettingsUpdate,
    UsageEventRead,
    UsageHistory,
    UsageRequest,
    UsageResult,
    WarningRead,
)
from .workflow import SubProcessUpdateResult, WorkflowTemplateCreate, WorkflowTemplateRead

__all__ = [
    "Dimensions",
    "OrderCreate",
    "OrderRead",
    "OrderProgress",
    "StageRead",
    "StatusUpdate",
    "SubProcessRead",
    "SubProcessUpdate",
    "CalculateRequest",
    "LedgerMetrics",
    "LedgerStatus",
    "MonthlyReport",
    "MonthlyStats",
    "RefillRequest",
    "RefillResult",
    "SettingsUpdate",
    "UsageEventRead",
    "UsageHistory",
    "UsageRequest",
    "UsageResult",
    "WarningRead",
    "SubProcessUpdateResult",
    "WorkflowTemplateCreate",
    "WorkflowTemplateRead",
]
