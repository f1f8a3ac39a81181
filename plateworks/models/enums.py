"""状态枚举定义

订单状态、阶段状态、工序状态以及消耗记录来源
"""

import enum


class OrderStatus(str, enum.Enum):
    SUBMITTED = "Submitted"
    DESIGNING = "Designing"
    DESIGN_DONE = "Design Done"
    IN_PREPRESS = "In Prepress"
    READY_FOR_DELIVERY = "Ready for Delivery"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"
    CANCELLED = "Cancelled"


class StageStatus(str, enum.Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class SubProcessStatus(str, enum.Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"


class UsageSource(str, enum.Enum):
    AUTOMATIC = "automatic"  # 冲洗工序完成时自动记录
    MANUAL = "manual"        # 授权人员手工补录


# 订单阶段，按流转顺序
STAGE_NAMES = ("design", "prepress", "production", "delivery")


def enum_values(enum_cls):
    """供 SQLAlchemy Enum 列使用：数据库中保存枚举的 value 而不是 name"""
    return [member.value for member in enum_cls]
