"""药水消耗记录数据库模型

只追加、不修改。order_id 唯一约束保证每个订单至多一条记录；
手工补录且不关联订单的记录 order_id 为空。
"""

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer
from ..database.connection import Base
from .enums import UsageSource, enum_values


class UsageEvent(Base):
    """药水消耗记录表"""
    __tablename__ = "usage_events"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, unique=True)
    area_processed_m2 = Column(Float, nullable=False)  # 处理面积（平方米）
    liters_consumed = Column(Float, nullable=False)  # 消耗升数
    cost_incurred = Column(Float, nullable=False)  # 产生成本
    source = Column(
        Enum(UsageSource, name="usage_source", values_callable=enum_values, native_enum=False, length=16),
        nullable=False,
        default=UsageSource.AUTOMATIC,
    )
    timestamp = Column(DateTime, nullable=False, index=True)
