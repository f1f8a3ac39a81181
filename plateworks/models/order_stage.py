"""订单阶段数据库模型

每个订单固定四个阶段：设计、制版、生产、交付
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database.connection import Base
from .enums import StageStatus, enum_values


class OrderStage(Base):
    """订单阶段表"""
    __tablename__ = "order_stages"
    __table_args__ = (UniqueConstraint("order_id", "name", name="uq_order_stages_order_name"),)

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    name = Column(String(32), nullable=False)  # 阶段名称
    seq = Column(Integer, nullable=False)  # 阶段序号
    status = Column(
        Enum(StageStatus, name="stage_status", values_callable=enum_values, native_enum=False, length=32),
        nullable=False,
        default=StageStatus.PENDING,
    )
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    order = relationship("Order", back_populates="stages")
