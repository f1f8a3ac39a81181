"""订单制版工序数据库模型

定义订单制版阶段内各子工序（定位、激光成像、曝光、冲洗……）的完成状态
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database.connection import Base
from .enums import SubProcessStatus, enum_values


class OrderSubProcess(Base):
    """订单制版工序表"""
    __tablename__ = "order_sub_processes"
    __table_args__ = (UniqueConstraint("order_id", "name", name="uq_order_sub_processes_order_name"),)

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)  # 订单ID
    name = Column(String(64), nullable=False)  # 工序名称
    seq = Column(Integer, nullable=False)  # 工序序号
    status = Column(
        Enum(SubProcessStatus, name="sub_process_status", values_callable=enum_values, native_enum=False, length=32),
        nullable=False,
        default=SubProcessStatus.PENDING,
    )
    completed_at = Column(DateTime, nullable=True)

    order = relationship("Order", back_populates="sub_processes")
