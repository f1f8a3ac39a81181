"""订单模型定义"""

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database.connection import Base
from .enums import OrderStatus, enum_values


class Order(Base):
    """订单模型"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String(32), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    client_name = Column(String(255), nullable=True)
    # 工序模板，订单创建后不再变化
    workflow_template = Column(String(64), nullable=False)
    status = Column(
        Enum(OrderStatus, name="order_status", values_callable=enum_values, native_enum=False, length=32),
        nullable=False,
        default=OrderStatus.SUBMITTED,
    )
    # 暂停前的状态，仅供人工恢复使用
    status_before_hold = Column(
        Enum(OrderStatus, name="order_status", values_callable=enum_values, native_enum=False, length=32),
        nullable=True,
    )
    # 版面尺寸（单位：cm），可为空；重复次数默认 1
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    width_repeat_count = Column(Integer, nullable=True, default=1)
    height_repeat_count = Column(Integer, nullable=True, default=1)
    # 是否已记录药水消耗，防止冲洗工序反复勾选时重复入账
    usage_recorded = Column(Boolean, nullable=False, default=False)
    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    stages = relationship(
        "OrderStage",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStage.seq",
    )
    sub_processes = relationship(
        "OrderSubProcess",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderSubProcess.seq",
    )

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def dimensions(self):
        """订单尺寸；宽或高缺失时返回 None"""
        if self.width is None or self.height is None:
            return None
        return {
            "width": self.width,
            "height": self.height,
            "width_repeat_count": self.width_repeat_count if self.width_repeat_count is not None else 1,
            "height_repeat_count": self.height_repeat_count if self.height_repeat_count is not None else 1,
        }

    def get_stage(self, name: str):
        return next((s for s in self.stages if s.name == name), None)

    def get_sub_process(self, name: str):
        return next((sp for sp in self.sub_processes if sp.name == name), None)

    def sub_process_names(self):
        return [sp.name for sp in self.sub_processes]

    def __repr__(self) -> str:
        return f"<Order id={self.id} number={self.order_number!r} status={self.status}>"
