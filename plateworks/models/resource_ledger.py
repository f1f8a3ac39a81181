"""药水台账数据库模型

单行表（id=1），记录冲洗药水的库存与成本参数。
通过 version_id 做乐观并发控制，多实例部署时也能串行化写入。
"""

from sqlalchemy import Column, DateTime, Float, Integer
from sqlalchemy.sql import func
from ..database.connection import Base

LEDGER_ID = 1
BARREL_LITERS = 200.0  # 每桶 200 升


class ResourceLedger(Base):
    """药水台账表"""
    __tablename__ = "resource_ledger"

    id = Column(Integer, primary_key=True)
    total_barrels = Column(Integer, nullable=False, default=0)  # 累计加入桶数
    current_liters = Column(Float, nullable=False, default=0.0)  # 当前存量（升），允许暂时为负

    # 成本参数
    cost_per_barrel = Column(Float, nullable=False, default=35000.0)
    recycling_cost_per_barrel = Column(Float, nullable=False, default=800.0)
    cost_per_square_meter = Column(Float, nullable=False, default=424.44)

    # 消耗参数
    liters_per_square_meter = Column(Float, nullable=False, default=10.0)
    recycling_rate = Column(Float, nullable=False, default=0.70)  # 回收率 0.0 - 1.0
    recycling_frequency = Column(Integer, nullable=False, default=30)  # 每月回收次数

    version_id = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def max_capacity(self) -> float:
        return (self.total_barrels or 0) * BARREL_LITERS
