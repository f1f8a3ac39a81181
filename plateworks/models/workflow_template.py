"""工序模板数据库模型

不同产品线的制版工序集合不同（6 道或 9 道），以模板键区分
"""

from sqlalchemy import JSON, Column, Integer, String
from ..database.connection import Base


class WorkflowTemplate(Base):
    """工序模板表"""
    __tablename__ = "workflow_templates"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(64), nullable=False, unique=True, index=True)  # 模板键
    name = Column(String(255), nullable=False)  # 显示名称
    sub_processes = Column(JSON, nullable=False)  # 有序工序名称列表
    trigger_sub_process = Column(String(64), nullable=False, default="washout")  # 触发药水消耗的工序
    description = Column(String(255), nullable=True)
