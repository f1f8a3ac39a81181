"""数据库操作（CRUD）- 订单相关

封装常用的数据库读写操作，便于路由层调用并保持业务逻辑集中。
- create_order 会根据工序模板建立 Order 与关联的阶段、制版工序
- get_order_for_update 以行锁读取订单，供工作流门面串行化同一订单的修改
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .. import models, schemas
from ..config.settings import settings
from ..core.templates import get_template
from ..utils.helpers import format_order_number


def create_order(db: Session, order: schemas.OrderCreate):
    """创建新订单，并按模板生成阶段与工序

    如果未指定模板，则使用配置中的默认模板
    """
    template = get_template(db, order.workflow_template or settings.DEFAULT_WORKFLOW_TEMPLATE)

    dims = order.dimensions
    now = datetime.now()
    db_order = models.Order(
        # provisional unique value, replaced once the row id is known
        order_number=f"NEW-{uuid.uuid4().hex[:24]}",
        title=order.title,
        client_name=order.client_name,
        workflow_template=template.key,
        status=models.OrderStatus.SUBMITTED,
        width=dims.width if dims else None,
        height=dims.height if dims else None,
        width_repeat_count=dims.width_repeat_count if dims else 1,
        height_repeat_count=dims.height_repeat_count if dims else 1,
        usage_recorded=False,
    )
    for idx, name in enumerate(models.STAGE_NAMES, start=1):
        db_order.stages.append(models.OrderStage(name=name, seq=idx, status=models.StageStatus.PENDING))
    # the sub-process set is copied from the template and stays fixed for this order
    for idx, name in enumerate(template.sub_processes, start=1):
        db_order.sub_processes.append(
            models.OrderSubProcess(name=name, seq=idx, status=models.SubProcessStatus.PENDING)
        )
    db.add(db_order)
    db.flush()
    # 订单号序号取自行ID，并发创建也不会重复
    db_order.order_number = format_order_number(now, db_order.id)
    db.commit()
    db.refresh(db_order)
    return db_order


def get_order(db: Session, order_id: int):
    """根据ID获取订单"""
    return db.query(models.Order).filter(models.Order.id == order_id).first()


def get_order_for_update(db: Session, order_id: int):
    """以行锁读取订单（SQLite 下忽略 FOR UPDATE，仍由版本号兜底）"""
    return (
        db.query(models.Order)
        .filter(models.Order.id == order_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def list_orders(db: Session, status: Optional[models.OrderStatus] = None):
    """获取订单列表，按创建时间倒序"""
    query = db.query(models.Order)
    if status is not None:
        query = query.filter(models.Order.status == status)
    return query.order_by(models.Order.created_at.desc(), models.Order.id.desc()).all()
