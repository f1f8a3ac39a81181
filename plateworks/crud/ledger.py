"""数据库操作（CRUD）- 药水台账与消耗记录"""

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import models


def get_ledger(db: Session, for_update: bool = False):
    """读取单行台账；for_update 时加行锁"""
    query = db.query(models.ResourceLedger).filter(models.ResourceLedger.id == models.LEDGER_ID)
    if for_update:
        query = query.with_for_update().populate_existing()
    return query.first()


def get_or_create_ledger(db: Session, for_update: bool = False):
    """读取台账，不存在时以零库存创建

    并发首次创建时，另一请求可能已经插入，此时回退到保存点后重新读取。
    """
    ledger = get_ledger(db, for_update=for_update)
    if ledger is not None:
        return ledger

    savepoint = db.begin_nested()
    try:
        ledger = models.ResourceLedger(id=models.LEDGER_ID, total_barrels=0, current_liters=0.0)
        db.add(ledger)
        db.flush()
        savepoint.commit()
    except IntegrityError:
        savepoint.rollback()
        ledger = get_ledger(db, for_update=for_update)
    return ledger


def get_usage_event_for_order(db: Session, order_id: int):
    """获取订单的消耗记录（至多一条）"""
    return db.query(models.UsageEvent).filter(models.UsageEvent.order_id == order_id).first()


def list_usage_events_between(db: Session, start: datetime, end: datetime):
    """获取 [start, end) 区间内的消耗记录，按时间正序"""
    return (
        db.query(models.UsageEvent)
        .filter(models.UsageEvent.timestamp >= start, models.UsageEvent.timestamp < end)
        .order_by(models.UsageEvent.timestamp, models.UsageEvent.id)
        .all()
    )


def list_usage_events_since(db: Session, start: datetime):
    return (
        db.query(models.UsageEvent)
        .filter(models.UsageEvent.timestamp >= start)
        .order_by(models.UsageEvent.timestamp, models.UsageEvent.id)
        .all()
    )
