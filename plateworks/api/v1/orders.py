from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ... import crud, schemas, models
from ...core import state_machine
from ...core.workflow import WorkflowFacade
from ...database.connection import get_db
from .deps import get_workflow

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=schemas.OrderRead)
def create_order_endpoint(order: schemas.OrderCreate, db: Session = Depends(get_db)):
    """创建新订单"""
    db_order = crud.create_order(db, order)
    return db_order


@router.get("/", response_model=List[schemas.OrderRead])
def list_orders_endpoint(status: Optional[str] = Query(None, description="按订单状态过滤"),
                         db: Session = Depends(get_db)):
    status_filter = None
    if status:
        try:
            status_filter = models.OrderStatus(status)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown order status: {status}")
    return crud.list_orders(db, status_filter)


@router.get("/{order_id}", response_model=schemas.OrderRead)
def get_order_endpoint(order_id: int, db: Session = Depends(get_db)):
    db_order = crud.get_order(db, order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")
    return db_order


@router.put("/{order_id}/sub-processes", response_model=schemas.SubProcessUpdateResult)
def update_sub_process_endpoint(order_id: int, payload: schemas.SubProcessUpdate,
                                workflow: WorkflowFacade = Depends(get_workflow)):
    """更新制版工序状态；冲洗完成时自动扣减药水"""
    outcome = workflow.apply_sub_process_update(order_id, payload.sub_process, payload.status)
    return schemas.SubProcessUpdateResult(
        order=schemas.OrderRead.model_validate(outcome.order),
        usage_event=(
            schemas.UsageEventRead.model_validate(outcome.usage_event) if outcome.usage_event else None
        ),
        usage_recorded_now=outcome.usage_recorded_now,
        all_sub_processes_completed=outcome.all_sub_processes_completed,
        warnings=outcome.warnings,
    )


@router.put("/{order_id}/prepress-complete", response_model=schemas.OrderRead)
def prepress_complete_endpoint(order_id: int, workflow: WorkflowFacade = Depends(get_workflow)):
    """确认制版完成，等待审核"""
    return workflow.mark_prepress_complete(order_id)


@router.put("/{order_id}/status", response_model=schemas.OrderRead)
def update_status_endpoint(order_id: int, payload: schemas.StatusUpdate,
                           workflow: WorkflowFacade = Depends(get_workflow)):
    return workflow.set_status(order_id, payload.status)


@router.put("/{order_id}/resume", response_model=schemas.OrderRead)
def resume_order_endpoint(order_id: int, workflow: WorkflowFacade = Depends(get_workflow)):
    """恢复暂停的订单"""
    return workflow.resume(order_id)


@router.get("/{order_id}/progress", response_model=schemas.OrderProgress)
def order_progress_endpoint(order_id: int, db: Session = Depends(get_db)):
    db_order = crud.get_order(db, order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")
    return schemas.OrderProgress(
        order_id=db_order.id,
        status=db_order.status,
        prepress_progress=state_machine.prepress_progress(db_order),
        next_step=state_machine.next_step(db_order),
    )
