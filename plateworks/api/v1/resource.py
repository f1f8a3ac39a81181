from typing import Optional

from fastapi import APIRouter, Depends, Query

from ... import schemas
from ...core.geometry import estimate
from ...core.workflow import WorkflowFacade
from .deps import get_workflow

router = APIRouter(prefix="/resource", tags=["resource"])


@router.get("/status", response_model=schemas.LedgerStatus)
def resource_status_endpoint(workflow: WorkflowFacade = Depends(get_workflow)):
    """药水存量、成本参数与展示指标"""
    return workflow.resource_status()


@router.post("/refill", response_model=schemas.RefillResult)
def refill_endpoint(payload: schemas.RefillRequest, workflow: WorkflowFacade = Depends(get_workflow)):
    """补充整桶药水（每桶 200 升）"""
    return workflow.refill_resource(payload.barrel_count)


@router.put("/settings", response_model=schemas.LedgerStatus)
def update_settings_endpoint(payload: schemas.SettingsUpdate, workflow: WorkflowFacade = Depends(get_workflow)):
    changes = payload.model_dump(exclude_unset=True)
    changes.update(payload.model_extra or {})
    return workflow.update_resource_settings(changes)


@router.post("/usage", response_model=schemas.UsageResult)
def record_usage_endpoint(payload: schemas.UsageRequest, workflow: WorkflowFacade = Depends(get_workflow)):
    """手工补录一次消耗"""
    recording = workflow.record_manual_usage(payload.order_id, payload.area_processed_m2)
    return schemas.UsageResult(
        event=schemas.UsageEventRead.model_validate(recording.event),
        remaining_liters=recording.remaining_liters,
        warnings=recording.warnings,
    )


@router.get("/history", response_model=schemas.UsageHistory)
def usage_history_endpoint(
    year: Optional[int] = Query(None, ge=2000, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    workflow: WorkflowFacade = Depends(get_workflow),
):
    """某月的消耗记录，默认当前月"""
    history = workflow.ledger.history(year, month)
    history["usage_history"] = [schemas.UsageEventRead.model_validate(e) for e in history["usage_history"]]
    return history


@router.post("/calculate")
def calculate_endpoint(payload: schemas.CalculateRequest, workflow: WorkflowFacade = Depends(get_workflow)):
    """按尺寸预估面积、药水用量与成本，不写台账"""
    ledger = workflow.ledger.get_ledger()
    return estimate(
        payload.model_dump(),
        ledger.liters_per_square_meter,
        ledger.cost_per_square_meter,
    )


@router.get("/monthly-report", response_model=schemas.MonthlyReport)
def monthly_report_endpoint(
    year: Optional[int] = Query(None, ge=2000, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    workflow: WorkflowFacade = Depends(get_workflow),
):
    return workflow.ledger.monthly_report(year, month)
