from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import schemas
from ...core import templates
from ...database.connection import get_db

router = APIRouter(prefix="/workflow-templates", tags=["workflow-templates"])


@router.get("/", response_model=List[schemas.WorkflowTemplateRead])
def list_templates_endpoint(db: Session = Depends(get_db)):
    return templates.list_templates(db)


@router.post("/", response_model=schemas.WorkflowTemplateRead)
def create_template_endpoint(payload: schemas.WorkflowTemplateCreate, db: Session = Depends(get_db)):
    """创建产品线专用的工序模板"""
    return templates.create_template(
        db,
        key=payload.key,
        name=payload.name,
        sub_processes=payload.sub_processes,
        trigger_sub_process=payload.trigger_sub_process,
        description=payload.description,
    )
