from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.workflow import WorkflowFacade
from ...database.connection import get_db


def get_workflow(db: Session = Depends(get_db)) -> WorkflowFacade:
    """每个请求一个工作流门面，与请求共用数据库会话"""
    return WorkflowFacade(db)
