"""工序模板

不同产品线使用不同的制版工序集合，以模板键区分，避免在状态机中按产品线分支。
订单创建时按模板生成工序行，之后工序集合固定不变。
"""

from typing import Dict, List, Optional
from sqlalchemy.orm import Session

from .. import models
from ..exceptions import PlateworksError, UnknownWorkflowTemplate
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TRIGGER = "washout"

# 内置模板：6 道标准工序与 9 道扩展工序
BUILTIN_TEMPLATES: Dict[str, dict] = {
    "standard": {
        "name": "Standard prepress (6 steps)",
        "sub_processes": [
            "positioning",
            "laserImaging",
            "exposure",
            "washout",
            "drying",
            "finishing",
        ],
    },
    "extended": {
        "name": "Extended prepress (9 steps)",
        "sub_processes": [
            "positioning",
            "backExposure",
            "laserImaging",
            "mainExposure",
            "washout",
            "drying",
            "postExposure",
            "uvcExposure",
            "finishing",
        ],
    },
}


def validate_sub_processes(sub_processes: List[str], trigger_sub_process: str) -> List[str]:
    """校验模板工序列表：非空、无重复、包含触发工序"""
    names = [str(n).strip() for n in (sub_processes or [])]
    if not names or any(not n for n in names):
        raise PlateworksError("A workflow template needs at least one named sub-process")
    if len(set(names)) != len(names):
        raise PlateworksError("Sub-process names must be unique within a template", {"sub_processes": names})
    if trigger_sub_process not in names:
        raise PlateworksError(
            f"Template must include its trigger sub-process {trigger_sub_process!r}",
            {"sub_processes": names},
        )
    return names


def get_template(db: Session, key: str) -> models.WorkflowTemplate:
    template = db.query(models.WorkflowTemplate).filter(models.WorkflowTemplate.key == key).first()
    if template is None:
        raise UnknownWorkflowTemplate(key)
    return template


def list_templates(db: Session):
    return db.query(models.WorkflowTemplate).order_by(models.WorkflowTemplate.id).all()


def create_template(db: Session, key: str, name: str, sub_processes: List[str],
                    trigger_sub_process: str = DEFAULT_TRIGGER, description: Optional[str] = None):
    """创建自定义模板"""
    names = validate_sub_processes(sub_processes, trigger_sub_process)
    existing = db.query(models.WorkflowTemplate).filter(models.WorkflowTemplate.key == key).first()
    if existing:
        raise PlateworksError(f"Workflow template {key!r} already exists", {"template": key})
    template = models.WorkflowTemplate(
        key=key,
        name=name,
        sub_processes=names,
        trigger_sub_process=trigger_sub_process,
        description=description,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info(f"Created workflow template {key!r} with {len(names)} sub-processes")
    return template


def ensure_builtin_templates(db: Session) -> int:
    """写入缺失的内置模板，返回新增数量"""
    created = 0
    for key, builtin in BUILTIN_TEMPLATES.items():
        exists = db.query(models.WorkflowTemplate).filter(models.WorkflowTemplate.key == key).first()
        if exists:
            continue
        db.add(models.WorkflowTemplate(
            key=key,
            name=builtin["name"],
            sub_processes=list(builtin["sub_processes"]),
            trigger_sub_process=DEFAULT_TRIGGER,
        ))
        created += 1
    if created:
        db.commit()
        logger.info(f"Seeded {created} built-in workflow template(s)")
    return created
