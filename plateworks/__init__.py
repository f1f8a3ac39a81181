"""应用模块入口

提供统一的模块导入接口
"""

from . import (
    crud,
    db,
    exceptions,
    models,
    schemas,
)

# 从子模块导入关键组件
from .config.settings import settings
from .db import get_db, engine, Base, SessionLocal

__all__ = [
    "crud",
    "db",
    "exceptions",
    "models",
    "schemas",
    "settings",
    "get_db",
    "engine",
    "Base",
    "SessionLocal",
]
