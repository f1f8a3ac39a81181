"""FastAPI主应用入口

提供制版工单流转与冲洗药水台账的 RESTful API
- 使用依赖注入管理数据库会话
- 业务异常统一转换为 {"error", "message", "details"} 结构
- 启动时建表、写入内置工序模板并初始化台账
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .api.v1 import orders_router, resource_router, templates_router
from .config.settings import settings
from .core.templates import ensure_builtin_templates
from .database.connection import Base, SessionLocal, engine, get_db
from .exceptions import PlateworksError
from .logging_config import get_logger, setup_logging

setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR, enable_file_logging=settings.LOG_TO_FILE)
logger = get_logger(__name__)


def init_database():
    """建表并写入启动所需的数据"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_builtin_templates(db)
        crud.get_or_create_ledger(db)
        db.commit()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_database()
    logger.info(f"{settings.APP_TITLE} v{settings.APP_VERSION} started")
    yield


# 创建FastAPI应用实例
app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(PlateworksError)
async def plateworks_error_handler(request: Request, exc: PlateworksError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# 挂载API路由
app.include_router(orders_router, prefix="/api/v1")
app.include_router(resource_router, prefix="/api/v1")
app.include_router(templates_router, prefix="/api/v1")


# 健康检查端点
@app.get("/health/db")
def health_check(db: Session = Depends(get_db)):
    """检查数据库连接状态"""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "reachable"}
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        raise HTTPException(status_code=503, detail="Database connection failed")


# 根路径 - 返回服务状态
@app.get("/")
def read_root():
    """返回服务运行状态"""
    return {"service": settings.APP_TITLE, "status": "running"}
