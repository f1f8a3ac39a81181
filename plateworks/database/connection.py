"""数据库连接模块

统一管理数据库引擎、会话和模型基类的创建
"""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from ..config.settings import settings

IS_SQLITE = settings.DATABASE_URL.startswith("sqlite")

# SQLite 连接会被 TestClient 的工作线程复用
connect_args = {}
if IS_SQLITE:
    connect_args["check_same_thread"] = False

# 创建数据库引擎
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=settings.ECHO_SQL,  # 从配置中读取是否显示SQL日志
    connect_args=connect_args,
)

if IS_SQLITE:
    # pysqlite 默认延迟 BEGIN，会让 SAVEPOINT 失效；改为由 SQLAlchemy 显式开启事务
    @event.listens_for(engine, "connect")
    def _sqlite_disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _sqlite_explicit_begin(conn):
        conn.exec_driver_sql("BEGIN")

# 创建会话工厂
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 创建模型基类
Base = declarative_base()


def get_db():
    """获取数据库会话的依赖函数"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
