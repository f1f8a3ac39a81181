"""应用配置模块

使用 Pydantic Settings 管理应用配置，支持从 .env 文件加载环境变量
"""

from pydantic_settings import BaseSettings
import os


class Settings(BaseSettings):
    """应用配置类"""

    # 应用配置
    APP_TITLE: str = "制版工单与药水台账"
    APP_DESCRIPTION: str = "制版工序流转与冲洗药水消耗台账API"
    APP_VERSION: str = "1.0.0"

    # MySQL 配置 - 从环境变量加载
    MYSQL_USER: str = "root"
    MYSQL_PASSWORD: str = "yourrootpw"
    MYSQL_HOST: str = "127.0.0.1"
    MYSQL_PORT: str = "3306"
    MYSQL_DB: str = "plateworks"

    # 数据库配置 - 优先使用DATABASE_URL，否则从MySQL配置构建
    DATABASE_URL: str = ""
    ECHO_SQL: bool = False  # 是否打印SQL日志

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"

    # 台账配置
    CONSUMPTION_WINDOW_DAYS: int = 30  # 估算剩余天数时回看的天数
    DEFAULT_WORKFLOW_TEMPLATE: str = "standard"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # 如果没有显式设置DATABASE_URL，从MySQL配置构建
        if not self.DATABASE_URL:
            if os.path.exists("dev.db"):  # 检查开发数据库文件是否存在
                self.DATABASE_URL = "sqlite:///./dev.db"
            else:
                self.DATABASE_URL = f"mysql+pymysql://{self.MYSQL_USER}:{self.MYSQL_PASSWORD}@{self.MYSQL_HOST}:{self.MYSQL_PORT}/{self.MYSQL_DB}"

    class Config:
        env_file = ".env"  # 从.env文件加载配置


# 创建全局配置实例
settings = Settings()
