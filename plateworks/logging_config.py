"""
日志配置模块

统一配置 plateworks 命名空间下的日志输出：
    - 控制台输出（始终开启）
    - 滚动文件日志（可选，生产环境使用）
    - 单独的错误日志（仅 ERROR/CRITICAL）
    - 每条日志附带线程名，便于排查并发请求

日志格式:
    2025-12-03 10:15:30 [INFO    ] [MainThread] plateworks.core.workflow - 工序更新 ...

用法:
    # 应用启动时
    from plateworks.logging_config import setup_logging, get_logger
    setup_logging(log_level=logging.INFO, enable_file_logging=False)

    # 在模块中
    logger = get_logger(__name__)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

APP_LOGGER_NAME = "plateworks"


class ThreadContextFilter(logging.Filter):
    """为每条日志记录附加线程名与线程ID"""

    def filter(self, record: logging.LogRecord) -> bool:
        current_thread = threading.current_thread()
        record.thread_name = current_thread.name
        record.thread_id = threading.get_ident()
        return True


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
) -> logging.Logger:
    """
    配置应用日志。

    Args:
        log_level: 最低日志级别，可传入 logging 常量或 "INFO" 这样的名称
        log_dir: 日志文件目录（默认：当前目录下的 logs/）
        enable_file_logging: 是否写入滚动日志文件

    Returns:
        配置好的 plateworks 根日志器
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logger = logging.getLogger(APP_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.propagate = False

    # 允许重复配置
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path.cwd() / "logs"
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{APP_LOGGER_NAME}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_log_file = log_dir / f"{APP_LOGGER_NAME}_error.log"
        error_handler = RotatingFileHandler(
            filename=error_log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    获取 plateworks 命名空间下的子日志器。

    例如 get_logger("plateworks.core.ledger") 或 get_logger("scripts.seed")
    都会挂在 "plateworks" 根日志器之下，继承 setup_logging() 的配置。
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)
