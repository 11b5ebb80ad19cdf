"""
统一日志模块

基于loguru实现:
- 结构化日志
- 日志轮转
- 错误日志分离
- 任务日志追踪
"""


from __future__ import annotations
import contextlib
import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from parallel_core.config import get_config

# 日志格式
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

LOG_FORMAT_FILE = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
    "{level: <8} | "
    "{name}:{function}:{line} | "
    "{message}"
)

_handler_ids: list[int] = []


def setup_logging(
    log_dir: Optional[Path] = None,
    log_level: str = "INFO",
    console: bool = True,
    file: bool = True,
) -> None:
    """
    配置日志系统

    首次调用时移除loguru默认的stderr handler, 调用方自行添加的handler保留;
    重复调用时会先移除上一次添加的handler

    Args:
        log_dir: 日志目录
        log_level: 日志级别
        console: 是否输出到控制台
        file: 是否写入日志文件
    """
    config = get_config()

    # loguru默认handler的id固定为0, 可能已被移除
    with contextlib.suppress(ValueError):
        logger.remove(0)

    for handler_id in _handler_ids:
        logger.remove(handler_id)
    _handler_ids.clear()

    if console:
        _handler_ids.append(logger.add(
            sys.stderr,
            format=LOG_FORMAT,
            level=log_level,
            colorize=True,
        ))

    if not file:
        return

    if log_dir is None:
        log_dir = config.get_logs_path()

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # 主日志文件
    _handler_ids.append(logger.add(
        log_dir / "parallel.log",
        format=LOG_FORMAT_FILE,
        level=log_level,
        rotation=config.logging.rotation,
        retention=config.logging.retention,
        compression="gz",
        encoding="utf-8",
    ))

    # 错误日志单独文件
    _handler_ids.append(logger.add(
        log_dir / "errors.log",
        format=LOG_FORMAT_FILE,
        level="ERROR",
        rotation=config.logging.rotation,
        retention=config.logging.retention,
        compression="gz",
        encoding="utf-8",
    ))

    logger.info(f"日志系统初始化完成, 日志目录: {log_dir}")


def get_logger(name: str = __name__) -> Any:
    """获取logger实例"""
    return logger.bind(name=name)


class TaskLogger:
    """
    任务日志记录器

    每条日志都绑定任务key, 便于按任务过滤
    """

    def __init__(self, key: str):
        self.key = key
        self._logger = logger.bind(task_key=key)

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        self._logger.exception(message, **kwargs)


__all__ = [
    "logger",
    "get_logger",
    "setup_logging",
    "TaskLogger",
]
