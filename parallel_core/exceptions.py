"""
统一异常定义

所有任务管理器级别的异常都从ParallelError继承
回调内部抛出的异常不会穿透到调用方, 只会被转换为错误信息
"""


from __future__ import annotations
from typing import Any


class ParallelError(Exception):
    """基础异常"""

    def __init__(self, message: str, code: str = "PARALLEL_ERROR", details: dict[str, Any] | None = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class TaskError(ParallelError):
    """任务相关异常"""

    def __init__(self, key: str, message: str, details: dict[str, Any] | None = None):
        self.key = key
        super().__init__(
            message=f"[Task: {key}] {message}",
            code="TASK_ERROR",
            details={"key": key, **(details or {})},
        )


class TaskNotFoundError(TaskError):
    """任务未注册"""

    def __init__(self, key: str):
        super().__init__(key, "任务未注册")
        self.code = "TASK_NOT_FOUND"


class RetryExhaustedError(TaskError):
    """重试次数耗尽"""

    def __init__(self, key: str, retry_count: int, max_retries: int):
        self.retry_count = retry_count
        self.max_retries = max_retries
        super().__init__(
            key,
            f"已达到最大重试次数 ({retry_count}/{max_retries})",
            details={"retry_count": retry_count, "max_retries": max_retries},
        )
        self.code = "RETRY_EXHAUSTED"


class ConfigError(ParallelError):
    """配置相关异常"""

    def __init__(self, config_path: str, message: str):
        self.config_path = config_path
        super().__init__(
            message=f"配置错误 [{config_path}]: {message}",
            code="CONFIG_ERROR",
            details={"config_path": config_path},
        )
