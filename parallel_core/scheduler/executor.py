"""
任务执行器

封装单个任务回调的执行, 回调抛出的异常在此处被捕获并转换为结果
"""


from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from parallel_core.logging import TaskLogger
from parallel_core.scheduler.registry import Task


@dataclass
class TaskResult:
    """任务执行结果"""
    key: str
    success: bool
    value: Any = None
    error_message: str = ""
    error_type: str = ""
    retry_count: int = 0  # 本次执行前的失败次数
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def duration_ms(self) -> float:
        if self.completed_at is None:
            return 0
        return (self.completed_at - self.started_at).total_seconds() * 1000


def format_error(exc: BaseException) -> str:
    """异常转错误信息, 空消息时使用异常类名"""
    message = str(exc)
    return message if message else type(exc).__name__


class TaskExecutor:
    """
    任务执行器

    只捕获Exception, KeyboardInterrupt/SystemExit照常向上抛出
    """

    def run(self, task: Task) -> TaskResult:
        """
        执行任务回调

        Args:
            task: 任务对象

        Returns:
            执行结果, 回调异常不会向外传播
        """
        result = TaskResult(
            key=task.key,
            success=False,
            retry_count=task.retry_count,
        )
        task_logger = TaskLogger(task.key)

        try:
            result.value = task.callback(*task.args, **task.kwargs)
            result.success = True
        except Exception as e:
            result.error_message = format_error(e)
            result.error_type = type(e).__name__
            task_logger.debug(f"回调异常 [{task.key}]: {type(e).__name__}: {e}")
        finally:
            result.completed_at = datetime.now()

        return result
