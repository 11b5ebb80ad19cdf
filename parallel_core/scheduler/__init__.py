"""
任务调度模块

负责:
- 任务注册和管理
- 任务并发派发
- 执行结果记录
- 任务重试机制
"""


from __future__ import annotations
from parallel_core.scheduler.engine import TaskManager, create_task_manager
from parallel_core.scheduler.executor import TaskExecutor, TaskResult
from parallel_core.scheduler.registry import Task, TaskRegistry

__all__ = [
    "Task",
    "TaskExecutor",
    "TaskManager",
    "TaskRegistry",
    "TaskResult",
    "create_task_manager",
]
