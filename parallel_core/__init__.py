"""
并行任务管理器

按key注册相互独立的任务, 并发执行, 记录成功/失败结果,
并对失败任务进行有限次自动重试

模块列表:
- scheduler: 注册表/执行器/调度引擎
- schema: 状态模型
- config: 配置中心
- logging: 日志
- exceptions: 异常定义
"""

from __future__ import annotations

# 版本
__version__ = "1.0.0"

from parallel_core.exceptions import (
    ParallelError,
    TaskError,
    TaskNotFoundError,
    RetryExhaustedError,
    ConfigError,
)
from parallel_core.scheduler import (
    Task,
    TaskExecutor,
    TaskManager,
    TaskRegistry,
    TaskResult,
    create_task_manager,
)
from parallel_core.schema import TaskSnapshot, TaskState

__all__ = [
    # 调度
    "Task",
    "TaskExecutor",
    "TaskManager",
    "TaskRegistry",
    "TaskResult",
    "create_task_manager",

    # 状态模型
    "TaskSnapshot",
    "TaskState",

    # 异常
    "ParallelError",
    "TaskError",
    "TaskNotFoundError",
    "RetryExhaustedError",
    "ConfigError",
]
