"""
数据模型模块
"""


from __future__ import annotations
from parallel_core.schema.models import TaskSnapshot, TaskState

__all__ = [
    "TaskSnapshot",
    "TaskState",
]
