"""
统一数据模型定义

对外暴露的状态查询模型使用Pydantic v2定义
"""


from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TaskState(str, Enum):
    """任务状态"""
    REGISTERED = "registered"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED_RETRYABLE = "failed_retryable"  # 仍在失败集合中, 可被重试
    FAILED_TERMINAL = "failed_terminal"  # 重试次数耗尽, 已移出失败集合


class TaskSnapshot(BaseModel):
    """任务状态快照"""
    key: str
    state: TaskState
    retry_count: int = Field(ge=0)
    max_retries: int = Field(ge=0)
    has_result: bool = False
    last_error: Optional[str] = None
    registered_at: datetime

    @property
    def exhausted(self) -> bool:
        return self.state == TaskState.FAILED_TERMINAL

    @property
    def retryable(self) -> bool:
        return self.state == TaskState.FAILED_RETRYABLE
