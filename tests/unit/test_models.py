"""
状态模型与异常单元测试
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from parallel_core.exceptions import ParallelError, RetryExhaustedError, TaskError, TaskNotFoundError
from parallel_core.schema.models import TaskSnapshot, TaskState


class TestTaskSnapshot:
    """测试状态快照"""

    def test_flags(self):
        snapshot = TaskSnapshot(
            key="a",
            state=TaskState.FAILED_TERMINAL,
            retry_count=4,
            max_retries=3,
            registered_at=datetime.now(),
        )
        assert snapshot.exhausted
        assert not snapshot.retryable

    def test_negative_retry_count(self):
        with pytest.raises(ValidationError):
            TaskSnapshot(
                key="a",
                state=TaskState.REGISTERED,
                retry_count=-1,
                max_retries=3,
                registered_at=datetime.now(),
            )


class TestExceptions:
    """测试异常层级"""

    def test_task_not_found(self):
        error = TaskNotFoundError("zzz")
        assert isinstance(error, TaskError)
        assert isinstance(error, ParallelError)
        assert error.to_dict() == {
            "error": "TASK_NOT_FOUND",
            "message": "[Task: zzz] 任务未注册",
            "details": {"key": "zzz"},
        }

    def test_retry_exhausted(self):
        error = RetryExhaustedError("b", 4, 3)
        assert error.code == "RETRY_EXHAUSTED"
        assert error.details == {"key": "b", "retry_count": 4, "max_retries": 3}
