"""
任务注册表

按key维护任务及其执行结果:
- tasks: key -> 任务
- results: key -> 最近一次成功的返回值
- errors: key -> 最近一次失败的错误信息
- failed_tasks: key -> 当前处于失败状态的任务

所有容器由同一把锁保护, 回调本身在锁外执行
"""


from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from threading import RLock
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from parallel_core.schema.models import TaskSnapshot, TaskState

if TYPE_CHECKING:
    from parallel_core.scheduler.executor import TaskResult


@dataclass
class Task:
    """注册的任务"""
    key: str
    callback: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    retry_count: int = 0  # 失败次数, 只增不减
    registered_at: datetime = field(default_factory=datetime.now)


class TaskRegistry:
    """
    任务注册表

    线程安全, 任务一旦注册就不会从tasks中移除
    """

    def __init__(self):
        self._lock = RLock()
        self._tasks: dict[str, Task] = {}
        self._results: dict[str, Any] = {}
        self._errors: dict[str, str] = {}
        self._failed: dict[str, Task] = {}
        self._states: dict[str, TaskState] = {}
        self._last_results: dict[str, "TaskResult"] = {}

    def append(
        self,
        key: str,
        callback: Callable[..., Any],
        args: tuple[Any, ...] = (),
        kwargs: Optional[dict[str, Any]] = None,
    ) -> Task:
        """
        注册任务, 已存在的key会被覆盖

        旧的results/errors记录保留; 若key仍在失败集合中,
        失败记录改为指向新任务, 重试计数随新任务从0开始

        仍在失败集合中的key重新注册后状态保持FAILED_RETRYABLE而不是
        REGISTERED: 重新注册不清除失败记录, 下一轮重试会执行新任务
        """
        task = Task(key=key, callback=callback, args=tuple(args), kwargs=dict(kwargs or {}))
        with self._lock:
            self._tasks[key] = task
            if key in self._failed:
                self._failed[key] = task
                self._states[key] = TaskState.FAILED_RETRYABLE
            else:
                self._states[key] = TaskState.REGISTERED
        return task

    def get(self, key: str) -> Optional[Task]:
        """获取任务"""
        with self._lock:
            return self._tasks.get(key)

    def keys(self) -> list[str]:
        """所有已注册key的快照"""
        with self._lock:
            return list(self._tasks)

    def mark_running(self, key: str) -> None:
        with self._lock:
            self._states[key] = TaskState.RUNNING

    def record_success(self, key: str, result: "TaskResult") -> None:
        """记录成功: 写入结果并移出失败集合"""
        with self._lock:
            self._results[key] = result.value
            self._failed.pop(key, None)
            self._states[key] = TaskState.SUCCEEDED
            self._last_results[key] = result

    def record_failure(self, key: str, task: Task, result: "TaskResult") -> int:
        """
        记录失败: 重试计数加一, 写入错误信息并加入失败集合

        Returns:
            更新后的重试计数
        """
        with self._lock:
            task.retry_count += 1
            self._errors[key] = result.error_message
            self._failed[key] = task
            self._states[key] = TaskState.FAILED_RETRYABLE
            self._last_results[key] = result
            return task.retry_count

    def failed_keys(self) -> list[str]:
        """失败集合key的快照"""
        with self._lock:
            return list(self._failed)

    def get_failed(self, key: str) -> Optional[Task]:
        with self._lock:
            return self._failed.get(key)

    def drop_failed(self, key: str) -> Optional[Task]:
        """重试耗尽, 永久移出失败集合 (任务本身保留)"""
        with self._lock:
            task = self._failed.pop(key, None)
            if task is not None:
                self._states[key] = TaskState.FAILED_TERMINAL
            return task

    def is_failed(self, key: str) -> bool:
        with self._lock:
            return key in self._failed

    def state(self, key: str) -> Optional[TaskState]:
        with self._lock:
            return self._states.get(key)

    def keys_in_state(self, state: TaskState) -> list[str]:
        with self._lock:
            return [key for key, s in self._states.items() if s == state]

    def last_result(self, key: str) -> Optional["TaskResult"]:
        with self._lock:
            return self._last_results.get(key)

    def results_view(self) -> Mapping[str, Any]:
        """成功结果的只读实时视图"""
        return MappingProxyType(self._results)

    def errors_view(self) -> Mapping[str, str]:
        """错误信息的只读实时视图"""
        return MappingProxyType(self._errors)

    def snapshot(self, key: str, max_retries: int) -> Optional[TaskSnapshot]:
        """生成任务状态快照"""
        with self._lock:
            task = self._tasks.get(key)
            if task is None:
                return None
            return TaskSnapshot(
                key=key,
                state=self._states[key],
                retry_count=task.retry_count,
                max_retries=max_retries,
                has_result=key in self._results,
                last_error=self._errors.get(key),
                registered_at=task.registered_at,
            )

    def statistics(self) -> dict[str, Any]:
        """获取统计信息"""
        with self._lock:
            by_state: dict[str, int] = {}
            for state in self._states.values():
                by_state[state.value] = by_state.get(state.value, 0) + 1

            return {
                "total": len(self._tasks),
                "by_state": by_state,
                "results": len(self._results),
                "errors": len(self._errors),
                "failed": len(self._failed),
            }

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._tasks

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)
