"""
任务引擎

核心调度引擎,负责:
- 按key注册任务
- 单任务执行与结果记录
- 线程池并发派发
- 失败任务的有限次重试
"""


from __future__ import annotations
from concurrent.futures import ALL_COMPLETED, Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from threading import Lock
from typing import Any, Callable, Iterable, Mapping, Optional

from parallel_core.config import SchedulerConfig, get_config
from parallel_core.exceptions import RetryExhaustedError, TaskNotFoundError
from parallel_core.logging import get_logger
from parallel_core.scheduler.executor import TaskExecutor, TaskResult
from parallel_core.scheduler.registry import TaskRegistry
from parallel_core.schema.models import TaskSnapshot, TaskState

logger = get_logger(__name__)


class TaskManager:
    """
    任务管理器

    execute_all 非阻塞, 通过线程池派发并立即返回每个key的Future;
    retry_failed_tasks 阻塞, 在调用线程中逐个重试失败任务
    """

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or get_config().scheduler
        self.max_retries = self.config.max_retries

        self._registry = TaskRegistry()
        self._executor = TaskExecutor()
        self._pool = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix=self.config.thread_name_prefix,
        )
        self._in_flight: set[Future] = set()
        self._in_flight_lock = Lock()
        self._callbacks: dict[str, list[Callable]] = {
            "on_start": [],
            "on_complete": [],
            "on_error": [],
            "on_exhausted": [],
        }

    def register_callback(self, event: str, callback: Callable) -> None:
        """注册回调"""
        if event not in self._callbacks:
            raise ValueError(f"未知事件: {event}")
        self._callbacks[event].append(callback)

    def _emit(self, event: str, *args, **kwargs) -> None:
        """触发回调"""
        for callback in self._callbacks.get(event, []):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"回调执行失败 [{event}]: {e}")

    def append(self, key: str, callback: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        """
        注册任务

        参数在注册时被捕获, 之后不会重新读取; 重复注册同一key会覆盖旧任务
        """
        self._registry.append(key, callback, args, kwargs)

    def execute(self, key: str) -> bool:
        """
        同步执行单个任务

        Args:
            key: 任务key

        Returns:
            是否执行成功

        Raises:
            TaskNotFoundError: key未注册, 不做任何状态变更
        """
        task = self._registry.get(key)
        if task is None:
            raise TaskNotFoundError(key)

        self._registry.mark_running(key)
        self._emit("on_start", key)

        result = self._executor.run(task)

        if result.success:
            self._registry.record_success(key, result)
            logger.info(f"成功执行任务 -> '{key}' [{task.retry_count}/{self.max_retries}]")
        else:
            retry_count = self._registry.record_failure(key, task, result)
            # 显示的是记录本次失败之前的次数
            logger.warning(f"执行任务失败 -> '{key}' [{retry_count - 1}/{self.max_retries}]")
            self._emit("on_error", key, result.error_message)

        self._emit("on_complete", key, result)
        return result.success

    def execute_all(self, exclude_keys: Optional[Iterable[str]] = None) -> dict[str, Future]:
        """
        并发派发所有未排除的任务

        立即返回, 不等待任务完成

        Args:
            exclude_keys: 不派发的key

        Returns:
            key -> Future[bool], 完成时结果为execute的返回值
        """
        excluded = set(exclude_keys or ())
        futures: dict[str, Future] = {}

        for key in self._registry.keys():
            if key in excluded:
                continue
            futures[key] = self._submit(key)

        logger.debug(f"已派发 {len(futures)} 个任务, 排除 {len(excluded)} 个")
        return futures

    def _submit(self, key: str) -> Future:
        future = self._pool.submit(self.execute, key)
        with self._in_flight_lock:
            self._in_flight.add(future)
        future.add_done_callback(self._discard_future)
        return future

    def _discard_future(self, future: Future) -> None:
        with self._in_flight_lock:
            self._in_flight.discard(future)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        等待所有已派发任务完成

        Returns:
            超时前是否全部完成
        """
        with self._in_flight_lock:
            pending = set(self._in_flight)
        if not pending:
            return True

        _, not_done = wait_futures(pending, timeout=timeout, return_when=ALL_COMPLETED)
        return not not_done

    def retry_failed_tasks(self) -> None:
        """
        重试所有失败任务

        对失败集合取快照后逐个同步执行; 失败次数超过上限的任务
        被永久移出失败集合 (任务本身保留)
        """
        keys = self._registry.failed_keys()
        if not keys:
            return

        for key in keys:
            task = self._registry.get_failed(key)
            if task is None:
                continue

            if task.retry_count > self.max_retries:
                self._registry.drop_failed(key)
                logger.error(f"任务 -> '{key}' 已达到最大重试次数, 终止任务...")
                self._emit(
                    "on_exhausted",
                    key,
                    RetryExhaustedError(key, task.retry_count, self.max_retries),
                )
                continue

            self.execute(key)

    def fetch_results(self) -> Mapping[str, Any]:
        """所有成功结果 (只读实时视图)"""
        return self._registry.results_view()

    def fetch_errors(self) -> Mapping[str, str]:
        """所有错误信息 (只读实时视图, 每个key保留最近一次)"""
        return self._registry.errors_view()

    def get_status(self, key: str) -> TaskSnapshot:
        """获取任务状态快照"""
        snapshot = self._registry.snapshot(key, self.max_retries)
        if snapshot is None:
            raise TaskNotFoundError(key)
        return snapshot

    def get_task_result(self, key: str) -> Optional[TaskResult]:
        """获取最近一次执行结果"""
        return self._registry.last_result(key)

    def exhausted_keys(self) -> list[str]:
        """重试次数耗尽的任务"""
        return self._registry.keys_in_state(TaskState.FAILED_TERMINAL)

    def running_keys(self) -> list[str]:
        """正在运行的任务"""
        return self._registry.keys_in_state(TaskState.RUNNING)

    def get_statistics(self) -> dict[str, Any]:
        """获取统计信息"""
        stats = self._registry.statistics()
        with self._in_flight_lock:
            stats["in_flight"] = len(self._in_flight)
        stats["max_retries"] = self.max_retries
        return stats

    def __contains__(self, key: object) -> bool:
        return key in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    def shutdown(self, wait: bool = True) -> None:
        """关闭任务管理器"""
        self._pool.shutdown(wait=wait)
        logger.info("任务管理器已关闭")

    def __enter__(self) -> "TaskManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)


def create_task_manager(config: Optional[SchedulerConfig] = None) -> TaskManager:
    """创建新的任务管理器, 所有容器为空"""
    return TaskManager(config)
