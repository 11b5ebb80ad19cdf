"""
测试公共fixture
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from parallel_core.config import SchedulerConfig
from parallel_core.logging import logger, setup_logging
from parallel_core.scheduler import TaskManager


@pytest.fixture
def scheduler_config() -> SchedulerConfig:
    return SchedulerConfig(max_workers=4, max_retries=3)


@pytest.fixture
def manager(scheduler_config):
    task_manager = TaskManager(scheduler_config)
    yield task_manager
    task_manager.shutdown(wait=True)


@pytest.fixture
def log_lines():
    """收集日志消息文本"""
    lines: list[str] = []
    handler_id = logger.add(lambda message: lines.append(message.record["message"]), level="DEBUG")
    yield lines
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    setup_logging(console=False, file=False)
