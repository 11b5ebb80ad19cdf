#!/usr/bin/env python3
"""
演示启动脚本

用法:
    python run.py                  # 运行演示
    python run.py --debug          # 调试日志
    python run.py --passes 5       # 最多执行5轮重试

演示流程:
    1. 注册两个任务: 一个依赖尚未就绪的外部资源, 一个直接成功
    2. 并发派发全部任务并等待完成
    3. 外部资源就绪后执行重试, 直到失败集合清空或达到轮数上限
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

# 添加项目根目录到路径
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))


class Workspace:
    """演示用的外部资源容器"""

    def __init__(self):
        self.parts: set[str] = set()

    def destroy(self, name: str) -> str:
        if name not in self.parts:
            raise LookupError(f"{name} is not a valid member of Workspace")
        self.parts.discard(name)
        return name


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="并行任务管理器演示")
    parser.add_argument("--debug", action="store_true", help="调试模式")
    parser.add_argument("--passes", type=int, default=3, help="最多重试轮数")
    parser.add_argument("--log-dir", type=Path, default=None, help="日志目录")
    parser.add_argument("--no-resource", action="store_true", help="外部资源始终不就绪")

    args = parser.parse_args(argv)

    # 初始化日志
    from parallel_core.logging import setup_logging
    setup_logging(log_dir=args.log_dir, log_level="DEBUG" if args.debug else "INFO")

    from parallel_core.logging import get_logger
    logger = get_logger(__name__)

    from parallel_core import TaskState, create_task_manager

    workspace = Workspace()

    with create_task_manager() as manager:
        manager.append("task1", workspace.destroy, "InsertedPart")
        manager.append("task2", lambda: "task ran with no problems")
        manager.execute_all()
        manager.wait()

        if not manager.fetch_errors():
            logger.info("全部任务首次执行成功")

        if not args.no_resource:
            workspace.parts.add("InsertedPart")

        for _ in range(args.passes):
            if not any(manager.get_status(key).retryable for key in ("task1", "task2")):
                break
            manager.retry_failed_tasks()

        failing = []
        for key in ("task1", "task2"):
            status = manager.get_status(key)
            logger.info(f"  {key}: {status.state.value} (失败 {status.retry_count} 次)")
            if status.state != TaskState.SUCCEEDED:
                failing.append(key)

    if failing:
        logger.error(f"仍未成功的任务: {', '.join(failing)}")
        return 1

    logger.info("所有任务已完成")
    return 0


if __name__ == "__main__":
    sys.exit(main())
