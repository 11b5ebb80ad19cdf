"""
配置中心

统一管理任务管理器配置:
- 调度配置 (scheduler)
- 日志配置 (logging)
"""


from __future__ import annotations
import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from parallel_core.exceptions import ConfigError

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "INFO"
    rotation: str = "10 MB"
    retention: str = "30 days"
    log_dir: str = "logs"


class SchedulerConfig(BaseModel):
    """调度器配置"""
    max_workers: int = Field(default=4, ge=1)
    max_retries: int = Field(default=3, ge=0)
    thread_name_prefix: str = "task_worker_"


class ParallelConfig(BaseSettings):
    """主配置"""

    app_name: str = "parallel-task-manager"
    version: str = "1.0.0"
    env: str = "development"

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)

    model_config = {
        "env_prefix": "PARALLEL_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ParallelConfig":
        """从YAML文件加载配置"""
        config_path = Path(config_path)
        if not config_path.exists():
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(str(config_path), f"YAML解析失败: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigError(str(config_path), "顶层必须是映射")

        return cls(**config_data)

    def get_path(self, relative_path: str) -> Path:
        """获取相对于项目根目录的绝对路径"""
        return PROJECT_ROOT / relative_path

    def get_logs_path(self) -> Path:
        """获取日志目录路径"""
        return self.get_path(self.logging.log_dir)


@lru_cache()
def get_config() -> ParallelConfig:
    """获取配置单例"""
    config_path = os.environ.get("PARALLEL_CONFIG", "configs/parallel.yaml")
    return ParallelConfig.from_yaml(PROJECT_ROOT / config_path)


def reload_config() -> ParallelConfig:
    """重新加载配置"""
    get_config.cache_clear()
    return get_config()
