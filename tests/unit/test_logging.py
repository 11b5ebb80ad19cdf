"""
日志单元测试
"""

from parallel_core.logging import TaskLogger, get_logger, logger, setup_logging


class TestSetupLogging:
    """测试日志配置"""

    def test_file_sinks(self, tmp_path):
        """测试写入日志文件"""
        setup_logging(log_dir=tmp_path, console=False)
        get_logger("test").error("写入错误日志")

        assert (tmp_path / "parallel.log").exists()
        assert "写入错误日志" in (tmp_path / "errors.log").read_text(encoding="utf-8")

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        """测试重复配置不会重复输出"""
        setup_logging(log_dir=tmp_path, console=False)
        setup_logging(log_dir=tmp_path, console=False)
        get_logger("test").info("只出现一次")

        content = (tmp_path / "parallel.log").read_text(encoding="utf-8")
        assert content.count("只出现一次") == 1


    def test_keeps_caller_handlers(self):
        """测试配置日志不会移除调用方已添加的handler"""
        messages = []
        handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="INFO")
        try:
            setup_logging(console=False, file=False)
            get_logger("test").info("调用方仍能收到")
        finally:
            logger.remove(handler_id)

        assert messages == ["调用方仍能收到"]


class TestTaskLogger:
    """测试任务日志"""

    def test_binds_task_key(self):
        """测试日志绑定任务key"""
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            TaskLogger("job-1").warning("进度")
        finally:
            logger.remove(handler_id)

        assert records[0]["extra"]["task_key"] == "job-1"
        assert records[0]["message"] == "进度"
