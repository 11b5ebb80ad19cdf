"""
演示脚本集成测试
"""

import run


class TestRunDemo:
    """测试演示流程"""

    def test_resource_appears(self, tmp_path):
        """测试资源就绪后重试成功"""
        assert run.main(["--log-dir", str(tmp_path)]) == 0
        assert "已达到最大重试次数" not in (tmp_path / "parallel.log").read_text(encoding="utf-8")

    def test_resource_never_appears(self, tmp_path):
        """测试资源始终不就绪时返回失败"""
        assert run.main(["--log-dir", str(tmp_path), "--no-resource", "--passes", "5"]) == 1
        assert "已达到最大重试次数" in (tmp_path / "errors.log").read_text(encoding="utf-8")
