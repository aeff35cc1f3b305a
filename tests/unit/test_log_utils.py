"""
日志系统单元测试
遵循项目测试规范：快速执行，无外部依赖
"""

import logging
from unittest.mock import patch

import pytest

from filegate.core.log_messages import LogMessages, log_messages
from filegate.core.log_utils import UnifiedLogger, get_logger, setup_logging


@pytest.mark.unit
@pytest.mark.logging
class TestUnifiedLogger:
    """UnifiedLogger 单元测试类"""

    def setup_method(self):
        self.unified_logger = UnifiedLogger("test_gateway")

    def test_init(self):
        """测试初始化包装标准 logger"""
        assert self.unified_logger.name == "test_gateway"
        assert isinstance(self.unified_logger.logger, logging.Logger)

    def test_context_becomes_extra(self):
        """测试关键字上下文写入 extra"""
        with patch.object(self.unified_logger.logger, 'info') as mock_info:
            self.unified_logger.info(log_messages.FILE_UPLOAD_SUCCESS, key="files/a.pdf", size=3)

        args, kwargs = mock_info.call_args
        assert args[0] == "文件上传成功"
        assert kwargs['extra']['key'] == "files/a.pdf"
        assert kwargs['extra']['size'] == 3
        assert kwargs['extra']['log_module'] == "test_gateway"

    def test_template_formatting(self):
        """测试提供参数时格式化模板"""
        with patch.object(self.unified_logger.logger, 'info') as mock_info:
            self.unified_logger.info(log_messages.BATCH_UPLOAD_DONE, succeeded=2, failed=1)

        assert mock_info.call_args[0][0] == "批量上传完成: 2 个成功, 1 个失败"

    def test_preformatted_message_with_braces(self):
        """测试已格式化且包含字典的消息不做二次格式化"""
        with patch.object(self.unified_logger.logger, 'warning') as mock_warning:
            failed = {"b.txt": "扩展名不被允许"}
            self.unified_logger.warning(f"部分文件失败: {failed}", total=3)

        assert "b.txt" in mock_warning.call_args[0][0]

    def test_missing_template_parameter(self):
        """测试模板参数缺失时使用原始消息"""
        with patch.object(self.unified_logger.logger, 'info') as mock_info:
            self.unified_logger.info(log_messages.BATCH_UPLOAD_START, key="a")

        assert mock_info.call_args[0][0] == log_messages.BATCH_UPLOAD_START

    def test_reserved_record_keys_prefixed(self):
        """测试与 LogRecord 属性同名的上下文键加前缀"""
        with patch.object(self.unified_logger.logger, 'info') as mock_info:
            self.unified_logger.info("上下文测试", filename="a.pdf", module="gateway")

        extra = mock_info.call_args[1]['extra']
        assert extra['ctx_filename'] == "a.pdf"
        assert extra['ctx_module'] == "gateway"
        assert 'filename' not in extra

    def test_reserved_keys_emit_without_error(self, caplog):
        """测试保留键不会导致真实日志记录失败"""
        with caplog.at_level(logging.INFO, logger="test_gateway"):
            self.unified_logger.info("记录保留键", filename="a.pdf", message="x")

        assert "记录保留键" in caplog.text

    def test_error_with_exception(self):
        """测试记录带异常的错误日志"""
        with patch.object(self.unified_logger.logger, 'error') as mock_error:
            error = OSError("磁盘读取失败")
            self.unified_logger.error(log_messages.FILE_UPLOAD_FAILED, exception=error, file_name="a.pdf")

        kwargs = mock_error.call_args[1]
        assert kwargs['extra']['exception_type'] == 'OSError'
        assert kwargs['extra']['exception_message'] == '磁盘读取失败'
        assert kwargs['exc_info'] is error

    def test_error_without_exception(self):
        """测试记录不带异常的错误日志"""
        with patch.object(self.unified_logger.logger, 'error') as mock_error:
            self.unified_logger.error("错误消息")

        assert 'exc_info' not in mock_error.call_args[1]

    @patch('filegate.core.log_utils.settings')
    def test_debug_when_debug_enabled(self, mock_settings):
        """测试在调试模式开启时记录调试日志"""
        mock_settings.app_debug = True

        with patch.object(self.unified_logger.logger, 'debug') as mock_debug:
            self.unified_logger.debug("调试消息")

        mock_debug.assert_called_once()

    @patch('filegate.core.log_utils.settings')
    def test_debug_when_debug_disabled(self, mock_settings):
        """测试在调试模式关闭时不记录调试日志"""
        mock_settings.app_debug = False

        with patch.object(self.unified_logger.logger, 'debug') as mock_debug:
            self.unified_logger.debug("调试消息")

        mock_debug.assert_not_called()

    def test_critical(self):
        """测试记录严重错误日志"""
        with patch.object(self.unified_logger.logger, 'critical') as mock_critical:
            self.unified_logger.critical("存储服务不可用")

        mock_critical.assert_called_once()


@pytest.mark.unit
@pytest.mark.logging
class TestGetLogger:
    """测试 get_logger 工厂函数"""

    def test_returns_cached_instance(self):
        """测试相同名称返回同一实例"""
        assert get_logger("filegate.test") is get_logger("filegate.test")

    def test_different_names(self):
        """测试不同名称返回不同实例"""
        first = get_logger("filegate.first")
        second = get_logger("filegate.second")

        assert first is not second
        assert isinstance(first, UnifiedLogger)


@pytest.mark.unit
@pytest.mark.logging
class TestLogMessages:
    """测试 LogMessages 类"""

    def test_format_message(self):
        """测试消息格式化"""
        result = LogMessages.format_message(LogMessages.BATCH_DELETE_DONE, deleted=4, failed=0)

        assert result == "批量删除完成: 4 个成功, 0 个失败"

    def test_get_structured_data(self):
        """测试获取结构化数据"""
        assert LogMessages.get_structured_data(key="a", size=1) == {"key": "a", "size": 1}


@pytest.mark.unit
@pytest.mark.logging
class TestSetupLogging:
    """测试全局日志配置"""

    def setup_method(self):
        self.root_logger = logging.getLogger()
        self.saved_handlers = self.root_logger.handlers[:]
        self.saved_level = self.root_logger.level

    def teardown_method(self):
        for handler in self.root_logger.handlers[:]:
            self.root_logger.removeHandler(handler)
            handler.close()
        for handler in self.saved_handlers:
            self.root_logger.addHandler(handler)
        self.root_logger.setLevel(self.saved_level)

    @patch('filegate.core.log_utils.settings')
    def test_console_only(self, mock_settings):
        """测试只配置控制台输出"""
        mock_settings.app_debug = False
        mock_settings.log_level = "warning"
        mock_settings.log_format = "%(levelname)s %(message)s"

        setup_logging(log_to_file=False)

        assert self.root_logger.level == logging.WARNING
        assert len(self.root_logger.handlers) == 1
        assert logging.getLogger("qcloud_cos").level == logging.WARNING

    @patch('filegate.core.log_utils.settings')
    def test_with_log_file(self, mock_settings, tmp_path):
        """测试同时写入日志文件"""
        log_file = tmp_path / "log" / "filegate.log"
        mock_settings.app_debug = True
        mock_settings.log_format = "%(levelname)s %(message)s"
        mock_settings.absolute_log_file = str(log_file)

        setup_logging(log_to_file=True)

        assert self.root_logger.level == logging.DEBUG
        assert len(self.root_logger.handlers) == 2
        assert log_file.parent.exists()
