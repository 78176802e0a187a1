"""
Tests for logging setup and configuration utilities.
"""

import logging
from pathlib import Path
from unittest.mock import Mock, patch

from loguru import logger as loguru_logger

from ioc_container.infrastructure.config.models import LoggingConfig
from ioc_container.infrastructure.logging.setup import InterceptHandler, setup_logging


class TestSetupLogging:
    """Test cases for loguru sink configuration."""

    @patch('ioc_container.infrastructure.logging.setup.loguru_logger')
    def test_console_only(self, mock_logger: Mock) -> None:
        config = LoggingConfig(level="DEBUG", console_enabled=True, file_enabled=False)

        setup_logging(config)

        mock_logger.remove.assert_called_once()
        assert mock_logger.add.call_count == 1
        assert mock_logger.add.call_args.kwargs["level"] == "DEBUG"

    @patch('ioc_container.infrastructure.logging.setup.loguru_logger')
    def test_file_sink(self, mock_logger: Mock, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        config = LoggingConfig(
            console_enabled=False, file_enabled=True, log_directory=str(log_dir))

        setup_logging(config)

        assert log_dir.is_dir()
        sink = mock_logger.add.call_args.args[0]
        assert sink == log_dir / "ioc.log"
        assert mock_logger.add.call_args.kwargs["rotation"] == config.max_file_size
        assert mock_logger.add.call_args.kwargs["retention"] == config.backup_count

    @patch('ioc_container.infrastructure.logging.setup.loguru_logger')
    def test_installs_intercept_handler(self, mock_logger: Mock) -> None:
        setup_logging(LoggingConfig(console_enabled=False))

        handlers = logging.getLogger().handlers
        assert any(isinstance(handler, InterceptHandler) for handler in handlers)


class TestInterceptHandler:
    """Test cases for routing standard library records into loguru."""

    def test_records_reach_loguru(self) -> None:
        messages = []
        sink_id = loguru_logger.add(messages.append, format="{level}:{message}")
        std_logger = logging.getLogger("ioc_container.tests.intercept")
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(logging.DEBUG)

        try:
            std_logger.warning("resolved %s", "My/Redis")
        finally:
            loguru_logger.remove(sink_id)

        assert any("WARNING:resolved My/Redis" in str(message) for message in messages)

    def test_custom_level_numbers(self) -> None:
        messages = []
        sink_id = loguru_logger.add(messages.append, format="{message}")
        handler = InterceptHandler()
        record = logging.LogRecord("x", 25, __file__, 1, "custom level", None, None)
        record.levelname = "NOT_A_LOGURU_LEVEL"

        try:
            handler.emit(record)
        finally:
            loguru_logger.remove(sink_id)

        assert any("custom level" in str(message) for message in messages)
