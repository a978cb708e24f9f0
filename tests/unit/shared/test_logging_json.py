import json
import logging
import sys
from datetime import datetime
from unittest.mock import MagicMock, patch

from shared.logging.json import (
    REDACTED,
    CustomJsonFormatter,
    SensitiveDataFilter,
    configure_logging,
)


def _record(msg="console_listening", level=logging.INFO, exc_info=None, args=()):
    return logging.LogRecord(
        name="console.server",
        level=level,
        pathname="/srv/console/server.py",
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


class TestSensitiveDataFilter:
    def test_filter_redacts_matching_keys(self):
        sdf = SensitiveDataFilter(["password", "token"])

        filtered = sdf.filter(
            {"peer": "10.0.0.1", "api_token": "abc", "Password": "x", "command": "stats"}
        )

        assert filtered["peer"] == "10.0.0.1"
        assert filtered["api_token"] == REDACTED
        assert filtered["Password"] == REDACTED
        assert filtered["command"] == "stats"

    def test_filter_handles_nested_objects(self):
        sdf = SensitiveDataFilter(["secret"])

        filtered = sdf.filter({"outer": {"client_secret": "s", "n": 1}})

        assert filtered["outer"] == {"client_secret": REDACTED, "n": 1}

    def test_filter_with_empty_patterns(self):
        data = {"password": "secret", "token": "abc123"}
        assert SensitiveDataFilter([]).filter(data) == data


class TestCustomJsonFormatter:
    @patch("socket.gethostname", return_value="test-host")
    @patch("os.getpid", return_value=12345)
    def test_format_basic_record(self, mock_getpid, mock_gethostname):
        formatter = CustomJsonFormatter(
            service="console", environment="test", redaction_patterns=[]
        )

        parsed = json.loads(formatter.format(_record("commands run: %d", args=(3,))))

        assert parsed["service"] == "console"
        assert parsed["hostname"] == "test-host"
        assert parsed["pid"] == 12345
        assert parsed["environment"] == "test"
        assert parsed["name"] == "console.server"
        assert parsed["levelname"] == "INFO"
        assert parsed["message"] == "commands run: 3"
        assert "args" not in parsed
        datetime.fromisoformat(parsed["timestamp"])

    def test_format_includes_extra_fields(self):
        formatter = CustomJsonFormatter("console", "test", ["cookie"])
        record = _record()
        record.peer = "127.0.0.1:5000"
        record.cookie = "abc"

        parsed = json.loads(formatter.format(record))

        assert parsed["peer"] == "127.0.0.1:5000"
        assert parsed["cookie"] == REDACTED

    def test_format_record_with_exception(self):
        formatter = CustomJsonFormatter("console", "test", [])
        try:
            raise ConnectionResetError("peer went away")
        except ConnectionResetError:
            record = _record("io_error", logging.ERROR, exc_info=sys.exc_info())

        parsed = json.loads(formatter.format(record))

        assert parsed["exception"]["type"] == "ConnectionResetError"
        assert parsed["exception"]["message"] == "peer went away"
        assert isinstance(parsed["exception"]["stack"], list)


class TestConfigureLogging:
    def test_installs_single_json_handler(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            result = configure_logging(
                service="console",
                environment="test",
                level="DEBUG",
                redaction_patterns=[],
            )

        assert result is mock_logger
        assert len(mock_logger.handlers) == 1
        assert isinstance(mock_logger.handlers[0].formatter, CustomJsonFormatter)
        mock_logger.setLevel.assert_called_with(logging.DEBUG)

    def test_invalid_level_falls_back_to_info(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            configure_logging("console", "test", "NOPE", [])

        mock_logger.setLevel.assert_called_with(logging.INFO)

    def test_text_output(self):
        with patch("logging.getLogger") as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            configure_logging("console", "development", "INFO", [], json_output=False)

        formatter = mock_logger.handlers[0].formatter
        assert not isinstance(formatter, CustomJsonFormatter)
        assert isinstance(formatter, logging.Formatter)
