import json
import logging

from apirunner.core import logging_config, request_context


def _record(**extra):
    record = logging.LogRecord(
        name="test_logger",
        level=logging.INFO,
        pathname="test_path.py",
        lineno=10,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_custom_json_formatter_includes_request_id():
    """Ensure the formatter includes the RequestID from context."""
    req_id = request_context.generate_request_id()

    log_json = json.loads(logging_config.CustomJsonFormatter().format(_record()))

    assert log_json["message"] == "Test message"
    assert log_json["level"] == "INFO"
    assert log_json["logger"] == "test_logger"
    assert log_json["request_id"] == req_id


def test_custom_json_formatter_includes_extra_fields():
    log_json = json.loads(
        logging_config.CustomJsonFormatter().format(_record(status=201, operation_id="listPets"))
    )

    assert log_json["status"] == 201
    assert log_json["operation_id"] == "listPets"
    assert "request_id" not in log_json


def test_setup_logging_substitutes_log_level(tmp_path, monkeypatch):
    config_file = tmp_path / "log.yaml"
    config_file.write_text(
        "version: 1\n"
        "disable_existing_loggers: false\n"
        "loggers:\n"
        "  apirunner.test:\n"
        "    level: ${LOG_LEVEL}\n"
    )
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    logging_config.setup_logging(str(config_file))

    assert logging.getLogger("apirunner.test").level == logging.DEBUG
