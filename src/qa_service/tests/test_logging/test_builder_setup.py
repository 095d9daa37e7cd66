# src/qa_service/tests/test_logging/test_builder_setup.py
import logging
from pathlib import Path

from qa_service.core.logging.builder import make_dict_config, setup_logging


# Minimal Settings-like object, only the attributes the builder reads
class DummySettings:
    LOG_FORMAT = "json"
    LOG_LEVEL = "INFO"
    LOG_TO_STDOUT = False
    LOG_DIR = None  # set per test
    LOG_MAX_BYTES = 1000
    LOG_BACKUP_COUNT = 1
    ENV = "development"
    ENABLE_SQL_LOGGING = False


def test_make_dict_config_contains_file_handlers(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"] == str(Path(tmp_path) / "qa_service.log")
    assert "json" in cfg["formatters"]


def test_stdout_only_uses_error_console(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    settings.LOG_TO_STDOUT = True
    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "error_console"}


def test_sql_logging_toggle(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    assert make_dict_config(settings)["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"

    settings.ENABLE_SQL_LOGGING = True
    assert make_dict_config(settings)["loggers"]["sqlalchemy.engine"]["level"] == "DEBUG"


def test_every_handler_redacts_and_tags_request_id(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path
    for handler in make_dict_config(settings)["handlers"].values():
        assert handler["filters"] == ["request_id", "redact"]


def test_setup_logging_creates_log_dir(tmp_path):
    settings = DummySettings()
    settings.LOG_DIR = tmp_path / "logs"
    assert not settings.LOG_DIR.exists()

    setup_logging(settings)

    assert settings.LOG_DIR.exists()
    assert logging.getLogger().handlers
