"""Tests for settings, logging setup and application wiring."""

import logging

import pytest

from tasktrack.bootstrap import create_app
from tasktrack.config import DEFAULT_DATA_DIR, Settings
from tasktrack.core.exceptions import ConfigurationError
from tasktrack.logging_setup import _ConsoleNoiseFilter, setup_logging


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("TASKTRACK_HOME")
    settings = Settings.from_env()

    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.log_level == "WARNING"
    assert settings.log_file == DEFAULT_DATA_DIR / "tasktrack.log"
    assert settings.sql_echo is False


def test_settings_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("TASKTRACK_LOG_LEVEL", " debug ")
    monkeypatch.setenv("TASKTRACK_SQL_ECHO", "yes")
    monkeypatch.setenv("TASKTRACK_LOG_FILE", str(tmp_path / "logs" / "app.log"))

    settings = Settings.from_env()

    assert settings.data_dir == tmp_path
    assert settings.log_level == "DEBUG"
    assert settings.sql_echo is True
    assert settings.log_file == tmp_path / "logs" / "app.log"


def test_blank_log_level_falls_back(monkeypatch):
    monkeypatch.setenv("TASKTRACK_LOG_LEVEL", "  ")
    assert Settings.from_env().log_level == "WARNING"


def record(name, level):
    return logging.LogRecord(name, level, __file__, 1, "message", None, None)


def test_console_filter_quiets_third_party_loggers():
    noise = _ConsoleNoiseFilter()
    assert noise.filter(record("tasktrack.core.repository", logging.DEBUG))
    assert noise.filter(record("tasktrack", logging.INFO))
    assert not noise.filter(record("sqlalchemy.engine", logging.INFO))
    assert not noise.filter(record("tasktrackextra", logging.INFO))
    assert noise.filter(record("sqlalchemy.pool", logging.ERROR))


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    logging.captureWarnings(False)


def test_setup_logging_writes_debug_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "tasktrack.log"
    setup_logging("info", log_file)

    root = restore_root_logger
    assert len(root.handlers) == 2
    console_handler, file_handler = root.handlers
    assert console_handler.level == logging.INFO
    assert file_handler.level == logging.DEBUG

    logging.getLogger("tasktrack.test").debug("written to file only")
    file_handler.flush()
    assert "written to file only" in log_file.read_text(encoding="utf-8")


def test_setup_logging_unknown_level_defaults_to_warning(restore_root_logger):
    setup_logging("chatty")
    assert restore_root_logger.handlers[0].level == logging.WARNING


def test_create_app_wires_local_store(tmp_path):
    settings = Settings(
        data_dir=tmp_path,
        log_level="WARNING",
        log_file=tmp_path / "tasktrack.log",
        sql_echo=False,
    )
    context = create_app(settings, environ={}, configure_logging=False)
    try:
        assert context.datastore.source == "local-default"
        assert context.workflow.store is context.store
        assert (tmp_path / "tasktrack.db").exists()
    finally:
        context.close()


def test_create_app_with_unusable_datastore(tmp_path):
    settings = Settings(
        data_dir=tmp_path,
        log_level="WARNING",
        log_file=tmp_path / "tasktrack.log",
        sql_echo=False,
    )
    with pytest.raises(ConfigurationError):
        create_app(
            settings,
            environ={"TASKTRACK_SQLALCHEMY_URL": "postgresql+nosuchdriver://db.example.com/app"},
            configure_logging=False,
        )
