"""Package logger configuration."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from birthdayflow.core import logger as logger_module
from birthdayflow.core.errors import ConfigError
from birthdayflow.core.logger import ROOT_LOGGER, configure_logging, current_log_path, get_logger, parse_level
from birthdayflow.core.pipeline import Pipeline
from birthdayflow.core.settings import load_settings
from birthdayflow.services.sources import StaticRowSource


@pytest.fixture()
def package_logger(monkeypatch):
    root = logging.getLogger(ROOT_LOGGER)
    saved_handlers = list(root.handlers)
    saved_level = root.level
    for handler in saved_handlers:
        root.removeHandler(handler)
    monkeypatch.setattr(logger_module, "_log_path", None)
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def _file_handlers(root: logging.Logger):
    return [h for h in root.handlers if isinstance(h, RotatingFileHandler)]


def test_level_and_directory_are_applied(package_logger, tmp_path: Path) -> None:
    configure_logging(level="debug", log_dir=tmp_path / "logs")

    get_logger("records").debug("reading row 2")

    assert package_logger.level == logging.DEBUG
    assert current_log_path() == tmp_path / "logs" / "app.log"
    assert "birthdayflow.records: reading row 2" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")


def test_new_directory_moves_the_log_file(package_logger, tmp_path: Path) -> None:
    configure_logging(log_dir=tmp_path / "first")
    configure_logging(log_dir=tmp_path / "second")

    get_logger().info("after the move")

    assert len(_file_handlers(package_logger)) == 1
    assert "after the move" in (tmp_path / "second" / "app.log").read_text(encoding="utf-8")
    assert "after the move" not in (tmp_path / "first" / "app.log").read_text(encoding="utf-8")


def test_level_change_keeps_the_log_file(package_logger, tmp_path: Path) -> None:
    configure_logging(log_dir=tmp_path)
    configure_logging(level=logging.WARNING)

    get_logger().info("hidden")
    get_logger().warning("shown")

    assert current_log_path() == tmp_path / "app.log"
    content = (tmp_path / "app.log").read_text(encoding="utf-8")
    assert "shown" in content
    assert "hidden" not in content


def test_console_follows_current_stdout(package_logger, tmp_path: Path, capsys) -> None:
    configure_logging(log_dir=tmp_path)

    get_logger().info("to the console")

    assert "to the console" in capsys.readouterr().out


def test_get_logger_installs_defaults_once(package_logger, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("BIRTHDAYFLOW_WORK_DIR", str(tmp_path))

    get_logger()
    get_logger("pipeline")

    assert current_log_path() == tmp_path / "logs" / "app.log"
    assert package_logger.level == logging.INFO
    assert len(package_logger.handlers) == 2


def test_pipeline_logs_into_the_configured_work_dir(package_logger, tmp_path: Path) -> None:
    settings = load_settings(env={"BIRTHDAYFLOW_WORK_DIR": str(tmp_path / "work")})

    pipeline = Pipeline(settings=settings, source=StaticRowSource([]))

    assert pipeline.logger.name == "birthdayflow.pipeline"
    assert current_log_path() == tmp_path / "work" / "logs" / "app.log"


def test_parse_level() -> None:
    assert parse_level("warning") == logging.WARNING
    assert parse_level(10) == logging.DEBUG
    with pytest.raises(ConfigError, match="LOUD"):
        parse_level("LOUD")
