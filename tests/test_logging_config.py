import logging

from meshtidy import config
from meshtidy.logging_config import setup_logging


def test_setup_logging_defaults_to_configured_level():
    setup_logging()
    logger = logging.getLogger("meshtidy")
    assert logger.level == config.LOG_LEVEL
    assert len(logger.handlers) == 1


def test_setup_logging_replaces_old_handlers(tmp_path):
    log_file = tmp_path / "meshtidy.log"
    setup_logging(level=logging.DEBUG)
    setup_logging(level=logging.WARNING, log_file=str(log_file))

    logger = logging.getLogger("meshtidy")
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 2
    logging.getLogger("meshtidy.test").warning("written to file")
    for handler in logger.handlers:
        handler.flush()
    assert "written to file" in log_file.read_text(encoding="utf-8")
    for handler in logger.handlers:
        handler.close()


def test_log_level_comes_from_the_environment(monkeypatch):
    monkeypatch.setenv("MESHTIDY_LOG_LEVEL", "debug")
    assert config.get_log_level() == logging.DEBUG
    monkeypatch.setenv("MESHTIDY_LOG_LEVEL", "15")
    assert config.get_log_level() == 15
    monkeypatch.setenv("MESHTIDY_LOG_LEVEL", "loud")
    assert config.get_log_level(default=logging.ERROR) == logging.ERROR
    monkeypatch.delenv("MESHTIDY_LOG_LEVEL")
    assert config.get_log_level() == logging.INFO
