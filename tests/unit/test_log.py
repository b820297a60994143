"""Unit tests for log.py"""

from loguru import logger

from dfmark.log import configure_logging


def test_configure_logging_filters_below_level(capsys):
    configure_logging("WARNING")
    logger.info("quiet")
    logger.warning("loud")
    err = capsys.readouterr().err
    assert "loud" in err
    assert "quiet" not in err


def test_configure_logging_replaces_handlers(capsys):
    configure_logging("DEBUG")
    configure_logging("DEBUG")
    logger.debug("once")
    assert capsys.readouterr().err.count("once") == 1
