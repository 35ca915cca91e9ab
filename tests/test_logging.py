"""Tests for the hrefcheck logger hierarchy."""

import logging

from hrefcheck.logging import configure_logging, get_logger


def test_get_logger_nests_under_package():
    assert get_logger("links.stream").name == "hrefcheck.links.stream"
    assert get_logger().name == "hrefcheck"


def test_configure_logging_levels():
    assert configure_logging(verbose=True).level == logging.DEBUG
    assert configure_logging(level="info").level == logging.INFO
    assert configure_logging(level="nonsense").level == logging.WARNING
    assert configure_logging().level == logging.WARNING


def test_configure_logging_replaces_handler():
    configure_logging()
    logger = configure_logging(level="DEBUG")

    assert len(logger.handlers) == 1
    assert logger.propagate is False
