"""
Tests for core.logging.
"""

import io
import logging

from core.logging import ROOT_LOGGER_NAME, configure_logging


class TestConfigureLogging:
    def teardown_method(self):
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)

    def test_child_loggers_reach_stream(self):
        stream = io.StringIO()
        configure_logging("INFO", stream=stream)
        logging.getLogger("nawiri.ledger").info("add_sale committed: s1")
        assert "nawiri.ledger: add_sale committed: s1" in stream.getvalue()

    def test_idempotent(self):
        configure_logging("INFO", stream=io.StringIO())
        configure_logging("DEBUG", stream=io.StringIO())
        logger = logging.getLogger(ROOT_LOGGER_NAME)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG

    def test_level_filters(self):
        stream = io.StringIO()
        configure_logging("WARNING", stream=stream)
        logging.getLogger("nawiri.ledger").info("hidden")
        logging.getLogger("nawiri.ledger").warning("shown")
        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()
