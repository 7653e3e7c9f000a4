"""Shared test fixtures."""

import logging

import pytest

from semver_calc.logger import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by the CLI between tests."""
    yield
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
