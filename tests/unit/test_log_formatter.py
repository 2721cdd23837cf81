##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Tests for the `log_formatter.py` module.
"""

import logging

import pytest
from pytest_mock import MockerFixture

from firelite.log_formatter import FORMATS, setup_logging


@pytest.fixture
def isolated_logger() -> logging.Logger:
    """
    A logger that isn't shared with the rest of the test suite.

    Yields:
        The logger. Its handlers are removed on teardown.
    """
    logger = logging.getLogger("firelite_test_log_formatter")
    yield logger
    logger.handlers.clear()


def test_setup_logging_without_colors(mocker: MockerFixture, isolated_logger: logging.Logger):
    """
    Test that a plain stdout handler is attached at the requested level.

    Args:
        mocker: PyTest mocker fixture.
        isolated_logger: A logger private to this test.
    """
    mock_install = mocker.patch("firelite.log_formatter.coloredlogs.install")

    setup_logging(isolated_logger, log_level="warning", colors=False)

    assert isolated_logger.level == logging.WARNING
    assert not isolated_logger.propagate
    assert len(isolated_logger.handlers) == 1
    assert isolated_logger.handlers[0].formatter._fmt == FORMATS["DEFAULT"]  # pylint: disable=protected-access
    mock_install.assert_not_called()


def test_setup_logging_with_colors(mocker: MockerFixture, isolated_logger: logging.Logger):
    """
    Test that colored logs are installed with the debug format at DEBUG level.

    Args:
        mocker: PyTest mocker fixture.
        isolated_logger: A logger private to this test.
    """
    mock_install = mocker.patch("firelite.log_formatter.coloredlogs.install")

    setup_logging(isolated_logger, log_level="DEBUG", colors=True)

    mock_install.assert_called_once_with(level="DEBUG", logger=isolated_logger, fmt=FORMATS["DEBUG"])
