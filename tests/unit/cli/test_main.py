##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Firelite
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Firelite.
##############################################################################

"""
Tests for the `main.py` module.
"""

import pytest
from pytest_mock import MockerFixture

from firelite import main as firelite_main
from tests.fixture_types import FixtureConfig


# pylint: disable=redefined-outer-name


@pytest.fixture
def patched_main(mocker: MockerFixture, config_app: FixtureConfig):
    """
    Stop `main` from reading the user's config or attaching real log handlers.

    Args:
        mocker: PyTest mocker fixture.
        config_app: A configuration whose files live under `tmp_path`.

    Returns:
        The mocked `setup_logging`.
    """
    mocker.patch("firelite.main.initialize_config", return_value=config_app)
    return mocker.patch("firelite.main.setup_logging")


def test_no_arguments_prints_help(mocker: MockerFixture, capsys: pytest.CaptureFixture):
    """
    Test that running `firelite` alone prints the help and returns 1.

    Args:
        mocker: PyTest mocker fixture.
        capsys: PyTest capsys fixture.
    """
    mocker.patch("sys.argv", ["firelite"])
    assert firelite_main.main() == 1
    assert "usage: firelite" in capsys.readouterr().out


def test_successful_command_exits_cleanly(mocker: MockerFixture, patched_main, capsys: pytest.CaptureFixture):
    """
    Test that a successful command exits with status 0 and logs at the config's level.

    Args:
        mocker: PyTest mocker fixture.
        patched_main: The mocked `setup_logging`.
        capsys: PyTest capsys fixture.
    """
    mocker.patch("sys.argv", ["firelite", "database", "info"])

    with pytest.raises(SystemExit) as excinfo:
        firelite_main.main()

    assert excinfo.value.code is None
    assert patched_main.call_args.kwargs["log_level"] == "INFO"
    assert patched_main.call_args.kwargs["colors"] is False
    assert "No collections." in capsys.readouterr().out


def test_level_flag_overrides_config(mocker: MockerFixture, patched_main):
    """
    Test that `--level` wins over the configured log level.

    Args:
        mocker: PyTest mocker fixture.
        patched_main: The mocked `setup_logging`.
    """
    mocker.patch("sys.argv", ["firelite", "-lvl", "debug", "database", "info"])

    with pytest.raises(SystemExit):
        firelite_main.main()

    assert patched_main.call_args.kwargs["log_level"] == "DEBUG"


def test_command_failure_exits_with_error(
    mocker: MockerFixture, patched_main, caplog: pytest.LogCaptureFixture
):
    """
    Test that an exception from a command is logged and turned into exit status 1.

    Args:
        mocker: PyTest mocker fixture.
        patched_main: The mocked `setup_logging`.
        caplog: PyTest caplog fixture.
    """
    mocker.patch("sys.argv", ["firelite", "database", "add", "users", "oops"])

    with pytest.raises(SystemExit) as excinfo:
        firelite_main.main()

    assert excinfo.value.code == 1
    assert "Expected KEY=VALUE" in caplog.text


def test_config_failure_exits_with_error(mocker: MockerFixture, capsys: pytest.CaptureFixture):
    """
    Test that a configuration that can't be loaded is reported on stderr.

    Args:
        mocker: PyTest mocker fixture.
        capsys: PyTest capsys fixture.
    """
    mocker.patch("sys.argv", ["firelite", "database", "info"])
    mocker.patch("firelite.main.initialize_config", side_effect=ValueError("bad schema_policy"))

    with pytest.raises(SystemExit) as excinfo:
        firelite_main.main()

    assert excinfo.value.code == 1
    assert "bad schema_policy" in capsys.readouterr().err
