import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

SAMPLE_CONFIG = """[profile default]
region = us-east-1

[sso-session foo]
sso_start_url = https://x
sso_region = us-east-1

[profile foo-AdminAccess]
sso_session = foo"""


@pytest.fixture
def cli_runner():
    """Fixture for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def temp_dir(tmp_path):
    """Run the test from an empty working directory with no user settings."""
    old_cwd = os.getcwd()
    os.chdir(tmp_path)
    with patch("ssoconfig.config.loader.USER_CONFIG_PATH", tmp_path / "home" / ".ssoconfig" / "config.yaml"):
        yield tmp_path
    os.chdir(old_cwd)


@pytest.fixture
def sample_lines():
    return SAMPLE_CONFIG.split("\n")


@pytest.fixture
def config_file(tmp_path):
    """A profile config file holding the sample content."""
    path = tmp_path / "aws" / "config"
    path.parent.mkdir(parents=True)
    path.write_text(SAMPLE_CONFIG, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """The CLI reconfigures the package logger; undo that between tests."""
    yield
    logger = logging.getLogger("ssoconfig")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
