import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from ssoconfig.config.loader import (
    ConfigError,
    _expand_env_vars,
    _find_config_file,
    _process_config_dict,
    load_config,
    save_config,
)
from ssoconfig.config.schema import SsoConfigSettings


def test_expand_env_vars():
    """Test expanding environment variables in strings."""
    with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
        assert _expand_env_vars("Value is ${TEST_VAR}") == "Value is test_value"
        assert _expand_env_vars("Value is $TEST_VAR") == "Value is test_value"

    assert _expand_env_vars("Value is ${NON_EXISTENT_VAR_SSOCONFIG}") == "Value is "
    assert _expand_env_vars("Plain value") == "Plain value"
    assert _expand_env_vars(123) == 123


def test_expand_env_vars_reads_dotenv(temp_dir):
    (temp_dir / ".env").write_text("SSOCONFIG_DOTENV_VAR=from_dotenv\n")

    try:
        assert _expand_env_vars("${SSOCONFIG_DOTENV_VAR}") == "from_dotenv"
    finally:
        os.environ.pop("SSOCONFIG_DOTENV_VAR", None)


def test_process_config_dict():
    with patch.dict(os.environ, {"CONFIG_HOME": "/home/test"}):
        processed = _process_config_dict({
            "profile_file": {"path": "${CONFIG_HOME}/.aws/config"},
            "notifications": {"enabled": True},
            "extra": ["$CONFIG_HOME", 1, {"nested": "$CONFIG_HOME"}],
        })

    assert processed["profile_file"]["path"] == "/home/test/.aws/config"
    assert processed["notifications"]["enabled"] is True
    assert processed["extra"] == ["/home/test", 1, {"nested": "/home/test"}]


def test_find_config_file_prefers_local(temp_dir):
    local = temp_dir / ".ssoconfig" / "config.yaml"
    local.parent.mkdir()
    local.write_text("logging:\n  level: INFO\n")

    assert _find_config_file() == local


def test_find_config_file_user_home(temp_dir):
    user_config = temp_dir / "home" / ".ssoconfig" / "config.yaml"
    user_config.parent.mkdir(parents=True)
    user_config.write_text("{}\n")

    with patch("ssoconfig.config.loader.USER_CONFIG_PATH", user_config):
        assert _find_config_file() == user_config


def test_find_config_file_none(temp_dir):
    assert _find_config_file() is None


def test_load_config_defaults_without_file(temp_dir):
    config = load_config()

    assert config == SsoConfigSettings()


def test_load_config_from_path(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump({
        "profile_file": {"path": "/tmp/aws-config"},
        "logging": {"level": "INFO"},
    }))

    config = load_config(config_path)

    assert config.profile_file.path == "/tmp/aws-config"
    assert config.logging.level == "INFO"


def test_load_config_expands_env_vars(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("profile_file:\n  path: ${SSOCONFIG_TEST_DIR}/config\n")

    with patch.dict(os.environ, {"SSOCONFIG_TEST_DIR": "/data"}):
        config = load_config(config_path)

    assert config.profile_file.path == "/data/config"


def test_load_config_empty_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("")

    assert load_config(config_path) == SsoConfigSettings()


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_load_config_invalid_yaml(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("logging: [unclosed\n")

    with pytest.raises(ConfigError, match="Failed to parse YAML"):
        load_config(config_path)


def test_load_config_not_a_mapping(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="Invalid configuration format"):
        load_config(config_path)


def test_load_config_validation_error(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("logging:\n  level: LOUD\n")

    with pytest.raises(ConfigError, match="validation failed"):
        load_config(config_path)


def test_save_config_round_trip(tmp_path):
    config_path = tmp_path / "out" / "config.yaml"
    config = SsoConfigSettings(profile_file={"path": "/tmp/config"}, notifications={"enabled": False})

    saved = save_config(config, config_path)

    assert saved == config_path
    data = yaml.safe_load(config_path.read_text())
    assert data["profile_file"]["path"] == "/tmp/config"
    assert "log_file" not in data["logging"]
    assert load_config(config_path) == config


def test_save_config_defaults_to_user_config(temp_dir):
    user_config = temp_dir / "home" / ".ssoconfig" / "config.yaml"

    with patch("ssoconfig.config.loader.USER_CONFIG_PATH", user_config):
        saved = save_config({"logging": {"level": "INFO"}})

    assert saved == user_config
    assert yaml.safe_load(user_config.read_text()) == {"logging": {"level": "INFO"}}
