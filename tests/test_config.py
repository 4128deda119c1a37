"""Tests for configuration module."""

import json

import pytest
from pydantic import ValidationError

from endpoints_schema.config import Config, LoggingConfig, SchemaFlags


def test_config_defaults():
    """Test default configuration values."""
    config = Config()

    assert config.flags.force_json_map_schema is False
    assert config.flags.ignore_unsupported_key_types is False
    assert config.flags.support_array_values is False
    assert config.flags.use_declared_enum_naming is True

    assert config.logging.level == "INFO"
    assert config.logging.format == "json"
    assert config.logging.file is None


def test_config_from_env(monkeypatch):
    """Test loading nested flags from environment variables."""
    monkeypatch.setenv("ENDPOINTS_SCHEMA_FLAGS__FORCE_JSON_MAP_SCHEMA", "true")
    monkeypatch.setenv("ENDPOINTS_SCHEMA_FLAGS__SUPPORT_ARRAY_VALUES", "1")
    monkeypatch.setenv("ENDPOINTS_SCHEMA_LOGGING__LEVEL", "DEBUG")

    config = Config()

    assert config.flags.force_json_map_schema is True
    assert config.flags.support_array_values is True
    assert config.flags.ignore_unsupported_key_types is False
    assert config.logging.level == "DEBUG"


def test_config_from_file(tmp_path):
    """Test loading configuration from a JSON file."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({
        "flags": {"ignore_unsupported_key_types": True, "use_declared_enum_naming": False},
        "logging": {"level": "WARNING", "format": "console"},
    }))

    config = Config.from_file(config_file)

    assert config.flags.ignore_unsupported_key_types is True
    assert config.flags.use_declared_enum_naming is False
    assert config.flags.force_json_map_schema is False
    assert config.logging.level == "WARNING"
    assert config.logging.format == "console"


def test_schema_flags_are_frozen():
    flags = SchemaFlags()
    with pytest.raises(ValidationError):
        flags.force_json_map_schema = True


def test_logging_config_file_path(tmp_path):
    logging_config = LoggingConfig(file=str(tmp_path / "out.log"))
    assert logging_config.file == tmp_path / "out.log"
