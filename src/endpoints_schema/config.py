"""Configuration management for Endpoints Schema."""

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaFlags(BaseModel):
    """Policy switches consulted at the start of every top-level derivation."""

    model_config = {"frozen": True}

    force_json_map_schema: bool = Field(default=False, description="Serialize every map type as the opaque JsonMap schema.")
    ignore_unsupported_key_types: bool = Field(default=False, description="Fall back to JsonMap instead of failing when a map key is not string-compatible.")
    support_array_values: bool = Field(default=False, description="Analyze array/collection map values structurally instead of falling back to JsonMap.")
    use_declared_enum_naming: bool = Field(default=True, description="Use wire-name overrides declared with @api_enum for enum constants.")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format ('json' or 'console')")
    file: Optional[Path] = Field(default=None, description="Log file path")


class Config(BaseSettings):
    """Main configuration for Endpoints Schema. Loads from environment variables prefixed with ENDPOINTS_SCHEMA_."""

    model_config = SettingsConfigDict(
        env_prefix='ENDPOINTS_SCHEMA_',
        env_nested_delimiter='__', # e.g., ENDPOINTS_SCHEMA_FLAGS__FORCE_JSON_MAP_SCHEMA
        extra='ignore',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    flags: SchemaFlags = Field(default_factory=SchemaFlags)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, file_path: Path) -> "Config":
        """Create configuration strictly from a JSON file.
        Note: This does not layer with environment variables.
        """
        with open(file_path) as f:
            config_data = json.load(f)
        return cls.model_validate(config_data)
