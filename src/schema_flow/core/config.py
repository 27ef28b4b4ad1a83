"""
Configuration management for the schema editor
"""
from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from schema_flow.models.schema import DEFAULT_COLUMN_TYPE
from schema_flow.utils.naming import DEFAULT_IRREGULAR_PLURALS


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "INFO"
    format: str = "text"
    file: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class StorageConfig(BaseModel):
    """Where the model is persisted and exported"""
    path: str = "schema.json"
    export_path: str = "schema.sql"


class EditorConfig(BaseModel):
    """Defaults for newly created tables and columns"""
    default_column_type: str = DEFAULT_COLUMN_TYPE
    table_name_prefix: str = "Table"


class InferenceConfig(BaseModel):
    """Relation inference configuration"""
    irregular_plurals: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_IRREGULAR_PLURALS)
    )


class Config(BaseSettings):
    """Main configuration class"""
    model_config = SettingsConfigDict(env_prefix="SCHEMA_FLOW_", env_nested_delimiter="__")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)

    @classmethod
    def from_yaml(cls, config_path: str) -> "Config":
        """Load configuration from YAML file"""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, "r") as f:
            config_dict = yaml.safe_load(f) or {}

        return cls(**config_dict)
