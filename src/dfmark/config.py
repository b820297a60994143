"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"
LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseModel):
    app_name:      str = "dfmark"
    root_dir:      str = Field(default=".",        description="Folder that include and code paths must stay within")
    output_dir:    str = Field(default="dist",     description="Directory for rendered HTML files")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    lang_prefix:   str = Field(default="lang-",    description="Class prefix for code snippet languages")
    encoding:      str = Field(default="utf-8",    description="Encoding of source, include, and snippet files")
    log_level:     str = Field(default="WARNING",  description="loguru level for the stderr sink")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}'")
        return level


def _file_values(config_file: Path) -> dict[str, Any]:
    if not config_file.is_file():
        return {}
    try:
        values = yaml.safe_load(config_file.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {config_file.name}: {e}") from e
    if values is None:
        return {}
    if not isinstance(values, dict):
        raise ValueError(f"Invalid {config_file.name}: expected a mapping of settings")
    return values


def _env_values() -> dict[str, str]:
    """DFMARK_<FIELD> variables that are set and non-empty."""
    env = {name: os.getenv(f"DFMARK_{name.upper()}") for name in Settings.model_fields}
    return {name: value for name, value in env.items() if value}


def load_config(overrides: dict[str, Any] = None, config_file: str | Path = CONFIG_FILE) -> Settings:
    """Build Settings; later layers win: config file, DFMARK_ env vars, non-None CLI overrides."""
    layers = [_file_values(Path(config_file)), _env_values()]
    layers.append({k: v for k, v in (overrides or {}).items() if v is not None})
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return Settings(**merged)
