"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "POSTINDEX_"


class Settings(BaseModel):
    app_name:        str = "postindex"
    content_root:    str = Field(default="content/posts", description="Directory scanned for posts")
    extensions:      list[str] = Field(default_factory=lambda: [".md"], description="File suffixes to load")
    separator_token: Optional[str] = Field(default=None, description="Token inside <|RELATED_DOC_SEP-magic-...|>; None disables splitting")
    workers:         int = Field(default=1, ge=1, description="Threads used to read source files")
    read_timeout:    float = Field(default=10.0, gt=0, description="Seconds to wait for a single file read")
    parser_config:   str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    output_dir:      str = Field(default="dist", description="Directory for index.json, errors.json and posts")
    output_format:   str = Field(default="md", pattern="^(md|mdx)$", description="md or mdx")
    db_url:          str = "sqlite:///postindex.db"
    log_level:       str = Field(default="INFO", description="Stdlib logging level name")
    log_json:        bool = Field(default=False, description="Render log lines as JSON")
    strict:          bool = Field(default=False, description="Exit non-zero when any input is rejected")

    @field_validator("extensions", mode="before")
    @classmethod
    def _split_extensions(cls, value: Any) -> Any:
        """Accept 'md,.mdx' strings (env vars) and ensure every suffix has a leading dot."""
        if isinstance(value, str):
            value = [v for v in value.split(",") if v.strip()]
        if isinstance(value, (list, tuple)):
            return [
                (e if e.startswith(".") else f".{e}").lower()
                for e in (str(v).strip() for v in value)
            ]
        return value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then POSTINDEX_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings: {e}") from e
