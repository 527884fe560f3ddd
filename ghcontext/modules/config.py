"""
ghcontext - Configuration

Loads config.yaml into pydantic models. A missing file means defaults;
a malformed file is an error.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

DEFAULT_CONFIG_PATH = "config.yaml"

# Chrome, then Firefox
DEFAULT_WINDOW_CLASSES = ["Chrome_WidgetWin_1", "MozillaWindowClass"]


class ConfigError(RuntimeError):
    pass


class ResolverSettings(BaseModel):
    remote_name: str = Field(default="origin", min_length=1)


class BrowserSettings(BaseModel):
    window_classes: List[str] = Field(default_factory=lambda: list(DEFAULT_WINDOW_CLASSES))


class AnnotateSettings(BaseModel):
    # Time for the annotate view to open before the selection is applied
    selection_delay_seconds: float = Field(default=1.0, ge=0.0)


class LoggingSettings(BaseModel):
    verbose: bool = False
    log_file: Optional[str] = None


class ContextConfig(BaseModel):
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    annotate: AnnotateSettings = Field(default_factory=AnnotateSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(config_path: Optional[Union[str, Path]] = None) -> ContextConfig:
    """
    Load configuration from a YAML file.

    The path defaults to $GHCONTEXT_CONFIG, then config.yaml.
    $GHCONTEXT_REMOTE overrides resolver.remote_name.
    """
    config_file = Path(config_path or os.getenv("GHCONTEXT_CONFIG") or DEFAULT_CONFIG_PATH)

    raw: dict = {}
    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Can't read {config_file}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_file} must contain a mapping")
        logger.debug(f"Loaded configuration from: {config_file}")
    else:
        logger.warning(f"Config file not found: {config_file}. Using defaults.")

    remote_override = (os.getenv("GHCONTEXT_REMOTE") or "").strip()
    resolver = raw.get("resolver") or {}
    if remote_override and isinstance(resolver, dict):
        raw["resolver"] = {**resolver, "remote_name": remote_override}

    try:
        return ContextConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e
