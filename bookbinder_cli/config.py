# bookbinder_cli/config.py
"""
Book configuration: JSON file (schema-checked) + environment overrides.

    BOOKBINDER_TEMPLATES_DIR   templates root (contains <template>/template.tex)
    BOOKBINDER_LOG_DIR         see logconf.init
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

import jsonschema
from dotenv import load_dotenv
from pydantic import ValidationError

from bookbinder_cli.errors import ConfigError
from bookbinder_cli.models import BookConfig
from bookbinder_cli.utils.validate import validate_config

TEMPLATES_ENV = "BOOKBINDER_TEMPLATES_DIR"


def _env_overrides() -> Dict[str, Any]:
    load_dotenv()
    out: Dict[str, Any] = {}
    if os.getenv(TEMPLATES_ENV):
        out["templates_dir"] = os.environ[TEMPLATES_ENV]
    return out


def load_config(path: Path | None = None) -> BookConfig:
    """Return the defaults, overlaid with *path* (JSON) and then the environment."""
    data: Dict[str, Any] = {}
    if path is not None:
        try:
            data = json.loads(Path(path).read_text("utf-8"))
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config {path} is not valid JSON: {e}") from e
        try:
            validate_config(data)
        except jsonschema.ValidationError as e:
            raise ConfigError(f"Config {path} is invalid: {e.message} (at {list(e.path)})") from e

    data.update(_env_overrides())
    if "year" in data:
        data["year"] = str(data["year"])
    try:
        return BookConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
