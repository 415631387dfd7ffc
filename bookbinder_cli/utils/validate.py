"""
Schema-validation helpers for the book configuration.

Usage (inside other modules):
    from bookbinder_cli.utils.validate import validate_config
    validate_config(data)      # raises jsonschema.ValidationError on failure
"""

from __future__ import annotations

import json
from importlib import resources as pkg
from typing import Any, Dict

import jsonschema


def _load_schema(name: str) -> Dict[str, Any]:
    text = pkg.files("bookbinder_cli.schemas").joinpath(name).read_text(encoding="utf-8")
    return json.loads(text)


# ─── public API ──────────────────────────────────────────────────────────
_config_schema = _load_schema("book_config.schema.json")


def validate_config(data: Dict[str, Any]) -> None:
    jsonschema.validate(data, _config_schema)
