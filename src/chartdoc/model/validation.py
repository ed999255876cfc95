"""Errors and configuration persistence."""

import json
from pathlib import Path

import pydantic

from chartdoc.model.config import LintConfig


class ValidationError(Exception):
    """Validation error with error code."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


def config_path(base_dir: Path | None = None) -> Path:
    """Return the path of the configuration file."""
    if base_dir is None:
        base_dir = Path.cwd()
    return base_dir / ".chartdoc" / "config.json"


def load_config(base_dir: Path | None = None) -> LintConfig:
    """Load the configuration, falling back to defaults when absent."""
    path = config_path(base_dir)
    if not path.exists():
        return LintConfig()
    try:
        with path.open() as f:
            data = json.load(f)
        return LintConfig(**data)
    except (OSError, json.JSONDecodeError, TypeError, pydantic.ValidationError) as e:
        raise ValidationError("CONFIG_INVALID", f"Cannot read {path}: {e}") from e


def save_config(config: LintConfig, base_dir: Path | None = None) -> Path:
    """Save the configuration to disk."""
    path = config_path(base_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)
    return path
