"""Environment variable loaders for configuration."""

from __future__ import annotations

import math
import os
from pathlib import Path

from .errors import ConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_path(name: str) -> Path | None:
    value = optional_env_var(name)
    return Path(value).expanduser() if value is not None else None


def env_positive_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default`` when unset."""

    value = optional_env_var(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ConfigurationError(name, f"must be a number, got {value!r}") from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise ConfigurationError(name, f"must be a positive number, got {value!r}")
    return parsed
