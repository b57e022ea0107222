"""Errors raised while reading settings."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """An environment variable holds a value the application cannot use."""

    def __init__(self, variable: str, message: str) -> None:
        super().__init__(f"{variable} {message}")
        self.variable = variable
