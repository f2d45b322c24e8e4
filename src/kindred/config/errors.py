"""Configuration failures raised while reading settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is malformed or outside its allowed range."""

    def __init__(self, message: str, *, variable: str | None = None) -> None:
        self.variable = variable
        super().__init__(message)
