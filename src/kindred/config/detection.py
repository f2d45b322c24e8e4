"""Duplicate detection defaults."""

from __future__ import annotations

from dataclasses import dataclass

from kindred.domain.matching import DEFAULT_THRESHOLD as DEFAULT_CONFIDENCE_THRESHOLD

from .env import optional_int_env
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class DetectionConfig:
    threshold: int = DEFAULT_CONFIDENCE_THRESHOLD
    limit: int | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.threshold <= 100:
            raise ConfigurationError(
                f"Duplicate threshold must be between 0 and 100, got {self.threshold}"
            )
        if self.limit is not None and self.limit < 1:
            raise ConfigurationError(f"Duplicate limit must be positive, got {self.limit}")


def get_detection_config() -> DetectionConfig:
    threshold = optional_int_env("KINDRED_DUPLICATE_THRESHOLD")
    limit = optional_int_env("KINDRED_DUPLICATE_LIMIT")
    return DetectionConfig(
        threshold=DEFAULT_CONFIDENCE_THRESHOLD if threshold is None else threshold,
        limit=limit,
    )
