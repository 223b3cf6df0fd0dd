"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_MAX_STRING_LENGTH = 20_000_000
DEFAULT_MAX_NESTING_DEPTH = 1000
DEFAULT_MAX_NUMBER_LENGTH = 1000


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    return int(raw)


@dataclass(frozen=True)
class PayloadSettings:
    """Stream read constraints applied while mapping JSON request bodies."""

    max_string_length: int = DEFAULT_MAX_STRING_LENGTH
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    max_number_length: int = DEFAULT_MAX_NUMBER_LENGTH

    def safe_for_logging(self) -> dict[str, int]:
        """Return payload settings safe for logs."""
        return {
            "max_string_length": self.max_string_length,
            "max_nesting_depth": self.max_nesting_depth,
            "max_number_length": self.max_number_length,
        }


@lru_cache(maxsize=1)
def get_payload_settings() -> PayloadSettings:
    """Load payload settings from the environment."""
    return PayloadSettings(
        max_string_length=_get_int_env("BOM_INTAKE_MAX_STRING_LENGTH", DEFAULT_MAX_STRING_LENGTH),
        max_nesting_depth=_get_int_env("BOM_INTAKE_MAX_NESTING_DEPTH", DEFAULT_MAX_NESTING_DEPTH),
        max_number_length=_get_int_env("BOM_INTAKE_MAX_NUMBER_LENGTH", DEFAULT_MAX_NUMBER_LENGTH),
    )
