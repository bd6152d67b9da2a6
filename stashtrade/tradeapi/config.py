"""Settings of the trade API, read from the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U32_MAX = 2**32 - 1


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


def _str_from_env(environ: Mapping[str, str], key: str) -> str:
    try:
        return environ[key]
    except KeyError:
        raise ConfigError(f"{key} environment variable") from None


def _int_from_env(environ: Mapping[str, str], key: str) -> int:
    text = _str_from_env(environ, key)
    if _UNSIGNED.fullmatch(text) is None or int(text) > _U32_MAX:
        raise ConfigError(f"{key} must be an unsigned 32-bit integer, got {text!r}")
    return int(text)


@dataclass(frozen=True)
class Config:
    """Port of the metrics endpoint and address of the offer database."""

    metrics_port: int
    db_url: str

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Read the settings from ``environ``, or from the process environment."""
        if environ is None:
            environ = os.environ
        return cls(
            metrics_port=_int_from_env(environ, "METRICS_PORT"),
            db_url=_str_from_env(environ, "TRADE_API_DATABASE_URL"),
        )