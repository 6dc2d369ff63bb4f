"""Typed, cached access to ``METRICGEN_*`` environment variables.

Every setting the CLI and the recording runtime read goes through
``EnvConfig``. A value is parsed on first access and cached under
(key, type, default); ``clear_cache()`` forgets everything, which the CLI
does after loading ``.env`` and tests do between cases.

Unparseable values never raise: they log a warning and fall back to the
default.

Usage:
    from metricgen.config.env_config import EnvConfig

    level = EnvConfig.get_str('METRICGEN_LOG_LEVEL', 'WARNING')
    kind = EnvConfig.get_choice('METRICGEN_RECORDER', RECORDER_CHOICES, 'prometheus')
"""
from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

RECORDER_CHOICES = ('prometheus', 'noop')
_TRUTHY = ('1', 'true', 'yes', 'on')


class EnvConfig:
    """Environment lookups with per-key caching and fallback defaults."""

    _cache: dict[str, Any] = {}

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()

    @classmethod
    def _cached(cls, key: str, tag: str, default: T, parse: Callable[[str], T]) -> T:
        """Parse ``os.environ[key]`` once; blank or missing gives ``default``.

        ``parse`` may raise ValueError/TypeError, in which case the default
        is cached and a warning names the bad value.
        """
        cache_key = f"{key}:{tag}:{default}"
        if cache_key in cls._cache:
            return cls._cache[cache_key]

        raw = os.environ.get(key, '')
        if not raw.strip():
            result = default
        else:
            try:
                result = parse(raw)
            except (ValueError, TypeError) as e:
                logger.warning("Invalid %s value for %s=%r, using default=%s (%s)", tag, key, raw, default, e)
                result = default
        cls._cache[cache_key] = result
        return result

    @classmethod
    def get_int(cls, key: str, default: int) -> int:
        return cls._cached(key, 'int', default, lambda raw: int(raw.strip()))

    @classmethod
    def get_float(cls, key: str, default: float) -> float:
        return cls._cached(key, 'float', default, lambda raw: float(raw.strip()))

    @classmethod
    def get_bool(cls, key: str, default: bool = False) -> bool:
        """Truthy spellings are 1/true/yes/on (any case); anything else is False."""
        return cls._cached(key, 'bool', default, lambda raw: raw.strip().lower() in _TRUTHY)

    @classmethod
    def get_str(cls, key: str, default: str = '') -> str:
        """Raw string value; unlike the typed getters, whitespace is kept."""
        cache_key = f"{key}:str:{default}"
        if cache_key not in cls._cache:
            cls._cache[cache_key] = os.environ.get(key, default)
        return cls._cache[cache_key]

    @classmethod
    def get_choice(cls, key: str, choices: tuple[str, ...], default: str) -> str:
        """Lower-cased value restricted to ``choices``."""
        def parse(raw: str) -> str:
            value = raw.strip().lower()
            if value not in choices:
                raise ValueError(f"expected one of {', '.join(choices)}")
            return value

        return cls._cached(key, 'choice:' + ','.join(choices), default, parse)

    @classmethod
    def get_list(cls, key: str, default: list[str] | None = None, separator: str = ',') -> list[str]:
        """Separated values, trimmed, empty items dropped."""
        fallback = list(default or [])
        items = cls._cached(
            key,
            f"list{separator}",
            tuple(fallback),
            lambda raw: tuple(part.strip() for part in raw.split(separator) if part.strip()),
        )
        return list(items)

    @classmethod
    def is_set(cls, key: str) -> bool:
        return bool(os.environ.get(key, '').strip())

    @classmethod
    def require(cls, key: str) -> str:
        """Value of a mandatory variable.

        Raises:
            RuntimeError: If the variable is missing or blank
        """
        if not cls.is_set(key):
            raise RuntimeError(f"Required environment variable not set: {key}")
        return os.environ[key]

    @classmethod
    def get_all(cls, prefix: str = 'METRICGEN_') -> dict[str, str]:
        return {k: v for k, v in os.environ.items() if k.startswith(prefix)}


def get_log_level() -> str:
    """CLI log level name (default: WARNING)."""
    return EnvConfig.get_str('METRICGEN_LOG_LEVEL', 'WARNING').strip().upper() or 'WARNING'


def get_recorder_kind() -> str:
    """Default recorder backend (default: prometheus)."""
    return EnvConfig.get_choice('METRICGEN_RECORDER', RECORDER_CHOICES, 'prometheus')


__all__ = [
    'EnvConfig',
    'RECORDER_CHOICES',
    'get_log_level',
    'get_recorder_kind',
]
