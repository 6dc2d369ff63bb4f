"""
Configuration module for metricgen.

All settings come from ``METRICGEN_*`` environment variables:
    from metricgen.config import EnvConfig, get_log_level
    level = get_log_level()
"""
from .env_config import RECORDER_CHOICES, EnvConfig, get_log_level, get_recorder_kind

__all__ = [
    'EnvConfig',
    'RECORDER_CHOICES',
    'get_log_level',
    'get_recorder_kind',
]
