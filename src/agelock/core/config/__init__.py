"""Configuration models for agelock.

Configuration is written in HOCON and loaded into dataclasses with
dataconf.
"""

from agelock.core.config.loader import (
    ENV_PREFIX,
    env_to_hocon,
    load_config,
    load_from_env,
    load_from_file,
    load_from_string,
)
from agelock.core.config.observability import AuditConfig, LogFormat, LoggingConfig, LogLevel
from agelock.core.config.settings import DEFAULT_STORE_ROOT, AgelockConfig, StoreConfig

__all__ = [
    "DEFAULT_STORE_ROOT",
    "ENV_PREFIX",
    "AgelockConfig",
    "AuditConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "StoreConfig",
    "env_to_hocon",
    "load_config",
    "load_from_env",
    "load_from_file",
    "load_from_string",
]
