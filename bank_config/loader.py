"""
Configuration Loader (``bank_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``bank_config.schema`` dataclasses.  Runtime callers go through
``bank_config.get_active_config()``; this module is its implementation.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``database.url`` is required; every other key has a default.
* Unknown log levels are rejected at load time, not at first use.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``database`` / ``database.url``  -> ``KeyError`` propagates.
* Wrongly typed values  -> ``ValueError``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from bank_config.schema import AuditConfig, DatabaseConfig, KernelConfig, LoggingConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML value must be a mapping")
    return data


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ValueError(f"{key} must be an integer, got {value!r}")


def parse_database(data: Mapping[str, Any]) -> DatabaseConfig:
    """Parse a DatabaseConfig; ``url`` is required."""
    defaults = DatabaseConfig(url="")
    return DatabaseConfig(
        url=str(data["url"]),
        echo=_as_bool(data.get("echo", defaults.echo), "database.echo"),
        pool_size=_as_int(data.get("pool_size", defaults.pool_size), "database.pool_size"),
        max_overflow=_as_int(
            data.get("max_overflow", defaults.max_overflow), "database.max_overflow"
        ),
        pool_timeout=_as_int(
            data.get("pool_timeout", defaults.pool_timeout), "database.pool_timeout"
        ),
        pool_recycle=_as_int(
            data.get("pool_recycle", defaults.pool_recycle), "database.pool_recycle"
        ),
    )


def parse_logging(data: Mapping[str, Any]) -> LoggingConfig:
    level = str(data.get("level", LoggingConfig.level)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"logging.level: unknown level {level!r}")
    return LoggingConfig(level=level)


def parse_audit(data: Mapping[str, Any]) -> AuditConfig:
    return AuditConfig(
        enabled=_as_bool(data.get("enabled", AuditConfig.enabled), "audit.enabled")
    )


def parse_config(
    data: Mapping[str, Any],
    *,
    database_url_override: str | None = None,
    source: str | None = None,
) -> KernelConfig:
    """
    Build a KernelConfig from a parsed YAML mapping.

    ``database_url_override`` (normally the DATABASE_URL environment variable)
    replaces ``database.url`` when given; the rest of the database section
    still comes from ``data``.
    """
    database_data = dict(data.get("database") or {})
    if database_url_override:
        database_data["url"] = database_url_override
    return KernelConfig(
        database=parse_database(database_data),
        logging=parse_logging(data.get("logging") or {}),
        audit=parse_audit(data.get("audit") or {}),
        source=source,
    )
