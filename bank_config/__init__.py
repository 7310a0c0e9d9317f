"""
bank_config -- single public entrypoint for kernel configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration
    files or environment variables directly.

Invariants enforced:
    - Single entrypoint: all runtime config flows through ``get_active_config()``.
    - ``DATABASE_URL`` in the environment, when set, overrides ``database.url``.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``KeyError`` / ``ValueError`` -- required keys missing or mistyped.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``BANK_CONFIG_TRACE`` log entry naming the source file, the database
    dialect and whether audit hooks are enabled.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sqlalchemy.engine import make_url

from bank_config.loader import load_yaml_file, parse_config
from bank_config.schema import AuditConfig, DatabaseConfig, KernelConfig, LoggingConfig

_logger = logging.getLogger("bank_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

DATABASE_URL_ENV = "DATABASE_URL"


def get_active_config(
    config_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> KernelConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to bank_config/sets/default.yaml.
        environ: Environment mapping.  Defaults to os.environ.

    Returns:
        KernelConfig -- frozen runtime configuration.
    """
    path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ

    config = parse_config(
        load_yaml_file(path),
        database_url_override=env.get(DATABASE_URL_ENV),
        source=str(path),
    )

    _logger.info(
        "BANK_CONFIG_TRACE",
        extra={
            "trace_type": "BANK_CONFIG_TRACE",
            "config_source": config.source,
            "database_dialect": make_url(config.database.url).get_backend_name(),
            "database_url_from_env": bool(env.get(DATABASE_URL_ENV)),
            "audit_enabled": config.audit.enabled,
            "log_level": config.logging.level,
        },
    )
    return config


__all__ = [
    "get_active_config",
    "DATABASE_URL_ENV",
    "KernelConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "AuditConfig",
]
