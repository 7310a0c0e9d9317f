"""
Configuration schema (``bank_config.schema``).

Frozen dataclasses describing the kernel's runtime configuration.  Pure
data: no I/O, no defaults read from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection and pool settings passed to init_engine_from_url()."""

    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class AuditConfig:
    """Whether the account audit hooks are installed at startup."""

    enabled: bool = True


@dataclass(frozen=True)
class KernelConfig:
    """Root of the kernel configuration."""

    database: DatabaseConfig
    logging: LoggingConfig = LoggingConfig()
    audit: AuditConfig = AuditConfig()
    source: str | None = None
