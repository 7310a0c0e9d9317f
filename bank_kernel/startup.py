"""
Kernel startup and shutdown.

``start_kernel`` performs, once, everything that must happen before the
first service call:

    1. configure structured logging
    2. initialise the engine from the configured database URL
    3. create tables
    4. register storage-boundary field rule listeners
    5. register the audit hooks and install the lifecycle registry

``stop_kernel`` undoes it in reverse order.
"""

from bank_config import KernelConfig, get_active_config
from bank_kernel.db.engine import create_tables, init_engine_from_url, reset_engine
from bank_kernel.db.field_rules import (
    register_field_rule_listeners,
    unregister_field_rule_listeners,
)
from bank_kernel.db.lifecycle import get_registry, reset_registry
from bank_kernel.logging_config import configure_logging, get_logger
from bank_kernel.services.audit_hooks import register_audit_hooks

logger = get_logger("startup")


def start_kernel(config: KernelConfig | None = None) -> KernelConfig:
    """
    Bring the kernel up.

    Args:
        config: Configuration to use.  Defaults to get_active_config().

    Returns:
        The configuration the kernel was started with.
    """
    if config is None:
        config = get_active_config()
    configure_logging(level=config.logging.level)

    db = config.database
    init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
    )
    create_tables()
    register_field_rule_listeners()

    if config.audit.enabled:
        registry = get_registry()
        register_audit_hooks(registry)
        registry.install()

    logger.info(
        "kernel_started",
        extra={"audit_enabled": config.audit.enabled, "config_source": config.source},
    )
    return config


def stop_kernel() -> None:
    """Tear the kernel down: hooks, field rules, then the engine."""
    reset_registry()
    unregister_field_rule_listeners()
    reset_engine()
    logger.info("kernel_stopped")
