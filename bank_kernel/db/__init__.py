"""Database layer - engine, base class, gateway, field rules and lifecycle hooks."""

from bank_kernel.db.base import Base
from bank_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    session_scope,
)
from bank_kernel.db.lifecycle import HookEvent, LifecycleHookRegistry, get_registry

__all__ = [
    "Base",
    "get_engine",
    "get_session",
    "get_session_factory",
    "session_scope",
    "create_tables",
    "HookEvent",
    "LifecycleHookRegistry",
    "get_registry",
]
