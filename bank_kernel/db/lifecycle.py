"""
Lifecycle Hook Registry.

===============================================================================
WHY THIS EXISTS
===============================================================================

Some concerns (audit logging today) must observe every persisted entity as
it is loaded, written, or refreshed, regardless of which service call caused
the transition.  Rather than subclassing a framework listener type, callers
register plain callables here and the registry wires them to SQLAlchemy ORM
events on the declarative Base:

    ORM event                       Registry extension point
    ------------------------------  ------------------------
    InstanceEvents.load             on_after_load
    MapperEvents.before_insert      on_before_write
    MapperEvents.before_update      on_before_write
    InstanceEvents.refresh          on_after_refresh

before_insert/before_update fire inside flush for every object being
written, including objects reached only by cascade from another object.

===============================================================================
CONTRACT
===============================================================================

- Callbacks receive ``(entity, event)`` where event is a HookEvent.
- Callbacks run synchronously, in registration order, on the calling thread.
- Registering the same callable twice for the same extension point is a
  no-op.
- An exception raised by a callback is NOT caught: it propagates out of the
  query or flush and aborts the triggering operation.

===============================================================================
USAGE
===============================================================================

    registry = get_registry()
    registry.on_after_load(my_callback)
    registry.install()      # once at startup
"""

import threading
from enum import Enum
from typing import Any, Callable

from sqlalchemy import event

from bank_kernel.db.base import Base
from bank_kernel.logging_config import get_logger

logger = get_logger("db.lifecycle")


class HookEvent(str, Enum):
    """Lifecycle transition reported to callbacks."""

    LOAD = "load"
    SAVE_OR_UPDATE = "save_or_update"
    REFRESH = "refresh"


LifecycleCallback = Callable[[Any, HookEvent], None]


class LifecycleHookRegistry:
    """
    Ordered callback lists for the three lifecycle extension points.

    Contract:
        install() attaches the registry to the ORM; until then callbacks are
        stored but never invoked.  uninstall() detaches it again.  Both are
        idempotent.
    """

    def __init__(self):
        self._callbacks: dict[HookEvent, list[LifecycleCallback]] = {
            HookEvent.LOAD: [],
            HookEvent.SAVE_OR_UPDATE: [],
            HookEvent.REFRESH: [],
        }
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on_after_load(self, callback: LifecycleCallback) -> LifecycleCallback:
        """Register ``callback`` to run after an entity is materialized from the store."""
        return self._register(HookEvent.LOAD, callback)

    def on_before_write(self, callback: LifecycleCallback) -> LifecycleCallback:
        """Register ``callback`` to run before an entity is inserted or updated."""
        return self._register(HookEvent.SAVE_OR_UPDATE, callback)

    def on_after_refresh(self, callback: LifecycleCallback) -> LifecycleCallback:
        """Register ``callback`` to run after an entity's state is reloaded from the store."""
        return self._register(HookEvent.REFRESH, callback)

    def _register(self, hook_event: HookEvent, callback: LifecycleCallback) -> LifecycleCallback:
        with self._lock:
            callbacks = self._callbacks[hook_event]
            if callback not in callbacks:
                callbacks.append(callback)
                logger.info(
                    "lifecycle_hook_registered",
                    extra={
                        "hook_event": hook_event.value,
                        "callback": getattr(callback, "__qualname__", repr(callback)),
                    },
                )
        return callback

    def callbacks(self, hook_event: HookEvent) -> tuple[LifecycleCallback, ...]:
        return tuple(self._callbacks[hook_event])

    def clear(self) -> None:
        with self._lock:
            for callbacks in self._callbacks.values():
                callbacks.clear()

    # ------------------------------------------------------------------
    # ORM wiring
    # ------------------------------------------------------------------

    @property
    def installed(self) -> bool:
        with _installed_lock:
            return self in _installed

    def install(self) -> None:
        """Attach the registry to SQLAlchemy ORM events on every mapped model."""
        _attach_orm_listeners()
        with _installed_lock:
            if self in _installed:
                return
            _installed.append(self)
        logger.info("lifecycle_registry_installed")

    def uninstall(self) -> None:
        with _installed_lock:
            if self not in _installed:
                return
            _installed.remove(self)
        logger.info("lifecycle_registry_uninstalled")

    def fire(self, hook_event: HookEvent, target: Any) -> None:
        for callback in self.callbacks(hook_event):
            callback(target, hook_event)


# ---------------------------------------------------------------------------
# ORM listeners
# ---------------------------------------------------------------------------
#
# The listeners are attached to Base once per process and never removed;
# they dispatch to whichever registries are installed at the time.

_installed: list[LifecycleHookRegistry] = []
_installed_lock = threading.Lock()
_orm_listeners_attached = False


def _dispatch(hook_event: HookEvent, target: Any) -> None:
    with _installed_lock:
        registries = tuple(_installed)
    for registry in registries:
        registry.fire(hook_event, target)


def _after_load(target, context):
    _dispatch(HookEvent.LOAD, target)


def _before_write(mapper, connection, target):
    _dispatch(HookEvent.SAVE_OR_UPDATE, target)


def _after_refresh(target, context, attrs):
    _dispatch(HookEvent.REFRESH, target)


def _attach_orm_listeners() -> None:
    global _orm_listeners_attached
    with _installed_lock:
        if _orm_listeners_attached:
            return
        _orm_listeners_attached = True
    event.listen(Base, "load", _after_load, propagate=True)
    event.listen(Base, "before_insert", _before_write, propagate=True)
    event.listen(Base, "before_update", _before_write, propagate=True)
    event.listen(Base, "refresh", _after_refresh, propagate=True)


# ---------------------------------------------------------------------------
# Process-wide registry
# ---------------------------------------------------------------------------

_registry: LifecycleHookRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> LifecycleHookRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = LifecycleHookRegistry()
        return _registry


def reset_registry() -> None:
    """Uninstall and drop the process-wide registry. FOR TESTING / SHUTDOWN."""
    global _registry
    with _registry_lock:
        if _registry is not None:
            _registry.uninstall()
            _registry.clear()
        _registry = None
