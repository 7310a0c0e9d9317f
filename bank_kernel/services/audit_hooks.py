"""
Audit hooks -- structured log records for account lifecycle transitions.

Responsibility:
    Observes every Account that is loaded, written, or refreshed and emits
    one log record per transition carrying the account's current field
    values.  Other entity kinds are ignored.

Architecture position:
    Kernel > Services.  Registered once against the process-wide
    LifecycleHookRegistry at startup (see bank_kernel.startup).

Invariants enforced:
    - Observation only: hooks read attributes and never assign them.
    - Hooks hold no state, so repeated invocation for one logical
      operation only repeats the log record.

Failure modes:
    - Nothing is caught here.  If logging raises, the exception aborts the
      load/flush/refresh that triggered the hook.
"""

from typing import Any

from bank_kernel.db.lifecycle import HookEvent, LifecycleHookRegistry
from bank_kernel.logging_config import get_logger
from bank_kernel.models.account import Account

logger = get_logger("audit.account")

_MESSAGES = {
    HookEvent.LOAD: "account_loaded",
    HookEvent.SAVE_OR_UPDATE: "account_saved_or_updated",
    HookEvent.REFRESH: "account_refreshed",
}


def account_snapshot(account: Account) -> dict[str, Any]:
    """Current column values of ``account``; relationships are not touched."""
    return {
        "account_id": account.account_id,
        "account_number": account.account_number,
        "account_balance": account.account_balance,
        "account_type": account.account_type.value if account.account_type else None,
        "customer_id": account.customer_id,
    }


def _log_account(entity: Any, hook_event: HookEvent) -> None:
    if not isinstance(entity, Account):
        return
    logger.info(
        _MESSAGES[hook_event],
        extra={"hook_event": hook_event.value, **account_snapshot(entity)},
    )


def log_on_load(entity: Any, hook_event: HookEvent) -> None:
    _log_account(entity, hook_event)


def log_on_save_or_update(entity: Any, hook_event: HookEvent) -> None:
    _log_account(entity, hook_event)


def log_on_refresh(entity: Any, hook_event: HookEvent) -> None:
    _log_account(entity, hook_event)


def register_audit_hooks(registry: LifecycleHookRegistry) -> None:
    """Register the three account audit hooks (repeat calls are no-ops)."""
    registry.on_after_load(log_on_load)
    registry.on_before_write(log_on_save_or_update)
    registry.on_after_refresh(log_on_refresh)
