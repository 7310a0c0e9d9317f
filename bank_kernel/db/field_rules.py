"""
ORM-Level Field Rule Enforcement.

===============================================================================
WHY THIS EXISTS
===============================================================================

Account type and birthdate are guarded the moment they are assigned.  Every
other shape constraint (customer id pattern, name lengths, phone pattern,
account number range, non-negative balance) is declarative: it is listed in
``bank_kernel.domain.validation.FIELD_RULES`` and enforced here, at the
storage boundary, right before SQL is emitted.

    session.flush()
         |
         v
    [before_insert / before_update] --> check_field_rules() --> FieldValidationError
         |
         v
    SQL sent to database (only if checks pass)

The tables also carry CHECK constraints for the numeric bounds, so rows
written outside the ORM are held to the same rules.

===============================================================================
USAGE
===============================================================================

Called once during startup:

    from bank_kernel.db.field_rules import register_field_rule_listeners
    register_field_rule_listeners()

To temporarily disable (TESTS ONLY):

    unregister_field_rule_listeners()
"""

from sqlalchemy import event

from bank_kernel.db.base import Base
from bank_kernel.domain.validation import FIELD_RULES, check_field_rules
from bank_kernel.exceptions import FieldValidationError
from bank_kernel.logging_config import get_logger

logger = get_logger("db.field_rules")

_enabled = False
_attached = False


def _check_field_rules(mapper, connection, target):
    """Reject the pending INSERT/UPDATE if any declarative rule is broken."""
    if not _enabled:
        return
    entity_type = type(target).entity_type()
    if entity_type not in FIELD_RULES:
        return

    values = {attr.key: getattr(target, attr.key) for attr in mapper.column_attrs}
    violations = check_field_rules(entity_type, values)
    if violations:
        entity_id = target.primary_key_value()
        logger.warning(
            "field_rules_violated",
            extra={
                "entity_type": entity_type,
                "entity_id": entity_id,
                "violations": violations,
            },
        )
        raise FieldValidationError(entity_type, entity_id, violations)


def field_rules_enabled() -> bool:
    return _enabled


def register_field_rule_listeners() -> None:
    """Enable field rule checks on every mapped model (idempotent)."""
    global _enabled, _attached
    if not _attached:
        event.listen(Base, "before_insert", _check_field_rules, propagate=True)
        event.listen(Base, "before_update", _check_field_rules, propagate=True)
        _attached = True
    _enabled = True


def unregister_field_rule_listeners() -> None:
    """
    Disable field rule checks.

    The listeners stay attached to Base and become no-ops until
    register_field_rule_listeners() is called again.

    WARNING: Only use this in tests that need to push invalid rows at the
    database to exercise its CHECK constraints.
    """
    global _enabled
    _enabled = False
