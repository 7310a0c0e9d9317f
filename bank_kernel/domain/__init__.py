"""Domain layer - pure value types and validation with no ORM or I/O."""

from bank_kernel.domain.account_type import AccountType, parse_account_type
from bank_kernel.domain.validation import (
    FIELD_RULES,
    FieldRule,
    check_field_rules,
    validate_account_type,
    validate_birthdate,
)

__all__ = [
    "AccountType",
    "parse_account_type",
    "FIELD_RULES",
    "FieldRule",
    "check_field_rules",
    "validate_account_type",
    "validate_birthdate",
]
