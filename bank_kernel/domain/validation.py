"""
Lightweight domain validation helpers.

Pure checks with no I/O.  Two families live here:

- Typed validators (``validate_account_type``, ``validate_birthdate``) run
  at construction and on every mutation of the guarded attribute, and raise
  the matching typed exception.
- Declarative field rules (``FIELD_RULES``) describe the length, pattern and
  range bounds of every persisted column.  They are evaluated at the storage
  boundary by ``bank_kernel.db.field_rules``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from bank_kernel.domain.account_type import AccountType
from bank_kernel.exceptions import BirthdateError

MIN_BIRTH_YEAR_EXCLUSIVE = 1900

ACCOUNT_NUMBER_MIN = 1000
ACCOUNT_NUMBER_MAX = 999_999_999

CUSTOMER_ID_PATTERN = r"[0-9]{10}"
CUSTOMER_PHONE_PATTERN = r"0[0-9]{10}"


def validate_account_type(value: object) -> AccountType:
    """Return value as an AccountType; raise AccountTypeError otherwise."""
    return AccountType.parse(value)


def validate_birthdate(value: object) -> date:
    """
    Return value as a date whose year is strictly after 1900.

    Raises:
        BirthdateError: If value is not a date or its year is <= 1900.
    """
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        raise BirthdateError(value, MIN_BIRTH_YEAR_EXCLUSIVE)
    if value.year <= MIN_BIRTH_YEAR_EXCLUSIVE:
        raise BirthdateError(value, MIN_BIRTH_YEAR_EXCLUSIVE)
    return value


def is_valid_balance(balance: float) -> bool:
    return math.isfinite(balance) and balance >= 0


def is_valid_account_number(number: int) -> bool:
    return ACCOUNT_NUMBER_MIN <= number <= ACCOUNT_NUMBER_MAX


def is_valid_customer_id(customer_id: str) -> bool:
    return re.fullmatch(CUSTOMER_ID_PATTERN, customer_id) is not None


def is_valid_phone(phone: str) -> bool:
    return re.fullmatch(CUSTOMER_PHONE_PATTERN, phone) is not None


# ---------------------------------------------------------------------------
# Declarative field rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldRule:
    """
    Shape constraint for one persisted attribute.

    Contract:
        ``check(value)`` returns None when the value satisfies every bound
        that is set, or the rule's message otherwise.  A None value passes
        only when ``required`` is False.  A value of the wrong kind for the
        rule's bounds (a non-string for length/pattern, a bool or
        non-number for minimum/maximum) fails with the rule's message.
        With ``finite`` set, NaN and infinities fail too.
    """

    field: str
    message: str
    required: bool = True
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    finite: bool = False

    @property
    def is_textual(self) -> bool:
        return (
            self.min_length is not None
            or self.max_length is not None
            or self.pattern is not None
        )

    @property
    def is_numeric(self) -> bool:
        return self.minimum is not None or self.maximum is not None or self.finite

    def check(self, value: Any) -> str | None:
        if value is None:
            return None if not self.required else f"{self.field} cannot be null"
        if self.is_textual and not isinstance(value, str):
            return self.message
        if self.is_numeric:
            if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
                return self.message
            if self.finite and not math.isfinite(value):
                return self.message
        if self.min_length is not None and len(value) < self.min_length:
            return self.message
        if self.max_length is not None and len(value) > self.max_length:
            return self.message
        if self.pattern is not None and re.fullmatch(self.pattern, value) is None:
            return self.message
        if self.minimum is not None and value < self.minimum:
            return self.message
        if self.maximum is not None and value > self.maximum:
            return self.message
        return None


FIELD_RULES: dict[str, tuple[FieldRule, ...]] = {
    "Account": (
        FieldRule("account_id", "Account ID cannot be null"),
        FieldRule(
            "account_number",
            f"Account number must be between {ACCOUNT_NUMBER_MIN} and {ACCOUNT_NUMBER_MAX}",
            minimum=ACCOUNT_NUMBER_MIN,
            maximum=ACCOUNT_NUMBER_MAX,
        ),
        FieldRule(
            "account_balance",
            "Account balance must be greater than or equal to 0.0",
            minimum=0.0,
            finite=True,
        ),
        FieldRule("account_type", "Account type cannot be null"),
    ),
    "Customer": (
        FieldRule(
            "customer_id",
            "Customer ID must be exactly 10 digits",
            pattern=CUSTOMER_ID_PATTERN,
        ),
        FieldRule(
            "customer_name",
            "Customer name must be between 2 and 50 characters",
            min_length=2,
            max_length=50,
        ),
        FieldRule(
            "customer_family",
            "Customer family must be between 2 and 50 characters",
            min_length=2,
            max_length=50,
        ),
        FieldRule(
            "customer_address",
            "Customer address must be less than 255 characters",
            required=False,
            max_length=255,
        ),
        FieldRule(
            "customer_phone",
            "Customer phone must be 11 digits and start with '0'",
            pattern=CUSTOMER_PHONE_PATTERN,
        ),
    ),
}


def check_field_rules(entity_type: str, values: Mapping[str, Any]) -> list[str]:
    """
    Evaluate every rule registered for ``entity_type`` against ``values``.

    Returns:
        The list of violation messages, empty when all rules pass.
    """
    violations = []
    for rule in FIELD_RULES.get(entity_type, ()):
        message = rule.check(values.get(rule.field))
        if message is not None:
            violations.append(message)
    return violations
