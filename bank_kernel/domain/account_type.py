"""
Module: bank_kernel.domain.account_type
Responsibility: The closed set of account types and the one sanctioned way
    of turning external input into a member of that set.
Architecture position: Kernel > Domain.  Pure; MUST NOT import from db/,
    models/ or services/.

Invariants enforced:
    - Exactly four members: SAVING, CHECKING, CURRENT, BUSINESS.
    - parse() accepts a member or its exact (case-sensitive) name and
      nothing else.

Failure modes:
    - AccountTypeError for None, unknown names, or values of foreign types.
"""

from __future__ import annotations

from enum import Enum

from bank_kernel.exceptions import AccountTypeError


class AccountType(str, Enum):
    """Classification of bank accounts.

    Contract: Every Account has exactly one AccountType.  The string value
    equals the member name so the stored form and the wire form match.
    """

    SAVING = "SAVING"
    CHECKING = "CHECKING"
    CURRENT = "CURRENT"
    BUSINESS = "BUSINESS"

    @property
    def number(self) -> int:
        """Stable ordinal used by reporting (SAVING=1 ... BUSINESS=4)."""
        return _TYPE_NUMBERS[self]

    @classmethod
    def parse(cls, value: object) -> AccountType:
        """
        Parse ``value`` into an AccountType.

        Preconditions: none; any object may be passed.
        Postconditions: Returns the matching member.

        Raises:
            AccountTypeError: If value is not a member or a member's name.
        """
        if isinstance(value, cls):
            return value
        # Plain strings only; str-valued enums from elsewhere are rejected.
        if type(value) is str:
            member = cls.__members__.get(value)
            if member is not None:
                return member
        raise AccountTypeError(value)


_TYPE_NUMBERS: dict[AccountType, int] = {
    AccountType.SAVING: 1,
    AccountType.CHECKING: 2,
    AccountType.CURRENT: 3,
    AccountType.BUSINESS: 4,
}


def parse_account_type(value: object) -> AccountType:
    """Module-level alias for AccountType.parse."""
    return AccountType.parse(value)
