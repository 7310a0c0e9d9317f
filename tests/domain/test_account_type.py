"""
Tests for AccountType.

Verifies:
- The enumeration is closed: exactly four members
- parse() accepts members and exact member names only
- Stable ordinal numbers
"""

from enum import Enum

import pytest

from bank_kernel.domain.account_type import AccountType, parse_account_type
from bank_kernel.exceptions import AccountTypeError


class TestAccountTypeMembers:
    """The closed set of account types."""

    def test_exactly_four_members(self):
        assert [t.name for t in AccountType] == [
            "SAVING",
            "CHECKING",
            "CURRENT",
            "BUSINESS",
        ]

    def test_value_equals_name(self):
        for member in AccountType:
            assert member.value == member.name

    def test_numbers(self):
        assert AccountType.SAVING.number == 1
        assert AccountType.CHECKING.number == 2
        assert AccountType.CURRENT.number == 3
        assert AccountType.BUSINESS.number == 4


class TestAccountTypeParse:
    """AccountType.parse()."""

    @pytest.mark.parametrize("member", list(AccountType))
    def test_member_passes_through(self, member):
        assert AccountType.parse(member) is member

    @pytest.mark.parametrize("name", ["SAVING", "CHECKING", "CURRENT", "BUSINESS"])
    def test_exact_name(self, name):
        assert AccountType.parse(name) is AccountType[name]

    @pytest.mark.parametrize("value", ["saving", "Checking", "SAVINGS", " CURRENT", ""])
    def test_unknown_name_rejected(self, value):
        with pytest.raises(AccountTypeError) as exc_info:
            AccountType.parse(value)
        assert exc_info.value.value == value
        assert exc_info.value.code == "ACCOUNT_TYPE_INVALID"

    @pytest.mark.parametrize("value", [None, 1, 2.0, object()])
    def test_non_string_rejected(self, value):
        with pytest.raises(AccountTypeError):
            AccountType.parse(value)

    def test_foreign_str_enum_rejected(self):
        """A str-valued enum from another type is not an AccountType, even by name."""

        class OtherType(str, Enum):
            SAVING = "SAVING"

        with pytest.raises(AccountTypeError):
            AccountType.parse(OtherType.SAVING)

    def test_module_alias(self):
        assert parse_account_type("BUSINESS") is AccountType.BUSINESS
