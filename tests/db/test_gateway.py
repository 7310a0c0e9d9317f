"""
Tests for the PersistenceGateway and its named operations.

Verifies:
- Every named operation is registered under its stable name
- SELECT_ONE / SELECT_MANY / WRITE result shapes
- Customer delete removes owned accounts in the same unit of work
- Balance query returns each customer once, ordered by id
"""

import pytest
from sqlalchemy import func, select

from bank_kernel.db.gateway import NAMED_OPERATIONS, OperationKind, PersistenceGateway
from bank_kernel.exceptions import UnknownOperationError
from bank_kernel.models.account import Account
from bank_kernel.models.customer import Customer


@pytest.fixture
def gateway(session):
    return PersistenceGateway(session)


@pytest.fixture
def customer_with_accounts(session, make_customer, make_account):
    customer = make_customer()
    customer.add_account(make_account(account_id=101, account_balance=100.0))
    customer.add_account(
        make_account(account_id=102, account_number=223344, account_balance=900.0)
    )
    session.add(customer)
    session.flush()
    return customer


class TestNamedOperationRegistry:
    """NAMED_OPERATIONS."""

    def test_registered_names(self):
        assert set(NAMED_OPERATIONS) == {
            "account.select_by_id",
            "account.delete_by_id",
            "account.update_number_by_id",
            "customer.select_by_id",
            "customer.delete_by_id",
            "customer.update_contact_by_id",
            "customer.with_balance_above",
        }

    def test_kinds(self):
        assert NAMED_OPERATIONS["account.select_by_id"].kind == OperationKind.SELECT_ONE
        assert NAMED_OPERATIONS["customer.with_balance_above"].kind == OperationKind.SELECT_MANY
        assert NAMED_OPERATIONS["customer.delete_by_id"].kind == OperationKind.WRITE

    def test_unknown_operation(self, gateway):
        with pytest.raises(UnknownOperationError) as exc_info:
            gateway.execute_named("account.drop_table")
        assert exc_info.value.operation == "account.drop_table"
        assert exc_info.value.code == "UNKNOWN_OPERATION"


class TestSelects:
    """select_by_id and customers_with_balance_above."""

    def test_select_missing_returns_none(self, gateway):
        assert gateway.select_by_id(Account, 404) is None
        assert gateway.select_by_id(Customer, "0000000000") is None

    def test_select_account(self, gateway, make_account):
        account = gateway.insert(make_account())
        assert gateway.select_by_id(Account, 101) is account

    def test_select_customer_by_name(self, gateway, customer_with_accounts):
        found = gateway.execute_named("customer.select_by_id", id="0012345678")
        assert found is customer_with_accounts

    def test_balance_above_is_strict(self, gateway, customer_with_accounts):
        assert gateway.customers_with_balance_above(900.0) == []
        assert gateway.customers_with_balance_above(899.99) == [customer_with_accounts]

    def test_balance_above_each_customer_once(
        self, session, gateway, customer_with_accounts, make_customer, make_account
    ):
        other = make_customer(customer_id="0000000001", customer_name="Reza")
        other.add_account(make_account(account_id=201, account_balance=5000.0))
        session.add(other)
        session.flush()

        result = gateway.customers_with_balance_above(50.0)

        assert [c.customer_id for c in result] == ["0000000001", "0012345678"]

    def test_unowned_accounts_not_reported(self, gateway, make_account):
        gateway.insert(make_account(account_balance=10_000.0))
        assert gateway.customers_with_balance_above(0.0) == []


class TestWrites:
    """Named writes and generic primitives."""

    def test_update_account_number(self, gateway, make_account):
        account = gateway.insert(make_account())

        rowcount = gateway.update_account_number(101, 654321)

        assert rowcount == 1
        assert account.account_number == 654321

    def test_update_missing_account_affects_nothing(self, gateway):
        assert gateway.update_account_number(404, 654321) == 0

    def test_update_customer_contact(self, gateway, customer_with_accounts):
        rowcount = gateway.update_customer_contact("0012345678", None, "09350000000")

        assert rowcount == 1
        assert customer_with_accounts.customer_address is None
        assert customer_with_accounts.customer_phone == "09350000000"

    def test_delete_account(self, session, gateway, make_account):
        gateway.insert(make_account())

        assert gateway.delete_by_id(Account, 101) == 1
        assert session.execute(select(func.count()).select_from(Account)).scalar_one() == 0

    def test_delete_customer_removes_accounts(self, session, gateway, customer_with_accounts):
        rowcount = gateway.delete_by_id(Customer, "0012345678")

        assert rowcount == 3
        assert session.execute(select(func.count()).select_from(Account)).scalar_one() == 0
        assert session.execute(select(func.count()).select_from(Customer)).scalar_one() == 0

    def test_merge_detached(self, session, gateway, make_account):
        gateway.insert(make_account())
        session.expunge_all()

        detached = make_account(account_number=777777)
        merged = gateway.merge(detached)

        assert merged is not detached
        assert merged.account_number == 777777
        session.expunge_all()
        assert gateway.select_by_id(Account, 101).account_number == 777777

    def test_refresh_discards_unflushed_change(self, gateway, make_account):
        account = gateway.insert(make_account())
        account.account_balance = 1.0

        gateway.refresh(account)

        assert account.account_balance == 5_000_000.0
