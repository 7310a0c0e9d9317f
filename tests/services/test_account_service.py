"""
Tests for AccountService.

Covers:
- Create and find (including the account 101 / CHECKING scenario)
- Update changes only the account number
- Delete, including accounts owned by a customer
- Not-found handling and duplicate ids
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import FlushError

from bank_kernel.domain.account_type import AccountType
from bank_kernel.exceptions import AccountNotFoundError, FieldValidationError
from bank_kernel.services.account_service import AccountInfo, AccountService
from bank_kernel.services.customer_service import CustomerService


@pytest.fixture
def account_service(session):
    return AccountService(session)


class TestAccountCreate:
    """AccountService.create()."""

    def test_create_and_find(self, account_service, make_account):
        created = account_service.create(make_account())

        assert created == AccountInfo(
            account_id=101,
            account_number=123456,
            account_balance=5_000_000.0,
            account_type=AccountType.CHECKING,
            customer_id=None,
        )
        assert account_service.find(101) == created

    def test_find_after_reload(self, session, account_service, make_account):
        account_service.create(make_account(account_type=AccountType.BUSINESS))
        session.expunge_all()

        found = account_service.find(101)
        assert found.account_type is AccountType.BUSINESS
        assert found.account_balance == 5_000_000.0

    def test_invalid_rule_rejected(self, account_service, make_account):
        with pytest.raises(FieldValidationError):
            account_service.create(make_account(account_number=12))

    @pytest.mark.parametrize("balance", [float("nan"), float("inf")])
    def test_non_finite_balance_rejected(self, account_service, make_account, balance):
        with pytest.raises(FieldValidationError):
            account_service.create(make_account(account_balance=balance))

    def test_duplicate_id_fails_in_store(self, session, account_service, make_account):
        account_service.create(make_account())
        session.expunge_all()

        with pytest.raises((IntegrityError, FlushError)):
            account_service.create(make_account(account_number=654321))

    def test_create_logged(self, account_service, make_account, captured_logs):
        account_service.create(make_account())
        messages = [r["message"] for r in captured_logs()]
        assert "account_create_started" in messages
        assert "account_created" in messages


class TestAccountFind:
    """AccountService.find()."""

    def test_not_found(self, account_service):
        with pytest.raises(AccountNotFoundError) as exc_info:
            account_service.find(404)
        assert exc_info.value.account_id == 404
        assert exc_info.value.code == "ACCOUNT_NOT_FOUND"

    def test_not_found_logged(self, account_service, captured_logs):
        with pytest.raises(AccountNotFoundError):
            account_service.find(404)

        records = [r for r in captured_logs() if r["message"] == "account_not_found"]
        assert records[0]["level"] == "WARNING"
        assert records[0]["account_id"] == 404


class TestAccountUpdate:
    """AccountService.update()."""

    def test_only_number_changes(self, session, account_service, make_account):
        account_service.create(make_account())

        updated = account_service.update(101, 654321)

        assert updated.account_number == 654321
        assert updated.account_balance == 5_000_000.0
        assert updated.account_type is AccountType.CHECKING
        session.expunge_all()
        assert account_service.find(101) == updated

    def test_update_missing(self, account_service):
        with pytest.raises(AccountNotFoundError):
            account_service.update(404, 654321)

    def test_update_out_of_range(self, account_service, make_account):
        account_service.create(make_account())
        with pytest.raises(FieldValidationError):
            account_service.update(101, 1_000_000_000)


class TestAccountDelete:
    """AccountService.delete()."""

    def test_delete(self, account_service, make_account):
        account_service.create(make_account())

        account_service.delete(101)

        with pytest.raises(AccountNotFoundError):
            account_service.find(101)

    def test_delete_missing(self, account_service):
        with pytest.raises(AccountNotFoundError):
            account_service.delete(404)

    def test_delete_owned_account(self, session, account_service, make_customer, make_account):
        customers = CustomerService(session)
        customers.create(make_customer())
        customers.add_account("0012345678", make_account(account_id=101))
        customers.add_account(
            "0012345678", make_account(account_id=102, account_number=223344)
        )

        account_service.delete(101)

        assert customers.find("0012345678").account_ids == (102,)
