"""
Service layer for Account operations.

Create, find, update and delete accounts by account_id.  Returns AccountInfo
DTOs instead of ORM entities so callers cannot mutate managed state
directly; every change goes through a service method.
"""

from __future__ import annotations

from dataclasses import dataclass

from bank_kernel.domain.account_type import AccountType
from bank_kernel.exceptions import AccountNotFoundError
from bank_kernel.logging_config import get_logger
from bank_kernel.models.account import Account
from bank_kernel.services.base import BaseService

logger = get_logger("services.account")


@dataclass(frozen=True)
class AccountInfo:
    """
    Immutable DTO for account data.

    Pure domain object, no ORM dependencies.  The owner is referenced by id.
    """

    account_id: int
    account_number: int
    account_balance: float
    account_type: AccountType
    customer_id: str | None


def account_to_dto(account: Account) -> AccountInfo:
    """Convert ORM Account to AccountInfo DTO."""
    return AccountInfo(
        account_id=account.account_id,
        account_number=account.account_number,
        account_balance=account.account_balance,
        account_type=account.account_type,
        customer_id=account.customer_id,
    )


class AccountService(BaseService[Account]):
    """
    Service for managing accounts.

    Lookups that find no row raise AccountNotFoundError.  create() performs
    no existence pre-check: a duplicate account_id fails in the store with
    an IntegrityError, which is not translated.
    """

    def _get(self, account_id: int) -> Account:
        """Get account by ID, raising if not found."""
        logger.info("account_lookup", extra={"account_id": account_id})
        account = self.gateway.select_by_id(Account, account_id)
        if account is None:
            logger.warning("account_not_found", extra={"account_id": account_id})
            raise AccountNotFoundError(account_id)
        return account

    def create(self, account: Account) -> AccountInfo:
        """
        Persist a new account.

        Args:
            account: Transient Account; its type was validated on construction.

        Returns:
            AccountInfo DTO of the stored account.

        Raises:
            FieldValidationError: If a field rule is broken.
            IntegrityError: If account_id already exists.
        """
        logger.info("account_create_started", extra={"account_id": account.account_id})
        self.gateway.insert(account)
        logger.info("account_created", extra={"account_id": account.account_id})
        return account_to_dto(account)

    def find(self, account_id: int) -> AccountInfo:
        """
        Get account by ID.

        Raises:
            AccountNotFoundError: If account doesn't exist.
        """
        return account_to_dto(self._get(account_id))

    def update(self, account_id: int, account_number: int) -> AccountInfo:
        """
        Change an account's number, leaving every other field untouched.

        Read-modify-write: the account is loaded, mutated, merged back and
        then refreshed so the returned DTO reflects the stored row.

        Raises:
            AccountNotFoundError: If account doesn't exist.
        """
        logger.info("account_update_started", extra={"account_id": account_id})
        account = self._get(account_id)
        account.account_number = account_number
        account = self.gateway.merge(account)
        self.gateway.refresh(account)
        logger.info(
            "account_updated",
            extra={"account_id": account_id, "account_number": account_number},
        )
        return account_to_dto(account)

    def delete(self, account_id: int) -> None:
        """
        Delete an account after confirming it exists.

        Raises:
            AccountNotFoundError: If account doesn't exist.
        """
        logger.info("account_delete_started", extra={"account_id": account_id})
        owner = self._get(account_id).customer
        self.gateway.delete_by_id(Account, account_id)
        if owner is not None:
            # The owner's in-session collection still lists the deleted row.
            self.session.expire(owner, ["accounts"])
        logger.info("account_deleted", extra={"account_id": account_id})
