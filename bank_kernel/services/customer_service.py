"""
Service layer for Customer operations.

Manages customers, attaches accounts to their owners, and answers the
"customers holding an account above a balance" query.

Returns CustomerInfo DTOs instead of ORM entities.  A customer's accounts
are reported as a tuple of account ids, not as nested objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from bank_kernel.exceptions import CustomerNotFoundError
from bank_kernel.logging_config import get_logger
from bank_kernel.models.account import Account
from bank_kernel.models.customer import Customer
from bank_kernel.services.account_service import AccountInfo, account_to_dto
from bank_kernel.services.base import BaseService

logger = get_logger("services.customer")


@dataclass(frozen=True)
class CustomerInfo:
    """
    Immutable DTO for customer data.

    Pure domain object, no ORM dependencies.
    """

    customer_id: str
    customer_name: str
    customer_family: str
    customer_address: str | None
    customer_phone: str
    customer_birthday: date
    account_ids: tuple[int, ...]


class CustomerService(BaseService[Customer]):
    """
    Service for managing customers.

    create() is idempotent: creating a customer whose id already exists
    writes nothing and raises nothing.  Every other lookup that finds no
    row raises CustomerNotFoundError.
    """

    def _to_dto(self, customer: Customer) -> CustomerInfo:
        """Convert ORM Customer to CustomerInfo DTO."""
        return CustomerInfo(
            customer_id=customer.customer_id,
            customer_name=customer.customer_name,
            customer_family=customer.customer_family,
            customer_address=customer.customer_address,
            customer_phone=customer.customer_phone,
            customer_birthday=customer.customer_birthday,
            account_ids=customer.account_ids,
        )

    def _get(self, customer_id: str) -> Customer:
        """Get customer by ID, raising if not found."""
        logger.info("customer_lookup", extra={"customer_id": customer_id})
        customer = self.gateway.select_by_id(Customer, customer_id)
        if customer is None:
            logger.warning("customer_not_found", extra={"customer_id": customer_id})
            raise CustomerNotFoundError(customer_id)
        return customer

    def create(self, customer: Customer) -> CustomerInfo:
        """
        Persist a new customer unless one with the same id already exists.

        If the id is taken, the conflict is logged and the stored customer
        is returned unchanged; the caller sees no error.  Accounts already
        attached to ``customer`` are inserted with it by cascade.

        Returns:
            CustomerInfo DTO of the stored customer.

        Raises:
            FieldValidationError: If a field rule is broken.
        """
        try:
            existing = self._get(customer.customer_id)
        except CustomerNotFoundError:
            logger.info("customer_create_started", extra={"customer_id": customer.customer_id})
            self.gateway.insert(customer)
            logger.info("customer_created", extra={"customer_id": customer.customer_id})
            return self._to_dto(customer)

        # TODO: surface this conflict to callers once product decides whether
        # duplicate creates should be rejected.
        logger.warning(
            "customer_already_exists",
            extra={"customer_id": customer.customer_id},
        )
        return self._to_dto(existing)

    def find(self, customer_id: str) -> CustomerInfo:
        """
        Get customer by ID.

        Raises:
            CustomerNotFoundError: If customer doesn't exist.
        """
        return self._to_dto(self._get(customer_id))

    def update(
        self,
        customer_id: str,
        customer_address: str | None,
        customer_phone: str,
    ) -> CustomerInfo:
        """
        Change a customer's address and phone, leaving every other field untouched.

        Raises:
            CustomerNotFoundError: If customer doesn't exist.
            FieldValidationError: If the new address or phone breaks a field rule.
        """
        logger.info("customer_update_started", extra={"customer_id": customer_id})
        customer = self._get(customer_id)
        customer.customer_address = customer_address
        customer.customer_phone = customer_phone
        customer = self.gateway.merge(customer)
        self.gateway.refresh(customer)
        logger.info("customer_updated", extra={"customer_id": customer_id})
        return self._to_dto(customer)

    def delete(self, customer_id: str) -> None:
        """
        Delete a customer, and with it every account it owns.

        Raises:
            CustomerNotFoundError: If customer doesn't exist.
        """
        logger.info("customer_delete_started", extra={"customer_id": customer_id})
        self._get(customer_id)
        self.gateway.delete_by_id(Customer, customer_id)
        logger.info("customer_deleted", extra={"customer_id": customer_id})

    def add_account(self, customer_id: str, account: Account) -> AccountInfo:
        """
        Attach ``account`` to the customer and write both in one flush.

        ``account`` may be transient (it is inserted by cascade) or already
        managed by this session (it is moved from its previous owner).

        Raises:
            CustomerNotFoundError: If customer doesn't exist.
        """
        customer = self._get(customer_id)
        customer.add_account(account)
        self.session.flush()
        logger.info(
            "account_attached",
            extra={"customer_id": customer_id, "account_id": account.account_id},
        )
        return account_to_dto(account)

    def find_customers_with_balance(self, threshold: float) -> list[CustomerInfo]:
        """
        Customers owning at least one account whose balance is strictly above ``threshold``.

        Each qualifying customer appears once, ordered by customer_id, no
        matter how many of their accounts qualify.
        """
        logger.info("customers_with_balance_lookup", extra={"threshold": threshold})
        customers = self.gateway.customers_with_balance_above(threshold)

        # Each customer at most once, even if the join yields duplicates.
        seen: set[str] = set()
        unique: list[Customer] = []
        for customer in customers:
            if customer.customer_id not in seen:
                seen.add(customer.customer_id)
                unique.append(customer)

        logger.info(
            "customers_with_balance_found",
            extra={"threshold": threshold, "count": len(unique)},
        )
        return [self._to_dto(c) for c in unique]
