"""
Module: bank_kernel.db.gateway
Responsibility: The persistence gateway.  Services reach the store only
    through named operations (parameterized statements looked up by name)
    and the generic insert / merge / refresh primitives defined here.
Architecture position: Kernel > DB.  May import from db/ and models/.
    MUST NOT import from services/.

Invariants enforced:
    - Named operations are registered once, at import time, in
      NAMED_OPERATIONS.  execute_named() never builds ad hoc statements.
    - customer.with_balance_above returns each qualifying customer exactly
      once (SELECT DISTINCT over the customer/account join).
    - customer.delete_by_id removes the customer's accounts in the same
      unit of work before removing the customer.
    - The gateway flushes; it never commits or rolls back.

Failure modes:
    - UnknownOperationError for an unregistered operation name.
    - IntegrityError / OperationalError propagate unmodified.
    - Anything raised by a lifecycle hook during load/flush/refresh
      propagates unmodified.
"""

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from bank_kernel.db.base import Base
from bank_kernel.exceptions import UnknownOperationError
from bank_kernel.logging_config import get_logger
from bank_kernel.models.account import Account
from bank_kernel.models.customer import Customer

logger = get_logger("db.gateway")

EntityT = TypeVar("EntityT", bound=Base)


class OperationKind:
    """How a named operation's statement is executed."""

    SELECT_ONE = "select_one"
    SELECT_MANY = "select_many"
    WRITE = "write"


@dataclass(frozen=True)
class NamedOperation:
    """
    A parameterized statement registered under a stable name.

    ``build`` receives the keyword parameters given to execute_named() and
    returns an executable SQLAlchemy statement (or a sequence of them for
    multi-statement writes).
    """

    name: str
    kind: str
    build: Callable[..., Any]


def _select_account(id: int):
    return select(Account).where(Account.account_id == id)


def _delete_account(id: int):
    return delete(Account).where(Account.account_id == id)


def _update_account_number(id: int, account_number: int):
    return (
        update(Account)
        .where(Account.account_id == id)
        .values(account_number=account_number)
    )


def _select_customer(id: str):
    return select(Customer).where(Customer.customer_id == id)


def _delete_customer(id: str):
    return (
        delete(Account).where(Account.customer_id == id),
        delete(Customer).where(Customer.customer_id == id),
    )


def _update_customer_contact(id: str, customer_address: str | None, customer_phone: str):
    return (
        update(Customer)
        .where(Customer.customer_id == id)
        .values(customer_address=customer_address, customer_phone=customer_phone)
    )


def _customers_with_balance_above(balance: float):
    return (
        select(Customer)
        .join(Customer.accounts)
        .where(Account.account_balance > balance)
        .distinct()
        .order_by(Customer.customer_id)
    )


NAMED_OPERATIONS: dict[str, NamedOperation] = {
    op.name: op
    for op in (
        NamedOperation("account.select_by_id", OperationKind.SELECT_ONE, _select_account),
        NamedOperation("account.delete_by_id", OperationKind.WRITE, _delete_account),
        NamedOperation("account.update_number_by_id", OperationKind.WRITE, _update_account_number),
        NamedOperation("customer.select_by_id", OperationKind.SELECT_ONE, _select_customer),
        NamedOperation("customer.delete_by_id", OperationKind.WRITE, _delete_customer),
        NamedOperation("customer.update_contact_by_id", OperationKind.WRITE, _update_customer_contact),
        NamedOperation(
            "customer.with_balance_above",
            OperationKind.SELECT_MANY,
            _customers_with_balance_above,
        ),
    )
}


class PersistenceGateway:
    """
    Session-bound access to the store.

    Contract:
        Accepts a SQLAlchemy Session from the caller and executes named
        operations and generic writes inside the caller's transaction.

    Guarantees:
        - SELECT_ONE operations return an entity or None.
        - SELECT_MANY operations return a list of entities.
        - WRITE operations return the number of rows affected (summed over
          multi-statement writes).

    Non-goals:
        - Does NOT translate "no row" into domain errors; services do that.
    """

    def __init__(self, session: Session):
        self.session = session

    def execute_named(self, name: str, **params: Any) -> Any:
        operation = NAMED_OPERATIONS.get(name)
        if operation is None:
            raise UnknownOperationError(name)

        logger.debug("named_operation_executing", extra={"operation": name})
        built = operation.build(**params)

        if operation.kind == OperationKind.SELECT_ONE:
            return self.session.execute(built).scalar_one_or_none()
        if operation.kind == OperationKind.SELECT_MANY:
            return list(self.session.execute(built).scalars().all())

        statements = built if isinstance(built, tuple) else (built,)
        rowcount = 0
        for statement in statements:
            result = self.session.execute(statement)
            rowcount += result.rowcount
        return rowcount

    # ------------------------------------------------------------------
    # Named-operation shortcuts
    # ------------------------------------------------------------------

    def select_by_id(self, entity_type: type[EntityT], id: Any) -> EntityT | None:
        return self.execute_named(f"{_prefix(entity_type)}.select_by_id", id=id)

    def delete_by_id(self, entity_type: type[Base], id: Any) -> int:
        return self.execute_named(f"{_prefix(entity_type)}.delete_by_id", id=id)

    def update_account_number(self, id: int, account_number: int) -> int:
        return self.execute_named(
            "account.update_number_by_id", id=id, account_number=account_number
        )

    def update_customer_contact(
        self, id: str, customer_address: str | None, customer_phone: str
    ) -> int:
        return self.execute_named(
            "customer.update_contact_by_id",
            id=id,
            customer_address=customer_address,
            customer_phone=customer_phone,
        )

    def customers_with_balance_above(self, threshold: float) -> list[Customer]:
        return self.execute_named("customer.with_balance_above", balance=threshold)

    # ------------------------------------------------------------------
    # Generic writes
    # ------------------------------------------------------------------

    def insert(self, entity: EntityT) -> EntityT:
        """Add a transient entity and flush it (INSERT)."""
        self.session.add(entity)
        self.session.flush()
        return entity

    def merge(self, entity: EntityT) -> EntityT:
        """Merge entity state into the session and flush it (UPDATE or INSERT)."""
        merged = self.session.merge(entity)
        self.session.flush()
        return merged

    def refresh(self, entity: EntityT) -> EntityT:
        """Reload entity state from the store."""
        self.session.refresh(entity)
        return entity


def _prefix(entity_type: type[Base]) -> str:
    return entity_type.entity_type().lower()
