"""
BankingFacade -- the call boundary used by transport adapters.

Responsibility:
    Exposes the account and customer operations as single calls, each
    running in its own unit of work: a fresh session, committed when the
    operation returns and rolled back when it raises.  REST/SOAP adapters
    translate wire payloads to these calls and map the typed errors to
    their own status codes.

Architecture position:
    Kernel > Services -- outermost layer of the kernel.  Owns transaction
    boundaries; the services it delegates to only flush.

Invariants enforced:
    - One call, one transaction.  No state survives between calls, so a
      facade may be shared by concurrent callers.
    - Errors propagate unchanged after rollback.
    - Every log record emitted during a call carries that call's
      correlation_id, operation and entity_id.
"""

from typing import Callable, TypeVar
from uuid import uuid4

from sqlalchemy.orm import Session, sessionmaker

from bank_kernel.db.engine import session_scope
from bank_kernel.logging_config import LogContext, get_logger
from bank_kernel.models.account import Account
from bank_kernel.models.customer import Customer
from bank_kernel.services.account_service import AccountInfo, AccountService
from bank_kernel.services.customer_service import CustomerInfo, CustomerService

logger = get_logger("services.facade")

T = TypeVar("T")


class BankingFacade:
    """Per-call transactional wrapper over AccountService and CustomerService."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None):
        self._session_factory = session_factory

    def _run(self, operation: str, entity_id: object, fn: Callable[[Session], T]) -> T:
        with LogContext.bind(
            correlation_id=uuid4().hex,
            operation=operation,
            entity_id=str(entity_id),
        ):
            with session_scope(self._session_factory) as session:
                return fn(session)

    # Accounts

    def create_account(self, account: Account) -> AccountInfo:
        return self._run(
            "create_account", account.account_id,
            lambda s: AccountService(s).create(account),
        )

    def find_account(self, account_id: int) -> AccountInfo:
        return self._run(
            "find_account", account_id,
            lambda s: AccountService(s).find(account_id),
        )

    def update_account(self, account_id: int, account_number: int) -> AccountInfo:
        return self._run(
            "update_account", account_id,
            lambda s: AccountService(s).update(account_id, account_number),
        )

    def delete_account(self, account_id: int) -> None:
        self._run(
            "delete_account", account_id,
            lambda s: AccountService(s).delete(account_id),
        )

    # Customers

    def create_customer(self, customer: Customer) -> CustomerInfo:
        return self._run(
            "create_customer", customer.customer_id,
            lambda s: CustomerService(s).create(customer),
        )

    def find_customer(self, customer_id: str) -> CustomerInfo:
        return self._run(
            "find_customer", customer_id,
            lambda s: CustomerService(s).find(customer_id),
        )

    def update_customer(
        self,
        customer_id: str,
        customer_address: str | None,
        customer_phone: str,
    ) -> CustomerInfo:
        return self._run(
            "update_customer", customer_id,
            lambda s: CustomerService(s).update(customer_id, customer_address, customer_phone),
        )

    def delete_customer(self, customer_id: str) -> None:
        self._run(
            "delete_customer", customer_id,
            lambda s: CustomerService(s).delete(customer_id),
        )

    def add_account(self, customer_id: str, account: Account) -> AccountInfo:
        return self._run(
            "add_account", customer_id,
            lambda s: CustomerService(s).add_account(customer_id, account),
        )

    def find_customers_with_balance(self, threshold: float) -> list[CustomerInfo]:
        return self._run(
            "find_customers_with_balance", threshold,
            lambda s: CustomerService(s).find_customers_with_balance(threshold),
        )
