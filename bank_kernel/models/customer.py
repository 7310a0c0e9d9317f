"""
Module: bank_kernel.models.customer
Responsibility: ORM persistence for customers, the exclusive owners of their
    accounts.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/.  MUST NOT import from services/.

Invariants enforced:
    - customer_birthday year > 1900, checked in __init__ and on every
      assignment (BirthdateError).
    - customer_id (10 digits), name/family (2-50 chars), address (<= 255
      chars) and phone ("0" + 10 digits) are declarative rules checked on
      write by db/field_rules.py.
    - accounts are owned: "all, delete-orphan" cascade, and the database
      FK deletes accounts with their customer.

Failure modes:
    - BirthdateError on construction or assignment of an invalid birthdate.
    - FieldValidationError on flush when a field rule is broken.
    - IntegrityError on duplicate customer_id.
"""

from datetime import date
from typing import Any

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from bank_kernel.db.base import Base
from bank_kernel.domain.validation import validate_birthdate
from bank_kernel.models.account import Account


class Customer(Base):
    """
    A bank customer and the aggregate root over their accounts.

    Contract:
        add_account() is the only supported way to attach an account; it
        sets the back reference and the collection entry together.
    """

    __tablename__ = "customer"

    __table_args__ = (
        Index("idx_customer_family", "customer_family"),
    )

    customer_id: Mapped[str] = mapped_column(String(10), primary_key=True)

    customer_name: Mapped[str] = mapped_column(String(50), nullable=False)

    customer_family: Mapped[str] = mapped_column(String(50), nullable=False)

    customer_address: Mapped[str | None] = mapped_column(String(255), nullable=True)

    customer_phone: Mapped[str] = mapped_column(String(11), nullable=False)

    customer_birthday: Mapped[date] = mapped_column(nullable=False)

    accounts: Mapped[list["Account"]] = relationship(
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by=Account.account_id,
    )

    def __init__(
        self,
        customer_id: str,
        customer_name: str,
        customer_family: str,
        customer_address: str | None,
        customer_phone: str,
        customer_birthday: date,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.customer_id = customer_id
        self.customer_name = customer_name
        self.customer_family = customer_family
        self.customer_address = customer_address
        self.customer_phone = customer_phone
        self.customer_birthday = customer_birthday

    @validates("customer_birthday")
    def _validate_birthday(self, key: str, value: object) -> date:
        return validate_birthdate(value)

    def add_account(self, account: Account) -> None:
        """Attach ``account`` to this customer, moving it from any previous owner."""
        if account not in self.accounts:
            self.accounts.append(account)
        account.customer = self

    @property
    def account_ids(self) -> tuple[int, ...]:
        return tuple(a.account_id for a in self.accounts)

    def __repr__(self) -> str:
        return f"<Customer {self.customer_id}: {self.customer_name} {self.customer_family}>"
