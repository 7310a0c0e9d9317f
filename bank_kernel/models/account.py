"""
Module: bank_kernel.models.account
Responsibility: ORM persistence for bank accounts.  An Account belongs to at
    most one Customer and is reached either directly by account_id or through
    its owner's ``accounts`` collection.
Architecture position: Kernel > Models.  May import from db/base.py and
    domain/.  MUST NOT import from services/.

Invariants enforced:
    - account_type is a member of AccountType, checked in __init__ and on
      every assignment (AccountTypeError).
    - account_number in [1000, 999_999_999] and account_balance >= 0 are
      declarative rules checked on write by db/field_rules.py and backed by
      CHECK constraints.
    - customer, once set, points to the Customer whose ``accounts``
      collection holds this account (maintained by back_populates).

Failure modes:
    - AccountTypeError on construction or assignment of an invalid type.
    - FieldValidationError on flush when a field rule is broken.
    - IntegrityError on duplicate account_id.
"""

from typing import TYPE_CHECKING, Any

from sqlalchemy import BigInteger, CheckConstraint, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from bank_kernel.db.base import Base
from bank_kernel.domain.account_type import AccountType
from bank_kernel.domain.validation import (
    ACCOUNT_NUMBER_MAX,
    ACCOUNT_NUMBER_MIN,
    validate_account_type,
)

if TYPE_CHECKING:
    from bank_kernel.models.customer import Customer


class Account(Base):
    """
    A customer's bank account.

    Contract:
        Constructed transient with all four value fields; the type is
        validated immediately.  Persisted through AccountService.create
        or by cascade from its owning Customer.

    Non-goals:
        - Balance arithmetic (deposits, withdrawals) is not modelled here.
    """

    __tablename__ = "account"

    __table_args__ = (
        CheckConstraint(
            f"account_number BETWEEN {ACCOUNT_NUMBER_MIN} AND {ACCOUNT_NUMBER_MAX}",
            name="ck_account_number_range",
        ),
        CheckConstraint("account_balance >= 0", name="ck_account_balance_non_negative"),
        Index("idx_account_customer", "customer_id"),
        Index("idx_account_balance", "account_balance"),
    )

    account_id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=False,
    )

    account_number: Mapped[int] = mapped_column(nullable=False)

    account_balance: Mapped[float] = mapped_column(nullable=False)

    # Stored by member name
    account_type: Mapped[AccountType] = mapped_column(
        Enum(AccountType, native_enum=False, length=20, validate_strings=True),
        nullable=False,
    )

    # Owner reference; NULL until the account is attached
    customer_id: Mapped[str | None] = mapped_column(
        String(10),
        ForeignKey("customer.customer_id", ondelete="CASCADE"),
        nullable=True,
    )

    customer: Mapped["Customer | None"] = relationship(back_populates="accounts")

    def __init__(
        self,
        account_id: int,
        account_number: int,
        account_balance: float,
        account_type: "AccountType | str",
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.account_id = account_id
        self.account_number = account_number
        self.account_balance = account_balance
        self.account_type = account_type

    @validates("account_type")
    def _validate_account_type(self, key: str, value: object) -> AccountType:
        return validate_account_type(value)

    def __repr__(self) -> str:
        account_type = self.account_type.value if self.account_type else None
        return (
            f"<Account {self.account_id}: number={self.account_number}, "
            f"balance={self.account_balance}, type={account_type}>"
        )
