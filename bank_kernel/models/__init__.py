"""ORM models for customers and accounts."""

from bank_kernel.models.account import Account
from bank_kernel.models.customer import Customer

__all__ = [
    "Account",
    "Customer",
]
