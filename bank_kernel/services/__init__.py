"""Kernel services - stateless business operations over the persistence gateway."""

from bank_kernel.services.account_service import AccountInfo, AccountService
from bank_kernel.services.audit_hooks import register_audit_hooks
from bank_kernel.services.banking_facade import BankingFacade
from bank_kernel.services.customer_service import CustomerInfo, CustomerService

__all__ = [
    "AccountInfo",
    "AccountService",
    "CustomerInfo",
    "CustomerService",
    "BankingFacade",
    "register_audit_hooks",
]
