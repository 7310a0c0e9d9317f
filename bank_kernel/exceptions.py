"""
Typed Exception Hierarchy for the Bank Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from BankKernelError:

    BankKernelError (base)
    |
    +-- AccountError
    |   +-- AccountNotFoundError
    |   +-- AccountTypeError
    |
    +-- CustomerError
    |   +-- CustomerNotFoundError
    |   +-- BirthdateError
    |
    +-- ValidationError
    |   +-- FieldValidationError
    |
    +-- GatewayError
        +-- UnknownOperationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                     | When Raised
-----------|--------------------------|------------------------------------------
Account    | ACCOUNT_NOT_FOUND        | select-by-id returned zero rows
           | ACCOUNT_TYPE_INVALID     | Type outside SAVING/CHECKING/CURRENT/BUSINESS
-----------|--------------------------|------------------------------------------
Customer   | CUSTOMER_NOT_FOUND       | select-by-id returned zero rows
           | BIRTHDATE_INVALID        | Birth year is 1900 or earlier
-----------|--------------------------|------------------------------------------
Validation | FIELD_VALIDATION_FAILED  | Length/pattern/range rule broken on write
-----------|--------------------------|------------------------------------------
Gateway    | UNKNOWN_OPERATION        | Named operation is not registered

===============================================================================
HANDLING PATTERNS
===============================================================================

    try:
        service.update(101, 654321)
    except AccountNotFoundError as e:
        api_response(code=e.code, account_id=e.account_id)

Persistence failures (IntegrityError, OperationalError) are NOT part of this
hierarchy.  They propagate from SQLAlchemy unmodified.
"""


class BankKernelError(Exception):
    """
    Base exception for all bank kernel errors.

    All subclasses must have a `code` class attribute for
    machine-readable error identification.
    """

    code: str = "BANK_KERNEL_ERROR"


# Account-related exceptions


class AccountError(BankKernelError):
    """Base exception for account-related errors."""

    code: str = "ACCOUNT_ERROR"


class AccountNotFoundError(AccountError):
    """Account was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Account not found: {account_id}")


class AccountTypeError(AccountError):
    """Account type is not a member of the closed enumeration."""

    code: str = "ACCOUNT_TYPE_INVALID"

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid account type: {value!r}")


# Customer-related exceptions


class CustomerError(BankKernelError):
    """Base exception for customer-related errors."""

    code: str = "CUSTOMER_ERROR"


class CustomerNotFoundError(CustomerError):
    """Customer was not found."""

    code: str = "CUSTOMER_NOT_FOUND"

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer not found: {customer_id}")


class BirthdateError(CustomerError):
    """Customer birthdate is outside the accepted range."""

    code: str = "BIRTHDATE_INVALID"

    def __init__(self, value: object, min_year_exclusive: int = 1900):
        self.value = value
        self.min_year_exclusive = min_year_exclusive
        super().__init__(
            f"Customer birthdate {value!r} must be after the year {min_year_exclusive}"
        )


# Field-shape validation


class ValidationError(BankKernelError):
    """Base exception for generic validation failures."""

    code: str = "VALIDATION_ERROR"


class FieldValidationError(ValidationError):
    """
    One or more declarative field rules failed at the storage boundary.

    Distinct from AccountTypeError / BirthdateError, which are raised at
    construction and mutation time.
    """

    code: str = "FIELD_VALIDATION_FAILED"

    def __init__(self, entity_type: str, entity_id: str, violations: list[str]):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.violations = violations
        super().__init__(
            f"{entity_type} {entity_id} failed validation: " + "; ".join(violations)
        )


# Gateway exceptions


class GatewayError(BankKernelError):
    """Base exception for persistence gateway misuse."""

    code: str = "GATEWAY_ERROR"


class UnknownOperationError(GatewayError):
    """Named operation is not registered with the gateway."""

    code: str = "UNKNOWN_OPERATION"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Unknown named operation: {operation}")
