"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers must be able to tell a currency mix-up from an unbalanced entry from
a database outage without parsing message strings. Every error therefore:
  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

Example:
    try:
        store.insert_entry(draft)
    except UnbalancedEntryError as e:
        log.warning("rejected", extra={"debits": e.debits, "credits": e.credits})
    except StoreError:
        # Nothing was written; the caller decides whether to retry.
        raise

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerKernelError (base)
    |
    +-- CurrencyError
    |   +-- UnknownCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- MoneyParseError
    |
    +-- ValidationError
    |   +-- InvalidEntryError
    |   +-- UnbalancedEntryError
    |   +-- AccountValidationError
    |
    +-- AccountNotFoundError
    |
    +-- StoreError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code               | When Raised
-------------|--------------------|---------------------------------------------
Currency     | UNKNOWN_CURRENCY   | Code not in the currency table
             | CURRENCY_MISMATCH  | Money/Amount operation mixes currencies
-------------|--------------------|---------------------------------------------
Parsing      | MONEY_PARSE_ERROR  | Text/decimal input is not a money value
-------------|--------------------|---------------------------------------------
Validation   | INVALID_ENTRY      | Too few amounts, negative amount,
             |                    | several currencies in one entry
             | UNBALANCED_ENTRY   | Debits != Credits
             | INVALID_ACCOUNT    | Missing or invalid account fields
-------------|--------------------|---------------------------------------------
Account      | ACCOUNT_NOT_FOUND  | Account ID doesn't exist
-------------|--------------------|---------------------------------------------
Store        | STORE_ERROR        | Commit/flush failed (connectivity, constraint)
===============================================================================
"""

from typing import Any


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Currency-related exceptions


class CurrencyError(LedgerKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class UnknownCurrencyError(CurrencyError):
    """Currency code could not be resolved to symbol/precision metadata."""

    code: str = "UNKNOWN_CURRENCY"

    def __init__(self, currency: Any):
        self.currency = str(currency)
        super().__init__(f"Unknown currency code: {currency!r}")


class CurrencyMismatchError(CurrencyError):
    """Operation combined or compared values in different currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, expected: str, actual: str, operation: str = "combine"):
        self.expected = expected
        self.actual = actual
        self.operation = operation
        super().__init__(
            f"Cannot {operation} {expected} with {actual}: "
            f"currencies must be the same"
        )


# Parsing


class MoneyParseError(LedgerKernelError):
    """Text or decimal input could not be read as a money value."""

    code: str = "MONEY_PARSE_ERROR"

    def __init__(self, value: Any, reason: str = "not a number"):
        self.value = value
        self.reason = reason
        super().__init__(f"Unable to parse {value!r}: {reason}")


# Validation


class ValidationError(LedgerKernelError):
    """Base exception for data rejected before any persistence attempt."""

    code: str = "VALIDATION_ERROR"


class InvalidEntryError(ValidationError):
    """Entry is structurally invalid (too few amounts, bad amount, mixed currencies)."""

    code: str = "INVALID_ENTRY"

    def __init__(self, reason: str, issues: tuple = ()):
        self.reason = reason
        self.issues = issues
        super().__init__(f"Invalid entry: {reason}")


class UnbalancedEntryError(ValidationError):
    """Entry debits do not equal credits."""

    code: str = "UNBALANCED_ENTRY"

    def __init__(self, debits: int, credits: int, currency: str):
        self.debits = debits
        self.credits = credits
        self.currency = currency
        super().__init__(
            f"Unbalanced entry in {currency}: debits={debits}, credits={credits}"
        )


class AccountValidationError(ValidationError):
    """Account fields are missing or invalid."""

    code: str = "INVALID_ACCOUNT"

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        details = ", ".join(f"{k}: {v}" for k, v in sorted(self.field_errors.items()))
        super().__init__(f"Invalid account: {details}")


# Accounts


class AccountNotFoundError(LedgerKernelError):
    """Account with given ID was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: Any):
        self.account_id = str(account_id)
        super().__init__(f"Account not found: {account_id}")


# Store


class StoreError(LedgerKernelError):
    """
    The ledger store failed to commit.

    The underlying driver/ORM exception is chained as ``__cause__``.
    Nothing from the failed operation is persisted; the core does not retry.
    """

    code: str = "STORE_ERROR"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Store failure during {operation}: {detail}")
