"""
Ledger error taxonomy.

Every error raised by the journal-entry engine derives from ``LedgerError``
and carries the HTTP status it maps to, so routers never translate errors by
hand: the exception handler installed in ``main.py`` renders them all.

    Business rule  422  EmptyEntry, InvalidLineAmount, DebitCreditMismatch,
                        EntryTotalOutOfRange
    Reference      400  AccountNotFound, CompanyMismatch
    Conflict       409  InvalidStatus, EntryNotDeletable, DuplicateEntryNumber
    NotFound       404  JournalEntryNotFound, AccountBalanceNotFound
    Infrastructure 502  AccountDirectoryUnavailable
"""
from decimal import Decimal
from typing import Any, Dict, Optional


class LedgerError(Exception):
    status_code = 500
    code = "LEDGER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Dict[str, Any]:
        """Error-specific fields added to the JSON error body."""
        return {}


# --- Business rule ---------------------------------------------------------

class BusinessRuleError(LedgerError):
    status_code = 422
    code = "BUSINESS_RULE_VIOLATION"


class EmptyEntry(BusinessRuleError):
    code = "EMPTY_ENTRY"

    def __init__(self):
        super().__init__("A journal entry must have at least one line.")


class InvalidLineAmount(BusinessRuleError):
    code = "INVALID_LINE_AMOUNT"

    def __init__(self, line_number: int, debit: Decimal, credit: Decimal):
        super().__init__(
            f"Line {line_number} must have exactly one positive amount "
            f"(debit={debit}, credit={credit})."
        )
        self.line_number = line_number
        self.debit = debit
        self.credit = credit

    def details(self):
        return {"line_number": self.line_number, "debit": str(self.debit), "credit": str(self.credit)}


class DebitCreditMismatch(BusinessRuleError):
    code = "DEBIT_CREDIT_MISMATCH"

    def __init__(self, debits: Decimal, credits: Decimal):
        super().__init__(f"Total debits ({debits}) must equal total credits ({credits}).")
        self.debits = debits
        self.credits = credits

    def details(self):
        return {"debits": str(self.debits), "credits": str(self.credits)}


class EntryTotalOutOfRange(BusinessRuleError):
    code = "ENTRY_TOTAL_OUT_OF_RANGE"

    def __init__(self, total: Decimal, limit: Decimal):
        super().__init__(f"Entry total {total} exceeds the largest storable amount {limit}.")
        self.total = total
        self.limit = limit

    def details(self):
        return {"total": str(self.total), "limit": str(self.limit)}


# --- Reference -------------------------------------------------------------

class AccountNotFound(LedgerError):
    status_code = 400
    code = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: int):
        super().__init__(f"Account {account_id} does not exist, is inactive, or belongs to another company.")
        self.account_id = account_id

    def details(self):
        return {"account_id": self.account_id}


class CompanyMismatch(LedgerError):
    status_code = 400
    code = "COMPANY_MISMATCH"

    def __init__(self, body_company_id: str, header_company_id: str):
        super().__init__("company_id does not match X-Company-ID.")
        self.body_company_id = body_company_id
        self.header_company_id = header_company_id

    def details(self):
        return {"company_id": self.body_company_id, "header_company_id": self.header_company_id}


# --- Conflict --------------------------------------------------------------

class ConflictError(LedgerError):
    status_code = 409
    code = "CONFLICT"


class InvalidStatus(ConflictError):
    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, current, target, message: Optional[str] = None):
        current_value = getattr(current, "value", current)
        target_value = getattr(target, "value", target)
        super().__init__(message or f"Invalid status transition from {current_value} to {target_value}.")
        self.current = current_value
        self.target = target_value

    def details(self):
        return {"current_status": self.current, "target_status": self.target}


class EntryNotDeletable(ConflictError):
    code = "ENTRY_NOT_DELETABLE"

    def __init__(self, entry_id: int, status):
        status_value = getattr(status, "value", status)
        super().__init__(f"Journal entry {entry_id} is {status_value}; only DRAFT entries can be deleted.")
        self.entry_id = entry_id
        self.status = status_value

    def details(self):
        return {"current_status": self.status}


class DuplicateEntryNumber(ConflictError):
    code = "DUPLICATE_ENTRY_NUMBER"

    def __init__(self, entry_number: str):
        super().__init__(f"Entry number {entry_number} is already in use for this company.")
        self.entry_number = entry_number

    def details(self):
        return {"entry_number": self.entry_number}


# --- Not found -------------------------------------------------------------

class NotFoundError(LedgerError):
    status_code = 404
    code = "NOT_FOUND"


class JournalEntryNotFound(NotFoundError):
    def __init__(self, entry_id: int):
        super().__init__("Journal entry not found")
        self.entry_id = entry_id


class AccountBalanceNotFound(NotFoundError):
    def __init__(self, account_id: int):
        super().__init__(f"Account {account_id} not found")
        self.account_id = account_id


# --- Infrastructure --------------------------------------------------------

class AccountDirectoryUnavailable(LedgerError):
    status_code = 502
    code = "ACCOUNT_DIRECTORY_UNAVAILABLE"

    def __init__(self, reason: str):
        # The reason is logged, never returned to the caller
        super().__init__("Chart of Accounts service is unavailable.")
        self.reason = reason


class AuditLogImmutable(RuntimeError):
    """Raised when something tries to rewrite or remove an audit row."""

    def __init__(self, audit_id):
        super().__init__(f"Audit log record {audit_id} is append-only")
        self.audit_id = audit_id
