"""
Shared fixtures for the General Ledger test suite.

Tests run against a throwaway SQLite file by default. Set TEST_DATABASE_URL to
a PostgreSQL URL to run the same suite, including the threaded race tests,
against PostgreSQL.
"""
import os
import tempfile

TEST_DIR = tempfile.mkdtemp(prefix="general-ledger-tests-")
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL") or f"sqlite:///{os.path.join(TEST_DIR, 'ledger.db')}"
os.environ["LOG_DIR"] = os.path.join(TEST_DIR, "logs")
# Account lookups go to the shared chart_of_accounts table
os.environ["CHART_OF_ACCOUNTS_URL"] = ""

import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app
from models.chart_of_accounts import ChartOfAccounts
from models.journal_entry import JournalEntryStatus
from schemas.journal_entry import JournalEntryCreate
from schemas.journal_entry_line import JournalEntryLineCreate
from crud import journal_entry as journal_entry_crud
from utils.account_directory import SqlAccountDirectory

COMPANY_ID = "company-1"
OTHER_COMPANY_ID = "company-2"
USER_ID = "user-1"

HEADERS = {"X-User-ID": USER_ID, "X-Company-ID": COMPANY_ID}

# id, company, code, name, type, active
ACCOUNTS = [
    (1, COMPANY_ID, "1000", "Cash", "Asset", True),
    (2, COMPANY_ID, "1100", "Accounts Receivable", "Asset", True),
    (3, COMPANY_ID, "2000", "Accounts Payable", "Liability", True),
    (4, COMPANY_ID, "3000", "Owner's Equity", "Equity", True),
    (5, COMPANY_ID, "4000", "Sales Revenue", "Revenue", True),
    (6, COMPANY_ID, "5000", "Rent Expense", "Expense", True),
    (7, COMPANY_ID, "1900", "Retired Asset", "Asset", False),
    (8, OTHER_COMPANY_ID, "1000", "Cash", "Asset", True),
]

CASH, RECEIVABLE, PAYABLE, EQUITY, SALES, RENT, RETIRED, OTHER_CASH = [row[0] for row in ACCOUNTS]


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        for account_id, company_id, code, name, account_type, active in ACCOUNTS:
            session.add(ChartOfAccounts(
                id=account_id,
                company_id=company_id,
                account_code=code,
                account_name=name,
                account_type=account_type,
                is_active=active,
            ))
        session.commit()
    finally:
        session.close()
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def directory(db):
    return SqlAccountDirectory(db)


@pytest.fixture
def client():
    app.dependency_overrides.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()


def line(account_id, debit="0", credit="0", description=None):
    return {
        "account_id": account_id,
        "debit_amount": str(debit),
        "credit_amount": str(credit),
        "description": description,
    }


def entry_payload(lines, entry_date="2024-03-15", description="Test entry", **extra):
    return {"entry_date": entry_date, "description": description, "lines": lines, **extra}


def make_entry(db, directory, lines, entry_date=date(2024, 1, 10), company_id=COMPANY_ID, user_id=USER_ID):
    entry = JournalEntryCreate(
        entry_date=entry_date,
        description="Fixture entry",
        lines=[JournalEntryLineCreate(**row) for row in lines],
    )
    return journal_entry_crud.create_journal_entry(db, entry, company_id, user_id, directory)


def post_entry(db, entry_id, company_id=COMPANY_ID, user_id=USER_ID):
    for target in (JournalEntryStatus.PENDING_APPROVAL, JournalEntryStatus.APPROVED, JournalEntryStatus.POSTED):
        entry = journal_entry_crud.update_journal_entry_status(db, entry_id, company_id, target, user_id)
    return entry


def money(value) -> Decimal:
    return Decimal(str(value))
