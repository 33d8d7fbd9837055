import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from models.journal_entry import JournalEntry, JournalEntryStatus
from models.journal_entry_line import JournalEntryLine
from models.audit_mixin import utcnow
from schemas.chart_of_accounts import AccountInfo, NormalBalance
from schemas.ledger_reports import (
    AccountBalance,
    AccountBalancesReport,
    TrialBalanceAccount,
    TrialBalanceReport,
)
from utils.account_directory import AccountDirectory
from utils.exceptions import AccountBalanceNotFound

logger = logging.getLogger("ledger_balances")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(value) -> Decimal:
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        # SQLite hands SUM() back as float
        value = Decimal(str(value))
    return value.quantize(CENT)


def net_balance(normal_balance: NormalBalance, debits: Decimal, credits: Decimal) -> Decimal:
    """Signed balance, positive when the account sits on its normal side."""
    if normal_balance == NormalBalance.CREDIT:
        return credits - debits
    return debits - credits


def get_posted_totals(
    db: Session,
    company_id: str,
    as_of_date: date,
    account_id: Optional[int] = None
) -> Dict[int, Tuple[Decimal, Decimal]]:
    """
    Sum of posted debit and credit amounts per account up to and including `as_of_date`.
    """
    query = db.query(
        JournalEntryLine.account_id,
        func.coalesce(func.sum(JournalEntryLine.debit_amount), 0),
        func.coalesce(func.sum(JournalEntryLine.credit_amount), 0),
    ).join(
        JournalEntry, JournalEntryLine.journal_entry_id == JournalEntry.id
    ).filter(
        JournalEntry.company_id == company_id,
        JournalEntry.status == JournalEntryStatus.POSTED,
        JournalEntry.is_posted == True,  # noqa: E712
        JournalEntry.entry_date <= as_of_date
    )
    if account_id is not None:
        query = query.filter(JournalEntryLine.account_id == account_id)

    rows = query.group_by(JournalEntryLine.account_id).all()
    return {row[0]: (_money(row[1]), _money(row[2])) for row in rows}


def _unknown_account(account_id: int) -> AccountInfo:
    # Activity on an account the directory no longer knows is still reported
    return AccountInfo(
        id=account_id,
        company_id="",
        account_code="",
        account_name="",
        account_type="",
        normal_balance=NormalBalance.DEBIT,
        is_active=False,
    )


def _accounts_with_activity(
    accounts: List[AccountInfo],
    totals: Dict[int, Tuple[Decimal, Decimal]],
    include_idle_inactive: bool
) -> List[Tuple[AccountInfo, bool]]:
    """Pairs of (account, known) in report order: directory accounts by code, then unknown ids."""
    known_ids = {account.id for account in accounts}
    rows = [
        (account, True) for account in accounts
        if account.is_active or include_idle_inactive or account.id in totals
    ]
    unknown_ids = sorted(set(totals) - known_ids)
    if unknown_ids:
        logger.warning(f"Posted activity on accounts missing from the Chart of Accounts: {unknown_ids}")
    rows.extend((_unknown_account(account_id), False) for account_id in unknown_ids)
    return rows


def get_account_balances(
    db: Session,
    directory: AccountDirectory,
    company_id: str,
    as_of_date: date,
    account_id: Optional[int] = None
) -> AccountBalancesReport:
    """
    Per-account balances from posted entries up to `as_of_date`.

    Each account's debits and credits are netted against its normal side into
    one signed balance; the report also carries ledger-wide totals.
    """
    totals = get_posted_totals(db, company_id, as_of_date, account_id)
    accounts = directory.list_accounts(company_id)
    if account_id is not None:
        accounts = [account for account in accounts if account.id == account_id]
        if not accounts and account_id not in totals:
            raise AccountBalanceNotFound(account_id)

    balances = []
    total_debits = ZERO
    total_credits = ZERO
    for account, known in _accounts_with_activity(accounts, totals, include_idle_inactive=account_id is not None):
        debits, credits = totals.get(account.id, (ZERO, ZERO))
        balances.append(AccountBalance(
            account_id=account.id,
            account_code=account.account_code if known else None,
            account_name=account.account_name if known else None,
            account_type=account.account_type if known else None,
            normal_balance=account.normal_balance,
            total_debits=debits,
            total_credits=credits,
            balance=net_balance(account.normal_balance, debits, credits)
        ))
        total_debits += debits
        total_credits += credits

    return AccountBalancesReport(
        company_id=company_id,
        as_of_date=as_of_date,
        accounts=balances,
        total_debits=total_debits,
        total_credits=total_credits,
        generated_at=utcnow()
    )


def get_trial_balance(
    db: Session,
    directory: AccountDirectory,
    company_id: str,
    as_of_date: date
) -> TrialBalanceReport:
    """
    Trial balance as of a date.

    Every active account is listed, plus any account with posted activity.
    A balance on the account's normal side goes in that side's column; a
    negative balance goes in the opposite column. The columns must total the
    same; when they do not, the report says so instead of hiding it.
    """
    totals = get_posted_totals(db, company_id, as_of_date)
    accounts = directory.list_accounts(company_id)

    rows = []
    total_debits = ZERO
    total_credits = ZERO
    for account, known in _accounts_with_activity(accounts, totals, include_idle_inactive=False):
        debits, credits = totals.get(account.id, (ZERO, ZERO))
        balance = net_balance(account.normal_balance, debits, credits)
        on_debit_side = (balance >= 0) == (account.normal_balance == NormalBalance.DEBIT)
        debit_balance = abs(balance) if on_debit_side else ZERO
        credit_balance = ZERO if on_debit_side else abs(balance)

        rows.append(TrialBalanceAccount(
            account_id=account.id,
            account_code=account.account_code if known else None,
            account_name=account.account_name if known else None,
            account_type=account.account_type if known else None,
            debit_balance=debit_balance,
            credit_balance=credit_balance
        ))
        total_debits += debit_balance
        total_credits += credit_balance

    difference = total_debits - total_credits
    is_balanced = difference == 0
    if not is_balanced:
        logger.error(
            f"Trial balance for company {company_id} as of {as_of_date} is out of balance: "
            f"debits {total_debits}, credits {total_credits}, difference {difference}"
        )

    return TrialBalanceReport(
        company_id=company_id,
        as_of_date=as_of_date,
        accounts=rows,
        total_debits=total_debits,
        total_credits=total_credits,
        difference=difference,
        is_balanced=is_balanced,
        generated_at=utcnow()
    )
