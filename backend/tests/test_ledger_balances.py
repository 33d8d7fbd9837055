from datetime import date
from decimal import Decimal

import pytest

from crud.ledger_balances import get_account_balances, get_trial_balance, net_balance
from models.chart_of_accounts import ChartOfAccounts
from models.journal_entry_line import JournalEntryLine
from schemas.chart_of_accounts import NormalBalance
from utils.exceptions import AccountBalanceNotFound

from conftest import (
    CASH,
    COMPANY_ID,
    EQUITY,
    HEADERS,
    OTHER_CASH,
    OTHER_COMPANY_ID,
    RECEIVABLE,
    RENT,
    SALES,
    make_entry,
    post_entry,
)

JAN_31 = date(2024, 1, 31)


def dr(account_id, amount):
    return {"account_id": account_id, "debit_amount": Decimal(amount)}


def cr(account_id, amount):
    return {"account_id": account_id, "credit_amount": Decimal(amount)}


@pytest.fixture
def ledger(db, directory):
    """A January of posted activity, plus entries that must not count."""
    posted = [
        (date(2024, 1, 10), [dr(CASH, "1000.00"), cr(EQUITY, "1000.00")]),
        (date(2024, 1, 20), [dr(RENT, "300.00"), cr(CASH, "300.00")]),
        (date(2024, 1, 25), [dr(RECEIVABLE, "500.00"), cr(SALES, "500.00")]),
        (date(2024, 2, 5), [dr(CASH, "200.00"), cr(RECEIVABLE, "200.00")]),
    ]
    for entry_date, lines in posted:
        post_entry(db, make_entry(db, directory, lines, entry_date=entry_date).id)

    # Never posted
    make_entry(db, directory, [dr(CASH, "9999.00"), cr(SALES, "9999.00")], entry_date=date(2024, 1, 15))
    # Another company's books
    other = make_entry(
        db, directory, [dr(OTHER_CASH, "50.00"), cr(OTHER_CASH, "50.00")],
        entry_date=date(2024, 1, 15), company_id=OTHER_COMPANY_ID
    )
    post_entry(db, other.id, company_id=OTHER_COMPANY_ID)
    # Release the write lock before requests go through the app's own sessions
    db.commit()


def by_account(report):
    return {row.account_id: row for row in report.accounts}


def test_net_balance_follows_normal_side():
    assert net_balance(NormalBalance.DEBIT, Decimal("10"), Decimal("4")) == Decimal("6")
    assert net_balance(NormalBalance.CREDIT, Decimal("10"), Decimal("4")) == Decimal("-6")


def test_account_balances_count_only_posted_entries_up_to_date(db, directory, ledger):
    report = get_account_balances(db, directory, COMPANY_ID, JAN_31)
    rows = by_account(report)

    assert rows[CASH].total_debits == Decimal("1000.00")
    assert rows[CASH].total_credits == Decimal("300.00")
    assert rows[CASH].balance == Decimal("700.00")
    assert rows[EQUITY].balance == Decimal("1000.00")
    assert rows[SALES].balance == Decimal("500.00")
    assert rows[RECEIVABLE].balance == Decimal("500.00")
    assert rows[RENT].balance == Decimal("300.00")
    assert report.total_debits == report.total_credits == Decimal("1800.00")
    assert OTHER_CASH not in rows


def test_later_as_of_date_includes_later_postings(db, directory, ledger):
    rows = by_account(get_account_balances(db, directory, COMPANY_ID, date(2024, 2, 29)))
    assert rows[CASH].balance == Decimal("900.00")
    assert rows[RECEIVABLE].balance == Decimal("300.00")


def test_account_filter(db, directory, ledger):
    report = get_account_balances(db, directory, COMPANY_ID, JAN_31, account_id=RENT)
    assert [row.account_id for row in report.accounts] == [RENT]
    assert report.accounts[0].account_code == "5000"
    assert report.accounts[0].normal_balance == NormalBalance.DEBIT


def test_unknown_account_filter_is_not_found(db, directory, ledger):
    with pytest.raises(AccountBalanceNotFound):
        get_account_balances(db, directory, COMPANY_ID, JAN_31, account_id=999)


def test_trial_balance_closes(db, directory, ledger):
    report = get_trial_balance(db, directory, COMPANY_ID, JAN_31)
    rows = by_account(report)

    assert report.is_balanced
    assert report.difference == Decimal("0")
    assert report.total_debits == report.total_credits == Decimal("1500.00")
    assert (rows[CASH].debit_balance, rows[CASH].credit_balance) == (Decimal("700.00"), Decimal("0"))
    assert (rows[RENT].debit_balance, rows[RENT].credit_balance) == (Decimal("300.00"), Decimal("0"))
    # Credit-normal balances land in the credit column
    assert (rows[EQUITY].debit_balance, rows[EQUITY].credit_balance) == (Decimal("0"), Decimal("1000.00"))
    assert (rows[SALES].debit_balance, rows[SALES].credit_balance) == (Decimal("0"), Decimal("500.00"))


def test_trial_balance_lists_idle_active_accounts_but_not_idle_inactive(db, directory, ledger):
    rows = by_account(get_trial_balance(db, directory, COMPANY_ID, JAN_31))
    payable = [row for row in rows.values() if row.account_code == "2000"][0]
    assert payable.debit_balance == payable.credit_balance == Decimal("0")
    assert all(row.account_code != "1900" for row in rows.values())


def test_balance_against_normal_side_goes_to_opposite_column(db, directory):
    post_entry(db, make_entry(db, directory, [dr(CASH, "100.00"), cr(RECEIVABLE, "100.00")]).id)
    report = get_trial_balance(db, directory, COMPANY_ID, JAN_31)
    rows = by_account(report)
    assert rows[RECEIVABLE].credit_balance == Decimal("100.00")
    assert rows[RECEIVABLE].debit_balance == Decimal("0")
    assert report.is_balanced


def test_deactivated_account_with_activity_stays_in_trial_balance(db, directory, ledger):
    db.query(ChartOfAccounts).filter(ChartOfAccounts.id == RENT).update({"is_active": False})
    db.commit()
    report = get_trial_balance(db, directory, COMPANY_ID, JAN_31)
    assert by_account(report)[RENT].debit_balance == Decimal("300.00")
    assert report.is_balanced


def test_activity_on_account_missing_from_directory_is_reported(db, directory, ledger):
    db.query(ChartOfAccounts).filter(ChartOfAccounts.id == RENT).delete()
    db.commit()
    report = get_trial_balance(db, directory, COMPANY_ID, JAN_31)
    rent = by_account(report)[RENT]
    assert rent.account_code is None
    assert rent.debit_balance == Decimal("300.00")
    assert report.is_balanced


def test_out_of_balance_ledger_is_flagged(db, directory, ledger):
    # A line written behind the engine's back
    entry = make_entry(db, directory, [dr(CASH, "10.00"), cr(EQUITY, "10.00")])
    post_entry(db, entry.id)
    db.add(JournalEntryLine(
        journal_entry_id=entry.id, account_id=CASH, debit_amount=Decimal("25.00"),
        credit_amount=Decimal("0"), line_number=3
    ))
    db.commit()

    report = get_trial_balance(db, directory, COMPANY_ID, JAN_31)
    assert not report.is_balanced
    assert report.difference == Decimal("25.00")


def test_report_endpoints(client, ledger):
    response = client.get("/trial-balance", params={"as_of_date": "2024-01-31"}, headers=HEADERS)
    assert response.status_code == 200
    body = response.json()
    assert body["is_balanced"] is True
    assert Decimal(body["total_debits"]) == Decimal("1500.00")

    response = client.get("/account-balances", params={"as_of_date": "2024-01-31", "account_id": CASH}, headers=HEADERS)
    assert response.status_code == 200
    assert Decimal(response.json()["accounts"][0]["balance"]) == Decimal("700.00")

    response = client.get("/account-balances", params={"account_id": 999}, headers=HEADERS)
    assert response.status_code == 404


def test_report_defaults_to_today(client, ledger):
    response = client.get("/trial-balance", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["as_of_date"] == date.today().isoformat()
    assert Decimal(response.json()["total_debits"]) == Decimal("1500.00")
