import re
from datetime import date

from crud import entry_numbers
from crud.entry_numbers import format_entry_number, generate_entry_number, period_key
from models.entry_number_counter import EntryNumberCounter

from conftest import CASH, COMPANY_ID, EQUITY, OTHER_CASH, OTHER_COMPANY_ID, make_entry

ENTRY_NUMBER_PATTERN = re.compile(r"^JE-\d{6}-\d{6}$")


def balanced(account_debit=CASH, account_credit=EQUITY, amount="100.00"):
    return [
        {"account_id": account_debit, "debit_amount": amount},
        {"account_id": account_credit, "credit_amount": amount},
    ]


def test_format():
    assert period_key(date(2024, 3, 15)) == "202403"
    assert format_entry_number(date(2024, 3, 15), 1) == "JE-202403-000001"
    assert format_entry_number(date(2024, 12, 1), 123456) == "JE-202412-123456"


def test_sequential_numbers_are_unique_and_increasing(db, directory):
    numbers = [make_entry(db, directory, balanced(), entry_date=date(2024, 3, day)).entry_number for day in (1, 5, 31)]
    assert numbers == ["JE-202403-000001", "JE-202403-000002", "JE-202403-000003"]
    assert all(ENTRY_NUMBER_PATTERN.match(number) for number in numbers)


def test_sequence_resets_each_month(db, directory):
    make_entry(db, directory, balanced(), entry_date=date(2024, 3, 30))
    make_entry(db, directory, balanced(), entry_date=date(2024, 3, 31))
    april = make_entry(db, directory, balanced(), entry_date=date(2024, 4, 1))
    assert april.entry_number == "JE-202404-000001"


def test_sequence_is_per_company(db, directory):
    first = make_entry(db, directory, balanced(), entry_date=date(2024, 3, 1))
    other = make_entry(
        db, directory, balanced(account_debit=OTHER_CASH, account_credit=OTHER_CASH),
        entry_date=date(2024, 3, 1), company_id=OTHER_COMPANY_ID
    )
    assert first.entry_number == other.entry_number == "JE-202403-000001"


def test_counter_row_tracks_last_value(db, directory):
    for _ in range(3):
        make_entry(db, directory, balanced(), entry_date=date(2024, 5, 2))
    counter = db.query(EntryNumberCounter).filter_by(company_id=COMPANY_ID, period="202405").one()
    assert counter.last_value == 3


def test_rolled_back_number_is_handed_out_again(db):
    generate_entry_number(db, COMPANY_ID, date(2024, 6, 1))
    db.rollback()
    assert generate_entry_number(db, COMPANY_ID, date(2024, 6, 1)) == "JE-202406-000001"
    db.rollback()


def test_falls_back_to_first_sequence_when_counter_yields_nothing(db, monkeypatch):
    monkeypatch.setattr(entry_numbers, "next_sequence", lambda db, company_id, period: None)
    assert generate_entry_number(db, COMPANY_ID, date(2024, 7, 9)) == "JE-202407-000001"
