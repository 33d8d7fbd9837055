"""
Journal entry numbering: JE-{YYYY}{MM}-{NNNNNN}.

The sequence is scoped to (company, year, month) and comes from a counter row
in `entry_number_counters`. The counter is bumped with a single
`UPDATE ... SET last_value = last_value + 1`, which row-locks the counter until
the caller's transaction ends, so two concurrent creators for the same period
can never read the same value. Rolling back the caller's transaction also
rolls back the increment.
"""
import logging
from datetime import date
from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from models.entry_number_counter import EntryNumberCounter

logger = logging.getLogger("entry_numbers")

ENTRY_NUMBER_PREFIX = "JE"
SEQUENCE_WIDTH = 6
FALLBACK_SEQUENCE = 1


def period_key(entry_date: date) -> str:
    return f"{entry_date.year:04d}{entry_date.month:02d}"


def format_entry_number(entry_date: date, sequence: int) -> str:
    return f"{ENTRY_NUMBER_PREFIX}-{period_key(entry_date)}-{sequence:0{SEQUENCE_WIDTH}d}"


def _increment_counter(db: Session, company_id: str, period: str) -> Optional[int]:
    result = db.execute(
        update(EntryNumberCounter)
        .where(
            EntryNumberCounter.company_id == company_id,
            EntryNumberCounter.period == period
        )
        .values(last_value=EntryNumberCounter.last_value + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        return None
    return db.execute(
        select(EntryNumberCounter.last_value).where(
            EntryNumberCounter.company_id == company_id,
            EntryNumberCounter.period == period
        )
    ).scalar_one()


def next_sequence(db: Session, company_id: str, period: str) -> Optional[int]:
    """
    Allocate the next sequence value for (company, period) inside the caller's transaction.

    The first allocation of a period creates the counter row under a savepoint.
    If a concurrent request created it first, the unique constraint rejects our
    insert, the savepoint is rolled back and the increment is retried on the
    row that now exists.
    """
    sequence = _increment_counter(db, company_id, period)
    if sequence is not None:
        return sequence

    savepoint = db.begin_nested()
    try:
        db.add(EntryNumberCounter(company_id=company_id, period=period, last_value=1))
        db.flush()
        savepoint.commit()
        return 1
    except IntegrityError:
        savepoint.rollback()
        logger.info(f"Entry number counter for company {company_id} period {period} created concurrently; retrying")
        return _increment_counter(db, company_id, period)


def generate_entry_number(db: Session, company_id: str, entry_date: date) -> str:
    """
    Produce the next entry number for the company and the entry's month.

    If the counter cannot produce a value the number falls back to sequence
    000001 for the period; the unique constraint on (company_id, entry_number)
    turns a resulting collision into a conflict instead of a silent overwrite.
    """
    period = period_key(entry_date)
    sequence = next_sequence(db, company_id, period)
    if not sequence:
        logger.warning(f"No entry number sequence for company {company_id} period {period}; falling back to {FALLBACK_SEQUENCE:06d}")
        sequence = FALLBACK_SEQUENCE
    return format_entry_number(entry_date, sequence)
