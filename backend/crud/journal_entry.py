import logging
from typing import List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError
from crud.audit_log import get_audit_logs, record_mutation
from crud.entry_numbers import generate_entry_number
from models.audit_log import AuditLog
from models.journal_entry import JournalEntry, JournalEntryStatus
from models.journal_entry_line import JournalEntryLine
from schemas.audit_log import AuditAction
from schemas.journal_entry import JournalEntryCreate
from utils import sqlalchemy_to_dict
from utils.account_directory import AccountDirectory, check_accounts_exist
from utils.entry_lifecycle import apply_transition
from utils.exceptions import (
    DuplicateEntryNumber,
    EntryNotDeletable,
    InvalidStatus,
    JournalEntryNotFound,
)
from utils.journal_validation import validate_journal_lines

logger = logging.getLogger("journal_entries")

JOURNAL_ENTRIES_TABLE = JournalEntry.__tablename__


def _entry_snapshot(entry: JournalEntry, include_lines: bool = False):
    snapshot = sqlalchemy_to_dict(entry)
    if include_lines:
        snapshot["lines"] = [sqlalchemy_to_dict(line) for line in entry.lines]
    return snapshot


def _is_entry_number_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    # PostgreSQL names the constraint, SQLite names the columns
    return "_company_entry_number_uc" in message or "journal_entries.entry_number" in message


def _locked_entry_query(db: Session, entry_id: int, company_id: str):
    return db.query(JournalEntry).filter(
        JournalEntry.id == entry_id,
        JournalEntry.company_id == company_id
    ).with_for_update().populate_existing()


def create_journal_entry(
    db: Session,
    entry: JournalEntryCreate,
    company_id: str,
    user_id: str,
    directory: AccountDirectory,
) -> JournalEntry:
    """
    Creates a new journal entry and its lines in one transaction.

    Line shape, balance and account checks all run before anything is
    written. The entry number, the entry, its lines and the CREATE audit
    record are then committed together; any failure rolls all of them back.
    """
    total_debit, total_credit = validate_journal_lines(entry.lines)
    accounts = check_accounts_exist(directory, [line.account_id for line in entry.lines], company_id)

    entry_number = None
    try:
        entry_number = generate_entry_number(db, company_id, entry.entry_date)
        db_entry = JournalEntry(
            company_id=company_id,
            entry_number=entry_number,
            entry_date=entry.entry_date,
            description=entry.description,
            reference=entry.reference,
            total_debit=total_debit,
            total_credit=total_credit,
            status=JournalEntryStatus.DRAFT,
            is_posted=False,
            created_by=user_id
        )
        for line_number, line in enumerate(entry.lines, start=1):
            account = accounts[line.account_id]
            db_entry.lines.append(JournalEntryLine(
                account_id=line.account_id,
                account_code=account.account_code,
                account_name=account.account_name,
                description=line.description,
                debit_amount=line.debit_amount,
                credit_amount=line.credit_amount,
                line_number=line_number
            ))
        db.add(db_entry)
        db.flush()

        record_mutation(
            db,
            table_name=JOURNAL_ENTRIES_TABLE,
            record_id=db_entry.id,
            action=AuditAction.CREATE,
            user_id=user_id,
            new_values=_entry_snapshot(db_entry, include_lines=True)
        )
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if entry_number and _is_entry_number_conflict(e):
            logger.warning(f"Entry number {entry_number} already exists for company {company_id}")
            raise DuplicateEntryNumber(entry_number) from e
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(db_entry)
    logger.info(
        f"Journal entry {db_entry.entry_number} (ID: {db_entry.id}) created by user {user_id} "
        f"for company {company_id}: {len(entry.lines)} lines, total {total_debit}"
    )
    return db_entry


def get_journal_entry(db: Session, entry_id: int, company_id: str) -> Optional[JournalEntry]:
    """
    Retrieves a single journal entry, with its lines, by its ID.
    """
    return db.query(JournalEntry).options(
        selectinload(JournalEntry.lines)
    ).filter(
        JournalEntry.id == entry_id,
        JournalEntry.company_id == company_id
    ).first()


def get_journal_entries(
    db: Session,
    company_id: str,
    status: Optional[JournalEntryStatus] = None,
    limit: int = 50,
    offset: int = 0
) -> Tuple[List[JournalEntry], int]:
    """
    Retrieves one page of a company's journal entries, newest first, and the total count.
    """
    query = db.query(JournalEntry).filter(JournalEntry.company_id == company_id)
    if status:
        query = query.filter(JournalEntry.status == status)

    total = query.count()
    items = query.order_by(
        JournalEntry.entry_date.desc(),
        JournalEntry.id.desc()
    ).offset(offset).limit(limit).all()
    return items, total


def update_journal_entry_status(
    db: Session,
    entry_id: int,
    company_id: str,
    new_status: JournalEntryStatus,
    user_id: str,
) -> JournalEntry:
    """
    Moves a journal entry to `new_status`.

    The entry is read under a row lock and the transition is checked against
    that locked state. The UPDATE also carries the entry's version, so a writer
    that got past the lock (SQLite has none) fails instead of overwriting.
    """
    try:
        db_entry = _locked_entry_query(db, entry_id, company_id).first()
        if db_entry is None:
            raise JournalEntryNotFound(entry_id)

        old_values = _entry_snapshot(db_entry)
        current_status = db_entry.status
        apply_transition(db_entry, new_status, user_id)
        db_entry.updated_by = user_id
        db.flush()

        record_mutation(
            db,
            table_name=JOURNAL_ENTRIES_TABLE,
            record_id=db_entry.id,
            action=AuditAction.STATUS_UPDATE,
            user_id=user_id,
            old_values=old_values,
            new_values=_entry_snapshot(db_entry)
        )
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Journal entry {entry_id} changed concurrently while moving to {new_status.value}")
        raise InvalidStatus(
            current_status, new_status,
            "Journal entry was changed by another request; reload it and retry."
        ) from e
    except InvalidStatus:
        db.rollback()
        logger.warning(f"Rejected status change of journal entry {entry_id} from {current_status.value} to {new_status.value}")
        raise
    except Exception:
        db.rollback()
        raise

    db.refresh(db_entry)
    logger.info(
        f"Journal entry {db_entry.entry_number} (ID: {entry_id}) moved from {current_status.value} "
        f"to {new_status.value} by user {user_id} for company {company_id}"
    )
    return db_entry


def delete_journal_entry(db: Session, entry_id: int, company_id: str, user_id: str) -> None:
    """
    Deletes a DRAFT journal entry together with its lines.

    Any other status is a conflict. The DELETE audit record keeps the full
    snapshot, lines included, and is committed with the delete.
    """
    try:
        db_entry = _locked_entry_query(db, entry_id, company_id).first()
        if db_entry is None:
            raise JournalEntryNotFound(entry_id)
        if db_entry.status != JournalEntryStatus.DRAFT or db_entry.is_posted:
            raise EntryNotDeletable(entry_id, db_entry.status)

        record_mutation(
            db,
            table_name=JOURNAL_ENTRIES_TABLE,
            record_id=db_entry.id,
            action=AuditAction.DELETE,
            user_id=user_id,
            old_values=_entry_snapshot(db_entry, include_lines=True)
        )
        entry_number = db_entry.entry_number
        db.delete(db_entry)
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Journal entry {entry_id} changed concurrently while being deleted")
        raise EntryNotDeletable(entry_id, "changed by another request") from e
    except Exception:
        db.rollback()
        raise

    logger.info(f"Journal entry {entry_number} (ID: {entry_id}) deleted by user {user_id} for company {company_id}")


def get_entry_audit_trail(db: Session, entry_id: int, company_id: str) -> List[AuditLog]:
    """
    Audit records of one journal entry, oldest first.

    Deleted entries keep their trail; company scoping uses the snapshots
    because the audit table itself is not company scoped.
    """
    logs = [
        log for log in get_audit_logs(db, JOURNAL_ENTRIES_TABLE, entry_id)
        if (log.new_values or log.old_values or {}).get("company_id") == company_id
    ]
    if not logs:
        raise JournalEntryNotFound(entry_id)
    return logs
