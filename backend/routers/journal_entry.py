import logging
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from models.journal_entry import JournalEntryStatus
from schemas.audit_log import AuditLog
from schemas.journal_entry import JournalEntryCreate, JournalEntryPage, JournalEntryWithLines
from crud import journal_entry as journal_entry_crud
from utils.account_directory import AccountDirectory, get_account_directory
from utils.exceptions import CompanyMismatch, JournalEntryNotFound
from utils.tenancy import get_company_id, get_user_id

router = APIRouter(
    prefix="/journal-entries",
    tags=["Journal Entries"],
)

logger = logging.getLogger(__name__)

@router.post("", response_model=JournalEntryWithLines, status_code=status.HTTP_201_CREATED)
def create_journal_entry(
    entry: JournalEntryCreate,
    db: Session = Depends(get_db),
    directory: AccountDirectory = Depends(get_account_directory),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    """
    Create a new journal entry in DRAFT status.
    Lines must each carry exactly one positive amount and debits must equal credits.
    """
    if entry.company_id is not None and entry.company_id != company_id:
        logger.warning(f"User {user_id} sent company {entry.company_id} in the body of a request for company {company_id}")
        raise CompanyMismatch(entry.company_id, company_id)
    return journal_entry_crud.create_journal_entry(
        db=db, entry=entry, company_id=company_id, user_id=user_id, directory=directory
    )


@router.get("", response_model=JournalEntryPage)
def get_journal_entries(
    status: Optional[JournalEntryStatus] = None,
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    """
    Retrieve a page of journal entries, newest first.
    """
    items, total = journal_entry_crud.get_journal_entries(
        db=db,
        company_id=company_id,
        status=status,
        limit=limit,
        offset=offset
    )
    return {"items": items, "total": total, "limit": limit, "offset": offset}

@router.get("/{entry_id}", response_model=JournalEntryWithLines)
def get_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    """
    Retrieve a single journal entry, with its lines, by its ID.
    """
    db_entry = journal_entry_crud.get_journal_entry(db=db, entry_id=entry_id, company_id=company_id)
    if db_entry is None:
        raise JournalEntryNotFound(entry_id)
    return db_entry

@router.put("/{entry_id}/status", response_model=JournalEntryWithLines)
def update_journal_entry_status(
    entry_id: int,
    status: JournalEntryStatus,
    db: Session = Depends(get_db),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    """
    Move a journal entry through its lifecycle: DRAFT, PENDING_APPROVAL, APPROVED, POSTED.
    Any entry that is not posted can also be CANCELLED.
    """
    return journal_entry_crud.update_journal_entry_status(
        db=db, entry_id=entry_id, company_id=company_id, new_status=status, user_id=user_id
    )

@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_journal_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    """
    Delete a DRAFT journal entry and its lines.
    """
    journal_entry_crud.delete_journal_entry(db=db, entry_id=entry_id, company_id=company_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{entry_id}/audit-log", response_model=List[AuditLog])
def get_journal_entry_audit_log(
    entry_id: int,
    db: Session = Depends(get_db),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    """
    Audit trail of a journal entry, oldest first. Still available after the entry is deleted.
    """
    return journal_entry_crud.get_entry_audit_trail(db=db, entry_id=entry_id, company_id=company_id)
