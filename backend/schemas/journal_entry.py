from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from models.journal_entry import JournalEntryStatus
from .journal_entry_line import JournalEntryLineCreate, JournalEntryLine

class JournalEntryBase(BaseModel):
    entry_date: date
    description: Optional[str] = None
    reference: Optional[str] = Field(default=None, max_length=100)

class JournalEntryCreate(JournalEntryBase):
    # Optional echo of the X-Company-ID header; must match it when given
    company_id: Optional[str] = None
    lines: List[JournalEntryLineCreate]

class JournalEntry(JournalEntryBase):
    id: int
    company_id: str
    entry_number: str
    total_debit: Decimal
    total_credit: Decimal
    status: JournalEntryStatus
    is_posted: bool
    created_by: str
    approved_by: Optional[str] = None
    posted_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    posted_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class JournalEntryWithLines(JournalEntry):
    lines: List[JournalEntryLine] = []

class JournalEntryPage(BaseModel):
    items: List[JournalEntry]
    total: int
    limit: int
    offset: int
