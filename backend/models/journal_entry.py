from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin
import enum


class JournalEntryStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    POSTED = "POSTED"
    CANCELLED = "CANCELLED"


class JournalEntry(Base, TimestampMixin):
    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint('company_id', 'entry_number', name='_company_entry_number_uc'),
        CheckConstraint('total_debit = total_credit', name='balanced_entry'),
        CheckConstraint(
            "(status = 'POSTED' AND is_posted) OR (status <> 'POSTED' AND NOT is_posted)",
            name='status_posted_sync'
        ),
        Index('idx_journal_entries_company_date', 'company_id', 'entry_date'),
        Index('idx_journal_entries_company_status', 'company_id', 'status'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String, index=True, nullable=False)
    entry_number = Column(String(50), nullable=False)
    entry_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    reference = Column(String(100), nullable=True)
    total_debit = Column(Numeric(15, 2), nullable=False, default=0)
    total_credit = Column(Numeric(15, 2), nullable=False, default=0)
    status = Column(
        Enum(JournalEntryStatus, name="journal_entry_status"),
        nullable=False,
        default=JournalEntryStatus.DRAFT
    )
    is_posted = Column(Boolean, nullable=False, default=False)
    approved_by = Column(String, nullable=True)
    posted_by = Column(String, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    posted_at = Column(DateTime(timezone=True), nullable=True)
    # Optimistic concurrency token, bumped on every UPDATE
    version = Column(Integer, nullable=False)

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.line_number",
    )

    __mapper_args__ = {"version_id_col": version}
