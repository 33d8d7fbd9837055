from sqlalchemy import Column, DateTime, Integer, Numeric, ForeignKey, CheckConstraint, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import utcnow

class JournalEntryLine(Base):
    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True, index=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False, index=True)
    # Owned by the Chart of Accounts service, so no foreign key here
    account_id = Column(Integer, nullable=False, index=True)
    # Display copies taken from the account when the line is written
    account_code = Column(String(20), nullable=True)
    account_name = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    debit_amount = Column(Numeric(15, 2), CheckConstraint('debit_amount >= 0'), nullable=False, default=0)
    credit_amount = Column(Numeric(15, 2), CheckConstraint('credit_amount >= 0'), nullable=False, default=0)
    line_number = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")

    __table_args__ = (
        CheckConstraint(
            '(debit_amount > 0 AND credit_amount = 0) OR (credit_amount > 0 AND debit_amount = 0)',
            name='check_debit_or_credit_exclusive'
        ),
        UniqueConstraint('journal_entry_id', 'line_number', name='_entry_line_number_uc'),
    )
