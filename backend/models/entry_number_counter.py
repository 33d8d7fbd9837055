from sqlalchemy import Column, Integer, String, UniqueConstraint
from database import Base


class EntryNumberCounter(Base):
    """
    Last journal-entry sequence handed out for one company and one period.

    The row is locked while it is incremented, so concurrent creators for the
    same (company, period) are serialized by the database.
    """
    __tablename__ = "entry_number_counters"
    __table_args__ = (
        UniqueConstraint('company_id', 'period', name='_company_period_uc'),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String, nullable=False, index=True)
    period = Column(String(6), nullable=False)  # YYYYMM
    last_value = Column(Integer, nullable=False, default=0)
