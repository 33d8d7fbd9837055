from sqlalchemy import Column, Integer, String, Text, Boolean, UniqueConstraint
from database import Base


class ChartOfAccounts(Base):
    """
    Accounts as published by the Chart of Accounts service.

    When that service shares the ledger database this table is its read model;
    the ledger only ever reads from it.
    """
    __tablename__ = "chart_of_accounts"

    id = Column(Integer, primary_key=True, index=True)
    account_code = Column(String(20), nullable=False, index=True)
    account_name = Column(String(100), nullable=False)
    account_type = Column(String(20), nullable=False)  # Asset, Liability, Equity, Revenue, Expense
    normal_balance = Column(String(10), nullable=True)  # DEBIT or CREDIT; derived from account_type when empty
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    company_id = Column(String, index=True, nullable=False)

    __table_args__ = (
        UniqueConstraint('company_id', 'account_code', name='_company_account_code_uc'),
    )
