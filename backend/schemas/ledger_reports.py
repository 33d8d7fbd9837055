from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from schemas.chart_of_accounts import NormalBalance

# Account balances
class AccountBalance(BaseModel):
    account_id: int
    account_code: Optional[str] = None
    account_name: Optional[str] = None
    account_type: Optional[str] = None
    normal_balance: NormalBalance
    total_debits: Decimal
    total_credits: Decimal
    balance: Decimal  # signed, positive on the account's normal side

class AccountBalancesReport(BaseModel):
    company_id: str
    as_of_date: date
    accounts: List[AccountBalance]
    total_debits: Decimal
    total_credits: Decimal
    generated_at: datetime

# Trial balance
class TrialBalanceAccount(BaseModel):
    account_id: int
    account_code: Optional[str] = None
    account_name: Optional[str] = None
    account_type: Optional[str] = None
    debit_balance: Decimal
    credit_balance: Decimal

class TrialBalanceReport(BaseModel):
    company_id: str
    as_of_date: date
    accounts: List[TrialBalanceAccount]
    total_debits: Decimal
    total_credits: Decimal
    difference: Decimal
    is_balanced: bool
    generated_at: datetime
