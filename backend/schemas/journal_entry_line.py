from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional

class JournalEntryLineBase(BaseModel):
    account_id: int
    description: Optional[str] = None
    # Sized to Numeric(15, 2); sign and exclusivity are checked by the line validator
    debit_amount: Decimal = Field(default=Decimal("0"), max_digits=15, decimal_places=2)
    credit_amount: Decimal = Field(default=Decimal("0"), max_digits=15, decimal_places=2)

class JournalEntryLineCreate(JournalEntryLineBase):
    pass

class JournalEntryLine(JournalEntryLineBase):
    id: int
    journal_entry_id: int
    line_number: int
    account_code: Optional[str] = None
    account_name: Optional[str] = None

    class Config:
        from_attributes = True
