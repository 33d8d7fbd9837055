from pydantic import BaseModel, model_validator
from typing import Optional
import enum


class NormalBalance(str, enum.Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


# Assets and expenses grow on the debit side; everything else on the credit side
NORMAL_BALANCE_BY_TYPE = {
    "ASSET": NormalBalance.DEBIT,
    "EXPENSE": NormalBalance.DEBIT,
    "LIABILITY": NormalBalance.CREDIT,
    "EQUITY": NormalBalance.CREDIT,
    "REVENUE": NormalBalance.CREDIT,
}


def normal_balance_for(account_type: Optional[str]) -> NormalBalance:
    if not account_type:
        return NormalBalance.DEBIT
    return NORMAL_BALANCE_BY_TYPE.get(account_type.upper(), NormalBalance.DEBIT)


class AccountInfo(BaseModel):
    """What the ledger needs to know about an account, and nothing more."""
    id: int
    company_id: str
    account_code: str
    account_name: str
    account_type: str
    normal_balance: NormalBalance
    is_active: bool = True

    @model_validator(mode="before")
    @classmethod
    def fill_normal_balance(cls, data):
        if isinstance(data, dict) and not data.get("normal_balance"):
            data = {**data, "normal_balance": normal_balance_for(data.get("account_type"))}
        return data
