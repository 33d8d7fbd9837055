from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from schemas.ledger_reports import AccountBalancesReport, TrialBalanceReport
from crud import ledger_balances as crud_ledger_balances
from datetime import date
from typing import Optional
from utils.account_directory import AccountDirectory, get_account_directory
from utils.tenancy import get_company_id, get_user_id

router = APIRouter(
    tags=["Ledger Reports"],
)

@router.get("/trial-balance", response_model=TrialBalanceReport)
def get_trial_balance(
    as_of_date: Optional[date] = None,
    db: Session = Depends(get_db),
    directory: AccountDirectory = Depends(get_account_directory),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    return crud_ledger_balances.get_trial_balance(
        db=db,
        directory=directory,
        company_id=company_id,
        as_of_date=as_of_date or date.today()
    )

@router.get("/account-balances", response_model=AccountBalancesReport)
def get_account_balances(
    as_of_date: Optional[date] = None,
    account_id: Optional[int] = None,
    db: Session = Depends(get_db),
    directory: AccountDirectory = Depends(get_account_directory),
    company_id: str = Depends(get_company_id),
    user_id: str = Depends(get_user_id)
):
    return crud_ledger_balances.get_account_balances(
        db=db,
        directory=directory,
        company_id=company_id,
        as_of_date=as_of_date or date.today(),
        account_id=account_id
    )
