"""
Account lookups against the Chart of Accounts.

The ledger does not own accounts. It only needs to know, for an account id,
whether the account exists in the caller's company, whether it is active, and
which side its balance normally sits on. `AccountDirectory` is that narrow
interface; the two implementations read the shared `chart_of_accounts` table
or call the Chart of Accounts service over HTTP.
"""
import logging
import os
from typing import Dict, Iterable, List

import httpx
from fastapi import Depends
from pydantic import ValidationError
from sqlalchemy.orm import Session

from database import get_db
from models.chart_of_accounts import ChartOfAccounts
from schemas.chart_of_accounts import AccountInfo
from utils.exceptions import AccountDirectoryUnavailable, AccountNotFound

logger = logging.getLogger("account_directory")

CHART_OF_ACCOUNTS_URL = os.getenv("CHART_OF_ACCOUNTS_URL", "")
CHART_OF_ACCOUNTS_TIMEOUT = float(os.getenv("CHART_OF_ACCOUNTS_TIMEOUT", "5"))


class AccountDirectory:
    def get_accounts(self, company_id: str, account_ids: Iterable[int]) -> Dict[int, AccountInfo]:
        """Resolve ids to accounts; ids that do not resolve are simply absent."""
        raise NotImplementedError

    def list_accounts(self, company_id: str) -> List[AccountInfo]:
        """All accounts of the company, active or not, ordered by code."""
        raise NotImplementedError


class SqlAccountDirectory(AccountDirectory):
    def __init__(self, db: Session):
        self.db = db

    def get_accounts(self, company_id, account_ids):
        ids = set(account_ids)
        if not ids:
            return {}
        records = self.db.query(ChartOfAccounts).filter(
            ChartOfAccounts.id.in_(ids),
            ChartOfAccounts.company_id == company_id
        ).all()
        return {record.id: _to_account_info(record) for record in records}

    def list_accounts(self, company_id):
        records = self.db.query(ChartOfAccounts).filter(
            ChartOfAccounts.company_id == company_id
        ).order_by(ChartOfAccounts.account_code).all()
        return [_to_account_info(record) for record in records]


class HttpAccountDirectory(AccountDirectory):
    """Client for the Chart of Accounts service (`GET /accounts`)."""

    def __init__(self, base_url: str, timeout: float = CHART_OF_ACCOUNTS_TIMEOUT, transport=None):
        self.client = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def close(self):
        self.client.close()

    def get_accounts(self, company_id, account_ids):
        ids = set(account_ids)
        if not ids:
            return {}
        return {account.id: account for account in self.list_accounts(company_id) if account.id in ids}

    def list_accounts(self, company_id):
        try:
            response = self.client.get("/accounts", headers={"X-Company-ID": company_id})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Chart of Accounts request failed for company {company_id}: {e}")
            raise AccountDirectoryUnavailable(str(e)) from e

        # The service answers either with a bare list or with {"data": [...]}
        rows = payload.get("data", []) if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            logger.error(f"Chart of Accounts returned no account list for company {company_id}: {payload!r}")
            raise AccountDirectoryUnavailable(f"unexpected payload: {payload!r}")
        try:
            accounts = [AccountInfo.model_validate(row) for row in rows]
        except ValidationError as e:
            logger.error(f"Chart of Accounts returned malformed accounts for company {company_id}: {e}")
            raise AccountDirectoryUnavailable(str(e)) from e
        return sorted(accounts, key=lambda account: account.account_code)


def _to_account_info(record: ChartOfAccounts) -> AccountInfo:
    return AccountInfo.model_validate({
        "id": record.id,
        "company_id": record.company_id,
        "account_code": record.account_code,
        "account_name": record.account_name,
        "account_type": record.account_type,
        "normal_balance": record.normal_balance,
        "is_active": bool(record.is_active),
    })


def check_accounts_exist(directory: AccountDirectory, account_ids: Iterable[int], company_id: str) -> Dict[int, AccountInfo]:
    """
    Confirm every referenced account exists in the company and is active.

    Ids are checked in the order given, so the error names the first bad one.

    Raises:
        AccountNotFound: an id is unknown, inactive, or owned by another company.
    """
    ordered_ids = list(dict.fromkeys(account_ids))
    accounts = directory.get_accounts(company_id, ordered_ids)
    for account_id in ordered_ids:
        account = accounts.get(account_id)
        if account is None or account.company_id != company_id or not account.is_active:
            raise AccountNotFound(account_id)
    return accounts


def get_account_directory(db: Session = Depends(get_db)):
    """FastAPI dependency: HTTP directory when CHART_OF_ACCOUNTS_URL is set, shared table otherwise."""
    if CHART_OF_ACCOUNTS_URL:
        directory = HttpAccountDirectory(CHART_OF_ACCOUNTS_URL)
        try:
            yield directory
        finally:
            directory.close()
    else:
        yield SqlAccountDirectory(db)
