from typing import Optional
from fastapi import Header, HTTPException, status

# The API gateway verifies the bearer token and forwards the caller's identity
# in these headers. They are trusted as-is.

def get_company_id(x_company_id: Optional[str] = Header(None)) -> str:
    if not x_company_id or not x_company_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-Company-ID header is missing")
    return x_company_id.strip()

def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-ID header is missing")
    return x_user_id.strip()
