from pydantic import BaseModel
from typing import Optional, Dict, Any
from datetime import datetime
import enum


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    STATUS_UPDATE = "STATUS_UPDATE"
    DELETE = "DELETE"


class AuditLogCreate(BaseModel):
    table_name: str
    record_id: int
    user_id: str
    action: AuditAction
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None


class AuditLog(AuditLogCreate):
    id: int
    timestamp: datetime

    class Config:
        from_attributes = True
