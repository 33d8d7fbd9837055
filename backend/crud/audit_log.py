from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from models.audit_log import AuditLog
from schemas.audit_log import AuditAction, AuditLogCreate

def create_audit_log(db: Session, log_entry: AuditLogCreate) -> AuditLog:
    """
    Append an audit record to the caller's open transaction.

    Nothing is committed here: the record becomes visible together with the
    mutation it describes, or not at all.
    """
    data = log_entry.model_dump()
    data["action"] = log_entry.action.value
    db_log_entry = AuditLog(**data)
    db.add(db_log_entry)
    db.flush()
    return db_log_entry

def record_mutation(
    db: Session,
    table_name: str,
    record_id: int,
    action: AuditAction,
    user_id: str,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    return create_audit_log(db, AuditLogCreate(
        table_name=table_name,
        record_id=record_id,
        user_id=user_id,
        action=action,
        old_values=old_values,
        new_values=new_values,
    ))

def get_audit_logs(db: Session, table_name: str, record_id: int) -> List[AuditLog]:
    return db.query(AuditLog).filter(
        AuditLog.table_name == table_name,
        AuditLog.record_id == record_id
    ).order_by(AuditLog.id.asc()).all()
