from sqlalchemy import Column, Integer, String, DateTime, JSON, Index, event
from database import Base
from models.audit_mixin import utcnow
from utils.exceptions import AuditLogImmutable


class AuditLog(Base):
    __tablename__ = "audit_log"
    __table_args__ = (
        Index('idx_audit_log_record', 'table_name', 'record_id'),
    )

    id = Column(Integer, primary_key=True, index=True)
    table_name = Column(String, nullable=False)
    record_id = Column(Integer, nullable=False)
    action = Column(String, nullable=False)  # CREATE, UPDATE, STATUS_UPDATE, DELETE
    old_values = Column(JSON)
    new_values = Column(JSON)
    user_id = Column(String, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)


# Audit rows are append-only
@event.listens_for(AuditLog, "before_update")
def _refuse_audit_update(mapper, connection, target):
    raise AuditLogImmutable(target.id)


@event.listens_for(AuditLog, "before_delete")
def _refuse_audit_delete(mapper, connection, target):
    raise AuditLogImmutable(target.id)
