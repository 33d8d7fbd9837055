from sqlalchemy import Column, DateTime, String
from datetime import datetime
import pytz


def utcnow() -> datetime:
    """Timezone-aware current time; every ledger timestamp is stored in UTC."""
    return datetime.now(pytz.utc)


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    `created_by` / `updated_by` hold the user id injected by the API gateway.
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    created_by = Column(String, nullable=False)
    updated_by = Column(String, nullable=True)
