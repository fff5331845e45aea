from sqlalchemy import Column, DateTime, String, Text
from datetime import datetime, timezone
from stockroom.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key = Column(String, primary_key=True)

    # JSON text, fully replaced on every write
    value = Column(Text, nullable=False)

    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
