# nocturne/models/kv_entry.py
from sqlalchemy import Column, String, Text, DateTime, func

from nocturne.db.base import Base


class KVEntry(Base):
    """One opaque string value per key; the substrate for every other record."""

    __tablename__ = "kv_entries"

    key = Column(String(120), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
