"""
Health History Model
One row per diagnosis a user chose to keep. Rows are append-only.
"""

import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Index
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import relationship
from database import Base


class UTCDateTime(TypeDecorator):
    """
    Stores datetimes as naive UTC and returns them as aware UTC

    SQLite has no timezone support, so normalising here keeps the value
    identical across backends.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)


class HealthHistory(Base):
    """
    Health History Model

    symptoms holds the list exactly as the client submitted it.
    """
    __tablename__ = "health_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey("users.user_id"), nullable=False, index=True)
    symptoms = Column(JSON, nullable=False)
    diagnosis = Column(String(255), nullable=False)
    timestamp = Column(UTCDateTime(), nullable=False)

    user = relationship("User", back_populates="history")

    __table_args__ = (
        Index('ix_health_history_user_timestamp', 'user_id', 'timestamp'),
    )

    def __repr__(self):
        return f"<HealthHistory(id={self.id}, user_id='{self.user_id}', diagnosis='{self.diagnosis}')>"
