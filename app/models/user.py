"""
User Model
Profile rows for accounts issued by the identity provider
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base


class User(Base):
    """
    User Model

    user_id is the opaque identifier handed out at registration and used as
    the token subject; it is never derived from the email.
    """
    __tablename__ = "users"

    user_id = Column(String(64), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    history = relationship("HealthHistory", back_populates="user", lazy="noload")

    def __repr__(self):
        return f"<User(user_id='{self.user_id}', email='{self.email}')>"
