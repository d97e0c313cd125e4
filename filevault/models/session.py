# filevault/models/session.py
from sqlalchemy import Column, DateTime, String

from filevault.models.database import Base


class UserSession(Base):
    __tablename__ = "sessions"

    # HMAC of the cookie token, the token itself is never stored
    token_hash = Column(String(64), primary_key=True)
    username = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
