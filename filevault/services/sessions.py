# filevault/services/sessions.py
import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from filevault.models.session import UserSession

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # naive UTC, matching what the DateTime columns hold
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SessionStore:
    """Server-side session records keyed by an opaque cookie token.

    Sessions expire a fixed ``max_age`` seconds after creation; activity does
    not extend them.
    """

    def __init__(self, secret: str, max_age: int, clock: Callable[[], datetime] = _utcnow):
        self.secret = secret.encode("utf-8")
        self.max_age = timedelta(seconds=max_age)
        self.clock = clock

    def _hash(self, token: str) -> str:
        return hmac.new(self.secret, token.encode("utf-8"), hashlib.sha256).hexdigest()

    def create(self, db: Session, username: str) -> str:
        self.purge_expired(db)

        token = secrets.token_urlsafe(32)
        now = self.clock()
        db.add(UserSession(
            token_hash=self._hash(token),
            username=username,
            created_at=now,
            expires_at=now + self.max_age,
        ))
        db.commit()
        return token

    def get(self, db: Session, token: Optional[str]) -> Optional[str]:
        if not token:
            return None

        record = db.get(UserSession, self._hash(token))
        if record is None:
            return None

        if record.expires_at <= self.clock():
            logger.info("Session for %r expired", record.username)
            db.delete(record)
            db.commit()
            return None

        return record.username

    def destroy(self, db: Session, token: Optional[str]) -> None:
        if not token:
            return
        record = db.get(UserSession, self._hash(token))
        if record is not None:
            db.delete(record)
            db.commit()

    def purge_expired(self, db: Session) -> int:
        count = (
            db.query(UserSession)
            .filter(UserSession.expires_at <= self.clock())
            .delete(synchronize_session=False)
        )
        db.commit()
        return count
