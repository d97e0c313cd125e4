# filevault/dependencies.py
import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from filevault.core.config import Settings
from filevault.errors import Unauthorized
from filevault.services.auth import Authenticator
from filevault.services.sessions import SessionStore
from filevault.services.storage import FileStorage

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


# DB session dependency
def get_db(request: Request):
    db = request.app.state.db_sessionmaker()
    try:
        yield db
    finally:
        db.close()


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_storage(request: Request) -> FileStorage:
    return request.app.state.storage


def get_session_token(request: Request, settings: Settings = Depends(get_app_settings)):
    return request.cookies.get(settings.session_cookie_name)


def require_login(
    request: Request,
    token=Depends(get_session_token),
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
) -> str:
    """Username bound to the request's session, or Unauthorized."""
    username = sessions.get(db, token)
    if username is None:
        logger.warning("Unauthenticated %s %s", request.method, request.url.path)
        raise Unauthorized("Login required")
    return username
