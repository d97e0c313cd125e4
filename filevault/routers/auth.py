# filevault/routers/auth.py
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from filevault.core.config import Settings
from filevault.dependencies import (
    get_app_settings,
    get_authenticator,
    get_db,
    get_session_store,
    get_session_token,
)
from filevault.errors import AlreadyExists, Unauthorized
from filevault.models.user import Credentials
from filevault.services.auth import Authenticator
from filevault.services.sessions import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_credentials(request: Request) -> Credentials:
    # invalid JSON and schema violations are both ValueErrors
    return Credentials.model_validate(await request.json())


def _start_session(response: JSONResponse, settings: Settings, sessions: SessionStore,
                   db: Session, old_token, username: str) -> JSONResponse:
    # never reuse a token issued before authentication
    sessions.destroy(db, old_token)
    token = sessions.create(db, username)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
    )
    return response


@router.post("/register")
async def register(
    request: Request,
    old_token=Depends(get_session_token),
    settings: Settings = Depends(get_app_settings),
    authenticator: Authenticator = Depends(get_authenticator),
    sessions: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
):
    try:
        creds = await _read_credentials(request)
    except ValueError:
        return JSONResponse({"success": False, "error": "Invalid request body"}, status_code=400)

    try:
        username = await run_in_threadpool(authenticator.register, creds.username, creds.password)
    except AlreadyExists as e:
        return JSONResponse({"success": False, "error": str(e)}, status_code=400)

    response = JSONResponse({"success": True})
    return await run_in_threadpool(
        _start_session, response, settings, sessions, db, old_token, username
    )


@router.post("/login")
async def login(
    request: Request,
    old_token=Depends(get_session_token),
    settings: Settings = Depends(get_app_settings),
    authenticator: Authenticator = Depends(get_authenticator),
    sessions: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
):
    try:
        creds = await _read_credentials(request)
        username = await run_in_threadpool(authenticator.authenticate, creds.username, creds.password)
    except (ValueError, Unauthorized):
        return JSONResponse({"success": False}, status_code=401)

    logger.info("User %r logged in", username)
    response = JSONResponse({"success": True})
    return await run_in_threadpool(
        _start_session, response, settings, sessions, db, old_token, username
    )


@router.post("/logout")
def logout(
    token=Depends(get_session_token),
    settings: Settings = Depends(get_app_settings),
    sessions: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
):
    if token:
        sessions.destroy(db, token)
        logger.info("Session closed")

    response = JSONResponse({"success": True})
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="none" if settings.cookie_secure else "lax",
    )
    return response
