# filevault/main.py
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filevault.core.config import Settings, get_settings
from filevault.core.logging import setup_logging
from filevault.errors import Unauthorized
from filevault.models.database import make_sessionmaker
from filevault.routers import auth, files
from filevault.services.auth import Authenticator
from filevault.services.credentials import CredentialStore
from filevault.services.sessions import SessionStore
from filevault.services.storage import FileStorage, build_s3_client

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, s3_client=None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="FileVault")

    app.state.settings = settings
    app.state.db_sessionmaker = make_sessionmaker(settings.database_url)
    app.state.authenticator = Authenticator(
        CredentialStore(
            settings.users_file,
            settings.default_admin_username,
            settings.default_admin_password,
        )
    )
    app.state.session_store = SessionStore(settings.session_secret, settings.session_max_age)
    app.state.storage = FileStorage(
        s3_client or build_s3_client(settings),
        settings.s3_bucket_name,
        settings.download_url_expiry,
    )

    # the frontend lives on another origin and sends the session cookie
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Unauthorized)
    async def login_required(request: Request, exc: Unauthorized):
        return JSONResponse({"success": False, "error": "Login required"}, status_code=401)

    # include our routers
    app.include_router(auth.router)
    app.include_router(files.router)

    @app.get("/")
    def home():
        return {"message": "FileVault backend running"}

    return app


def run() -> None:
    settings = get_settings()
    app = create_app(settings)
    logger.info("Server running on port %d", settings.port)
    # runs behind a TLS-terminating proxy in production
    uvicorn.run(app, host=settings.host, port=settings.port,
                proxy_headers=True, forwarded_allow_ips=settings.forwarded_allow_ips)


if __name__ == "__main__":
    run()
