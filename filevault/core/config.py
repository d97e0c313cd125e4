# filevault/core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # S3-compatible object storage (IDrive e2, R2, MinIO, AWS...)
    s3_endpoint_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("s3_endpoint_url", "idrive_endpoint")
    )
    s3_access_key_id: str = Field(
        validation_alias=AliasChoices("s3_access_key_id", "idrive_access_key_id")
    )
    s3_secret_access_key: str = Field(
        validation_alias=AliasChoices("s3_secret_access_key", "idrive_secret_access_key")
    )
    s3_bucket_name: str = Field(
        validation_alias=AliasChoices("s3_bucket_name", "idrive_bucket_name")
    )
    s3_region: str = "auto"
    download_url_expiry: int = 3600
    max_upload_bytes: int = 25 * 1024 * 1024

    # sessions
    session_secret: str = Field(
        default="rk-secret", validation_alias=AliasChoices("session_secret", "jwt_secret")
    )
    session_max_age: int = 14 * 24 * 60 * 60
    session_cookie_name: str = "filevault_session"
    # SameSite=None cookies are only accepted by browsers over HTTPS
    cookie_secure: bool = True
    database_url: str = "sqlite:///./sessions.db"

    # credentials file
    users_file: str = "./users.json"
    default_admin_username: str = "admin"
    default_admin_password: str = "r"

    # server
    host: str = "0.0.0.0"
    port: int = 10000
    # peers whose X-Forwarded-* headers are trusted, comma separated
    forwarded_allow_ips: str = "127.0.0.1"
    allowed_origins: List[str] = [
        "https://jogendradipeng11-png.github.io",
        "https://radhe-krishna-h7lq.onrender.com",
    ]
    log_level: str = "INFO"

    # Tell pydantic-settings to load from .env at project root
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore any extra stuff in .env
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
