# filevault/services/storage.py
import logging
import posixpath
import time
from typing import List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from filevault.core.config import Settings
from filevault.errors import DeleteFailed, LinkGenerationFailed, ListFailed, UploadFailed

logger = logging.getLogger(__name__)

BACKEND_ERRORS = (BotoCoreError, ClientError)


# --- key naming: every object lives under "<username>/" ---

def list_prefix(username: str) -> str:
    return f"{username}/"


def key_for_upload(username: str, original_filename: str, now_ms: Optional[int] = None) -> str:
    """Key for a new upload: ``<username>/<epoch millis>-<filename>``.

    The timestamp only makes same-name collisions unlikely, two uploads of the
    same name within one millisecond still map to the same key.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    # drop any directory part so the stored name fits in a single path segment
    filename = posixpath.basename(original_filename)
    return f"{list_prefix(username)}{now_ms}-{filename}"


def key_for_file(username: str, filename: str) -> str:
    return f"{list_prefix(username)}{filename}"


def display_name(key: str) -> str:
    return key.rsplit("/", 1)[-1]


def build_s3_client(settings: Settings):
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint_url,
        aws_access_key_id=settings.s3_access_key_id,
        aws_secret_access_key=settings.s3_secret_access_key,
        region_name=settings.s3_region,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


class FileStorage:
    """Upload/list/link/delete scoped to one user's key prefix."""

    def __init__(self, client, bucket: str, url_expiry: int = 3600):
        self.client = client
        self.bucket = bucket
        self.url_expiry = url_expiry

    def upload(self, username: str, content: bytes, original_filename: str,
               content_type: Optional[str] = None) -> str:
        key = key_for_upload(username, original_filename)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type or "application/octet-stream",
            )
        except BACKEND_ERRORS as e:
            logger.exception("Upload of %s failed", key)
            raise UploadFailed("Upload failed") from e

        logger.info("Stored %s (%d bytes)", key, len(content))
        return key

    def list_files(self, username: str) -> List[str]:
        names = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=list_prefix(username)):
                names.extend(display_name(obj["Key"]) for obj in page.get("Contents", []))
        except BACKEND_ERRORS as e:
            logger.exception("Listing files of %r failed", username)
            raise ListFailed("List failed") from e
        return names

    def get_download_link(self, username: str, filename: str) -> str:
        key = key_for_file(username, filename)
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.url_expiry,
            )
        except BACKEND_ERRORS as e:
            logger.exception("Signing a download link for %s failed", key)
            raise LinkGenerationFailed("Link generation failed") from e

    def delete(self, username: str, filename: str) -> None:
        key = key_for_file(username, filename)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except BACKEND_ERRORS as e:
            logger.exception("Delete of %s failed", key)
            raise DeleteFailed("Delete failed") from e

        logger.info("Deleted %s", key)
