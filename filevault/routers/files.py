# filevault/routers/files.py
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from filevault.core.config import Settings
from filevault.dependencies import get_app_settings, get_storage, require_login
from filevault.errors import DeleteFailed, LinkGenerationFailed, ListFailed, UploadFailed
from filevault.services.storage import FileStorage

logger = logging.getLogger(__name__)

router = APIRouter()


# room for multipart boundaries and part headers on top of the file itself
MULTIPART_OVERHEAD = 16 * 1024


# --- upload a new file ---
@router.post("/upload")
async def upload_file(
    request: Request,
    username: str = Depends(require_login),
    settings: Settings = Depends(get_app_settings),
    storage: FileStorage = Depends(get_storage),
):
    # the body is only parsed after the login check and the size check
    try:
        declared = int(request.headers.get("content-length", ""))
    except ValueError:
        declared = None
    if declared is not None and declared > settings.max_upload_bytes + MULTIPART_OVERHEAD:
        return JSONResponse({"success": False, "error": "File too large"}, status_code=413)

    async with request.form(max_files=1) as form:
        file = form.get("file")
        if not isinstance(file, UploadFile):
            return JSONResponse({"success": False, "error": "No file uploaded"}, status_code=400)

        # read one byte past the limit to detect oversized uploads
        content = await file.read(settings.max_upload_bytes + 1)
        filename, content_type = file.filename, file.content_type

    if len(content) > settings.max_upload_bytes:
        return JSONResponse({"success": False, "error": "File too large"}, status_code=413)

    try:
        await run_in_threadpool(
            storage.upload, username, content, filename or "file", content_type
        )
    except UploadFailed:
        return JSONResponse({"success": False, "error": "Upload failed"}, status_code=500)

    return {"success": True}


# --- list the user's files ---
@router.get("/files")
def list_files(
    username: str = Depends(require_login),
    storage: FileStorage = Depends(get_storage),
):
    try:
        return storage.list_files(username)
    except ListFailed:
        # already logged, the client just sees an empty listing
        return JSONResponse([], status_code=500)


# --- pre-signed download link ---
@router.get("/file/{name}")
def download_link(
    name: str,
    username: str = Depends(require_login),
    storage: FileStorage = Depends(get_storage),
):
    try:
        return {"url": storage.get_download_link(username, name)}
    except LinkGenerationFailed:
        return JSONResponse({"url": None}, status_code=500)


# --- delete a file ---
@router.delete("/file/{name}")
def delete_file(
    name: str,
    username: str = Depends(require_login),
    storage: FileStorage = Depends(get_storage),
):
    try:
        storage.delete(username, name)
    except DeleteFailed:
        return JSONResponse({"success": False}, status_code=500)

    return {"success": True}
