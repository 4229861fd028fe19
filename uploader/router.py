"""
HTTP endpoints for uploading, listing and serving files.

POST /upload           — multipart upload, field "files" (repeatable)
GET  /files            — names currently in the storage directory
GET  /files/{filename} — raw bytes of one stored file
"""

import logging
import mimetypes

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from starlette.datastructures import UploadFile

from uploader.config import Settings
from uploader.errors import UploadRejected
from uploader.filters import REJECTION_MESSAGE, is_allowed
from uploader.schemas import FILES_FIELD, ListingResponse, ManifestEntry, UploadResponse
from uploader.storage import FileStore, client_basename

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> FileStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# ---------------------------------------------------------
# Endpoints
# ---------------------------------------------------------

@router.post("/upload", response_model=UploadResponse)
async def upload_files(
    request: Request,
    store: FileStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> UploadResponse:
    """
    Save every file part sent under "files".

    All parts are checked before anything is written, so a rejected request
    leaves the storage directory untouched.
    """
    accepted: list[tuple[str, bytes]] = []

    async with request.form() as form:
        for field_name, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            if field_name != FILES_FIELD:
                raise UploadRejected(f"Unexpected field: {field_name}")

            # Browsers may send a full path; only the final component is kept
            filename = client_basename(value.filename or "")
            store.check_name(filename)

            if not is_allowed(filename, value.content_type):
                logger.warning("Rejected %s (%s): disallowed type", filename, value.content_type)
                raise UploadRejected(REJECTION_MESSAGE)

            # One byte past the limit is enough to know the file is too large
            data = await value.read(settings.max_upload_bytes + 1)
            if len(data) > settings.max_upload_bytes:
                logger.warning("Rejected %s: larger than %d bytes", filename, settings.max_upload_bytes)
                raise UploadRejected("File too large")

            accepted.append((filename, data))

    saved = [store.save(filename, data) for filename, data in accepted]

    return UploadResponse(
        files=[ManifestEntry(filename=f.filename, size=f.size, url=f.url) for f in saved]
    )


@router.get("/files", response_model=ListingResponse)
def list_files(store: FileStore = Depends(get_store)) -> ListingResponse:
    """List all uploaded files."""
    return ListingResponse(files=store.list_names())


@router.get("/files/{filename:path}")
def get_file(filename: str, store: FileStore = Depends(get_store)) -> FileResponse:
    """Serve a stored file with a content type guessed from its name."""
    path = store.resolve(filename)
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(path, media_type=media_type)
