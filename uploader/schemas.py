"""
Pydantic models for the JSON bodies the server returns.
This is the source of truth for the wire shape; the client parses the same models.
"""

from pydantic import BaseModel

# Multipart field every file part is sent under
FILES_FIELD = "files"


class ManifestEntry(BaseModel):
    filename: str
    size: int
    url: str


class UploadResponse(BaseModel):
    """Body of a successful POST /upload."""
    ok: bool = True
    files: list[ManifestEntry]


class ListingResponse(BaseModel):
    """Body of a successful GET /files."""
    ok: bool = True
    files: list[str]


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
