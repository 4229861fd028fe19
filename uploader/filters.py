"""
Type filter shared by the upload handler and the client.

A file is accepted when its declared content type is PDF or plain text,
or when its name ends in .pdf / .txt (case-insensitive).
"""

from typing import Optional

ALLOWED_CONTENT_TYPES = {"application/pdf", "text/plain"}
ALLOWED_EXTENSIONS = (".pdf", ".txt")

REJECTION_MESSAGE = "Only .txt and .pdf files are allowed"


def is_allowed(filename: str, content_type: Optional[str]) -> bool:
    if content_type:
        # "text/plain; charset=utf-8" counts as text/plain
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in ALLOWED_CONTENT_TYPES:
            return True
    return (filename or "").lower().endswith(ALLOWED_EXTENSIONS)
