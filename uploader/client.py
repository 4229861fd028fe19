"""
Upload client: the same flow as the browser page, driven from Python.

    idle → files-selected → uploading → uploaded | upload-failed

Files are filtered with the server's rule before anything is sent. Every
problem is reported through a Notification so nothing is dropped silently.
"""

import logging
import mimetypes
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

import httpx
from pydantic import ValidationError

from uploader.errors import UploadClientError
from uploader.filters import is_allowed
from uploader.schemas import FILES_FIELD, ListingResponse, ManifestEntry, UploadResponse

logger = logging.getLogger(__name__)

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


class UploadState(str, Enum):
    IDLE = "idle"
    FILES_SELECTED = "files-selected"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    UPLOAD_FAILED = "upload-failed"


@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"  # or "destructive"

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"


@dataclass
class SelectedFile:
    path: Path
    content_type: str
    size: int
    progress: int = 0
    uploaded: bool = False

    @property
    def name(self) -> str:
        return self.path.name


def format_file_size(num_bytes: int) -> str:
    """1536 -> '1.5 KB'. Capped at GB."""
    if num_bytes == 0:
        return "0 Bytes"
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


def guess_content_type(path: Path) -> str:
    return mimetypes.guess_type(path.name)[0] or "application/octet-stream"


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error")
    return None


class UploadSession:
    """
    Holds the current selection and the last upload result.

    `http` is any httpx.Client whose base_url points at the server
    (FastAPI's TestClient works too). `notify` receives every notification;
    they are also kept in `notifications`.
    """

    def __init__(
        self,
        http: httpx.Client,
        notify: Optional[Callable[[Notification], None]] = None,
    ) -> None:
        self._http = http
        self._notify = notify
        self.state = UploadState.IDLE
        self.files: list[SelectedFile] = []
        self.uploaded: list[ManifestEntry] = []
        self.notifications: list[Notification] = []

    @classmethod
    def connect(cls, base_url: str, notify: Optional[Callable[[Notification], None]] = None,
                timeout: float = 30.0) -> "UploadSession":
        return cls(httpx.Client(base_url=base_url, timeout=timeout), notify=notify)

    def close(self) -> None:
        self._http.close()

    # ---------------------------------------------------------
    # Notifications
    # ---------------------------------------------------------

    def _emit(self, title: str, description: str, variant: str = "default") -> None:
        note = Notification(title=title, description=description, variant=variant)
        self.notifications.append(note)
        if note.is_error:
            logger.warning("%s: %s", title, description)
        else:
            logger.info("%s: %s", title, description)
        if self._notify is not None:
            self._notify(note)

    # ---------------------------------------------------------
    # Selection
    # ---------------------------------------------------------

    @property
    def can_submit(self) -> bool:
        return bool(self.files) and self.state is not UploadState.UPLOADING

    def select(self, paths: Iterable[Union[str, Path]]) -> list[SelectedFile]:
        """
        Replace the selection with the allowed files among `paths`.

        Disallowed files are reported and discarded. If none are allowed the
        previous selection stays as it was.
        """
        if self.state is UploadState.UPLOADING:
            raise UploadClientError("An upload is already in progress")

        candidates: list[SelectedFile] = []
        skipped: list[str] = []
        for raw in paths:
            path = Path(raw)
            content_type = guess_content_type(path)
            if not path.is_file() or not is_allowed(path.name, content_type):
                skipped.append(path.name)
                continue
            candidates.append(SelectedFile(path=path, content_type=content_type, size=path.stat().st_size))

        if not candidates:
            self._emit("Invalid file type", "Please select .txt or .pdf files only.", "destructive")
            return []

        if skipped:
            self._emit(
                "Some files were skipped",
                f"Only .txt and .pdf files are allowed: {', '.join(skipped)}",
                "destructive",
            )

        self.files = candidates
        self.uploaded = []
        self.state = UploadState.FILES_SELECTED
        return candidates

    def remove(self, index: int) -> SelectedFile:
        if self.state is UploadState.UPLOADING:
            raise UploadClientError("An upload is already in progress")
        removed = self.files.pop(index)
        if not self.files:
            self.state = UploadState.IDLE
        return removed

    # ---------------------------------------------------------
    # Upload
    # ---------------------------------------------------------

    def upload(self) -> Optional[list[ManifestEntry]]:
        """
        Send every selected file in one multipart request.

        Returns the server's manifest, or None when nothing was uploaded.
        On failure the selection is kept so the upload can be retried.
        """
        if self.state is UploadState.UPLOADING:
            raise UploadClientError("An upload is already in progress")
        if not self.files:
            self._emit("No files selected", "Please choose at least one file first.", "destructive")
            return None

        self.state = UploadState.UPLOADING
        for selected in self.files:
            selected.progress = 0

        try:
            manifest = self._post_files()
        except UploadClientError as exc:
            self.state = UploadState.UPLOAD_FAILED
            self._emit("Upload failed", str(exc), "destructive")
            return None
        except Exception as exc:
            # Never stay stuck in UPLOADING; the selection is kept for a retry
            self.state = UploadState.UPLOAD_FAILED
            self._emit("Upload failed", str(exc) or type(exc).__name__, "destructive")
            raise

        self.uploaded = manifest
        for selected in self.files:
            selected.uploaded = True
            selected.progress = 100
        self.state = UploadState.UPLOADED
        self._emit("Upload complete!", f"Successfully uploaded {len(manifest)} file(s).")
        return manifest

    def _post_files(self) -> list[ManifestEntry]:
        try:
            with ExitStack() as stack:
                parts = [
                    (FILES_FIELD, (f.name, stack.enter_context(open(f.path, "rb")), f.content_type))
                    for f in self.files
                ]
                response = self._http.post("/upload", files=parts)
        except OSError as exc:
            raise UploadClientError(f"Could not read {exc.filename}: {exc.strerror}") from exc
        except httpx.HTTPError as exc:
            raise UploadClientError(str(exc) or "Upload failed") from exc

        if response.is_error:
            raise UploadClientError(_error_message(response) or "Upload failed")
        try:
            body = UploadResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise UploadClientError("Upload failed") from exc
        if not body.ok:
            raise UploadClientError(_error_message(response) or "Upload failed")
        return body.files

    # ---------------------------------------------------------
    # Browsing
    # ---------------------------------------------------------

    def list_files(self) -> list[str]:
        try:
            response = self._http.get("/files")
        except httpx.HTTPError as exc:
            raise UploadClientError(str(exc)) from exc
        if response.is_error:
            raise UploadClientError(_error_message(response) or f"Listing failed ({response.status_code})")
        try:
            return ListingResponse.model_validate(response.json()).files
        except (ValueError, ValidationError) as exc:
            raise UploadClientError("Listing failed: unexpected response from server") from exc

    def link(self, entry: ManifestEntry) -> str:
        """Absolute download link for a manifest entry."""
        return str(self._http.base_url.join(entry.url))

    def download(self, url: str) -> bytes:
        """Fetch a stored file by its manifest url, e.g. '/files/notes.txt'."""
        try:
            response = self._http.get(url)
        except httpx.HTTPError as exc:
            raise UploadClientError(str(exc)) from exc
        if response.is_error:
            raise UploadClientError(_error_message(response) or f"Download failed ({response.status_code})")
        return response.content
