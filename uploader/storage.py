"""
Flat on-disk store for uploaded files.

Files live directly under one directory and are addressed by their
client-supplied name. Writing an existing name overwrites it. There is no
index: the directory listing is the source of truth.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

from uploader.errors import FileMissing, StorageError, UploadRejected

logger = logging.getLogger(__name__)

URL_PREFIX = "/files"

# Characters encodeURIComponent leaves alone besides letters, digits and "-_.~"
_URL_SAFE = "!'()*"


@dataclass
class StoredFile:
    filename: str
    size: int

    @property
    def url(self) -> str:
        return file_url(self.filename)


def file_url(filename: str) -> str:
    """Public URL of a stored file, with the name percent-encoded."""
    return f"{URL_PREFIX}/{quote(filename, safe=_URL_SAFE)}"


def client_basename(name: str) -> str:
    """Last path component of a client-supplied filename, for either separator."""
    return re.split(r"[\\/]", name)[-1]


def is_plain_name(name: str) -> bool:
    """True when `name` addresses an entry directly inside the directory."""
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return Path(name).name == name


class FileStore:
    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def check_name(self, name: str) -> None:
        """Raise UploadRejected if `name` cannot be stored as-is."""
        if not is_plain_name(name):
            raise UploadRejected("Invalid filename")

    def save(self, name: str, data: bytes) -> StoredFile:
        """Write `data` under `name`, replacing any previous file with that name."""
        self.check_name(name)
        path = self.directory / name
        try:
            path.write_bytes(data)
        except OSError as exc:
            logger.exception("Failed to write %s", path)
            raise StorageError(f"Failed to save {name}: {exc.strerror or exc}") from exc

        logger.info("Saved %s (%d bytes)", name, len(data))
        return StoredFile(filename=name, size=len(data))

    def list_names(self) -> list[str]:
        """Names of all entries in the directory, in enumeration order."""
        try:
            return [entry.name for entry in self.directory.iterdir()]
        except OSError as exc:
            logger.exception("Failed to read %s", self.directory)
            raise StorageError(str(exc)) from exc

    def resolve(self, name: str) -> Path:
        """Path of the stored file called `name`; FileMissing if there is none."""
        if not is_plain_name(name):
            raise FileMissing("File not found")
        path = self.directory / name
        try:
            found = path.is_file()
        except OSError:
            # e.g. a name longer than the filesystem allows
            found = False
        if not found:
            raise FileMissing("File not found")
        return path
