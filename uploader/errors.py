"""
Exceptions raised by the store and the upload handler.

The app factory registers a handler that turns any UploadError into
`{"ok": false, "error": <message>}` with the error's status code.
"""


class UploadError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UploadRejected(UploadError):
    """Disallowed type, oversize file, unexpected field or unusable filename."""
    status_code = 400


class FileMissing(UploadError):
    status_code = 404


class StorageError(UploadError):
    """The storage directory could not be read or written."""
    status_code = 500


class UploadClientError(Exception):
    """Raised by the client when the server cannot be reached or answers with an error."""
