"""File descriptor exchanged between the host framework and storage adapters."""

from __future__ import annotations

from dataclasses import dataclass

# Extra fields an adapter asks the host to persist alongside each file.
SCHEMA_TYPES = {
    "filename": str,
    "bucket": str,
    "path": str,
    "etag": str,
}

SCHEMA_FIELD_DEFAULTS = {
    "filename": True,
    "bucket": False,
    "path": False,
    "etag": False,
}


@dataclass
class FileDescriptor:
    """
    An uploaded file.

    Created by the host before upload. ``upload_file`` writes ``filename``,
    ``etag``, ``path`` and ``bucket`` back onto the same instance; the host
    persists whichever of those fields its schema enables.

    Attributes:
        local_path: Temporary file holding the uploaded bytes. Only valid
            while the upload call runs.
        originalname: Filename as sent by the client.
        filename: Stored filename, relative to ``path``.
        mimetype: MIME type of the content.
        size: Content length in bytes.
        path: Store path prefix the file lives under (e.g. "/uploads").
        bucket: Bucket holding the object.
        etag: Content digest reported by the store.
    """

    local_path: str | None = None
    originalname: str | None = None
    filename: str | None = None
    mimetype: str | None = None
    size: int | None = None
    path: str | None = None
    bucket: str | None = None
    etag: str | None = None
