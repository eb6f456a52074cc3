"""Filename generation strategies used when storing uploads."""

from __future__ import annotations

import posixpath
import re
import secrets
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from s3files.storage.descriptor import FileDescriptor

FilenameGenerator = Callable[["FileDescriptor", int], str]

# Control characters plus characters reserved on common filesystems.
_UNSAFE_FILENAME_CHARS = re.compile(r'[\x00-\x1f\x80-\x9f/\\?<>:*|"]')
_RESERVED_NAMES = {".", ".."}


def sanitize_filename(name: str) -> str:
    # Browsers on Windows may send the full client path.
    basename = name.replace("\\", "/").rsplit("/", 1)[-1]
    cleaned = _UNSAFE_FILENAME_CHARS.sub("", basename).strip()
    if not cleaned or cleaned in _RESERVED_NAMES:
        raise ValueError(f"Cannot derive a filename from {name!r}")
    return cleaned


def _extension(file: FileDescriptor) -> str:
    if not file.originalname:
        return ""
    return posixpath.splitext(file.originalname.replace("\\", "/"))[1].lower()


def random_filename(file: FileDescriptor, attempt: int) -> str:
    """Random 32 character hex name keeping the original extension."""
    return secrets.token_hex(16) + _extension(file)


def original_filename(file: FileDescriptor, attempt: int) -> str:
    """
    The client's filename, sanitised.

    On retries a counter is appended before the extension, so attempt 2 of
    "report.pdf" yields "report-2.pdf".
    """
    if not file.originalname:
        raise ValueError("File has no original name")
    name = sanitize_filename(file.originalname)
    if attempt <= 0:
        return name
    stem, ext = posixpath.splitext(name)
    return f"{stem}-{attempt}{ext}"
