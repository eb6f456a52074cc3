from __future__ import annotations

import posixpath
from urllib.parse import quote

# Reserved URI characters left as-is. Space and ! ' ( ) # * + ? are valid in
# URIs but S3 rejects them in keys, so they are escaped along with the rest.
_KEY_SAFE_CHARACTERS = ";,/:@&=$"


def ensure_leading_slash(path: str) -> str:
    if path.startswith("/"):
        return path
    return f"/{path}"


def resolve_path(path: str, filename: str) -> str:
    """Join a store path and a filename into a normalised absolute path."""
    resolved = posixpath.normpath(posixpath.join(ensure_leading_slash(path), filename))
    return "/" + resolved.lstrip("/")


def encode_special_characters(path: str) -> str:
    return quote(path, safe=_KEY_SAFE_CHARACTERS)


def to_object_key(resolved_path: str) -> str:
    return resolved_path.lstrip("/")
