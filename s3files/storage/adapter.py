"""Abstract file adapter interface implemented for the host framework."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from s3files.core.errors import ConfigurationError
from s3files.storage.descriptor import (
    SCHEMA_FIELD_DEFAULTS,
    SCHEMA_TYPES,
    FileDescriptor,
)


class FileAdapter(ABC):
    """Interface the host's file fields call into."""

    compatibility_level = 1
    SCHEMA_TYPES = SCHEMA_TYPES
    SCHEMA_FIELD_DEFAULTS = SCHEMA_FIELD_DEFAULTS

    def __init__(self, schema: Optional[Mapping[str, bool]] = None):
        schema = dict(schema or {})
        unknown = sorted(set(schema) - set(self.SCHEMA_TYPES))
        if unknown:
            raise ConfigurationError(f"Unknown schema fields: {', '.join(unknown)}")
        self._schema = {**self.SCHEMA_FIELD_DEFAULTS, **schema}

    @property
    def schema_fields(self) -> Dict[str, bool]:
        """Extra descriptor fields the host should persist, with their flags."""
        return dict(self._schema)

    @abstractmethod
    def upload_file(self, file: FileDescriptor) -> FileDescriptor:
        """
        Store the file's bytes and annotate the descriptor.

        Args:
            file: Descriptor with ``local_path``, ``mimetype`` and ``size`` set

        Returns:
            The same descriptor with ``filename``, ``etag``, ``path`` and
            ``bucket`` overwritten

        Raises:
            SourceFileError: If the local file cannot be read
            StoreRequestError: If the store rejects the upload
        """
        pass

    @abstractmethod
    def get_file_url(self, file: FileDescriptor) -> str:
        """Public URL for a stored file. Performs no I/O."""
        pass

    @abstractmethod
    def remove_file(self, file: FileDescriptor) -> None:
        """
        Delete a stored file.

        Raises:
            StoreRequestError: If the store reports a failure
        """
        pass

    @abstractmethod
    def file_exists(self, filename: str) -> Optional[Dict[str, Any]]:
        """
        Check whether a file exists under the default path.

        Returns:
            Object metadata if it exists, None otherwise
        """
        pass
