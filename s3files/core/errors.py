from __future__ import annotations


class StorageError(Exception):
    error_type = "UNKNOWN"


class ConfigurationError(StorageError):
    error_type = "CONFIGURATION"

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")


class SourceFileError(StorageError):
    error_type = "SOURCE_FILE"


class DescriptorError(StorageError):
    error_type = "DESCRIPTOR"


class FilenameConflictError(StorageError):
    error_type = "FILENAME_CONFLICT"


class StoreRequestError(StorageError):
    error_type = "STORE_REQUEST"

    def __init__(self, operation: str, message: str):
        super().__init__(f"S3 {operation} failed: {message}")
        self.operation = operation


class UnexpectedStatusError(StoreRequestError):
    error_type = "UNEXPECTED_STATUS"

    def __init__(self, operation: str, status_code: int | None):
        super().__init__(operation, f"S3 returned status code {status_code}")
        self.status_code = status_code
