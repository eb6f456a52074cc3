"""Storage adapters for host framework file fields."""

from s3files.storage.adapter import FileAdapter
from s3files.storage.descriptor import FileDescriptor
from s3files.storage.s3_adapter import S3FileAdapter, S3Options

__all__ = ["FileAdapter", "FileDescriptor", "S3FileAdapter", "S3Options"]
