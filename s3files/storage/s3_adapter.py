"""S3 storage adapter built on boto3."""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from s3files.core.errors import (
    ConfigurationError,
    DescriptorError,
    FilenameConflictError,
    SourceFileError,
    StoreRequestError,
    UnexpectedStatusError,
)
from s3files.core.naming import FilenameGenerator, random_filename
from s3files.storage.adapter import FileAdapter
from s3files.storage.descriptor import FileDescriptor
from s3files.utils.paths import (
    encode_special_characters,
    ensure_leading_slash,
    resolve_path,
    to_object_key,
)

DEFAULT_ENDPOINT = "https://s3.amazonaws.com"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# put_object parameters the adapter always sets itself.
RESERVED_UPLOAD_PARAMS = ("Key", "Body", "Bucket", "ContentType", "ContentLength")

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
_DELETE_OK_STATUSES = {200, 204}

PublicUrl = Union[str, Callable[[FileDescriptor], str], None]


@dataclass(frozen=True)
class S3Options:
    key: Optional[str] = None
    secret: Optional[str] = None
    bucket: Optional[str] = None
    region: str = "us-east-1"
    # None lets boto3 pick the regional AWS endpoint.
    endpoint: Optional[str] = None
    force_path_style: bool = False
    path: str = "/"
    generate_filename: FilenameGenerator = random_filename
    # Extra put_object parameters, e.g. {"ACL": "public-read"}
    upload_params: Mapping[str, Any] = field(default_factory=dict)
    public_url: PublicUrl = None
    overwrite: bool = True
    max_filename_attempts: int = 10

    def __post_init__(self) -> None:
        upload_params = {} if self.upload_params is None else self.upload_params
        if not isinstance(upload_params, Mapping):
            raise ConfigurationError("upload_params must be a mapping")
        object.__setattr__(self, "upload_params", MappingProxyType(dict(upload_params)))
        self.validate()

    def validate(self) -> None:
        for name in ("key", "secret", "bucket"):
            if not getattr(self, name):
                raise ConfigurationError(f"Missing required option `{name}`")

        if not isinstance(self.path, str) or not self.path.startswith("/"):
            raise ConfigurationError("S3 path must be absolute")

        for name in RESERVED_UPLOAD_PARAMS:
            if name in self.upload_params:
                raise ConfigurationError(f"`{name}` must not be set on upload_params")

        if self.endpoint and urlsplit(self.endpoint).scheme not in ("http", "https"):
            raise ConfigurationError("S3 endpoint must be an http(s) URL")

        if self.max_filename_attempts < 1:
            raise ConfigurationError("max_filename_attempts must be >= 1")


class S3FileAdapter(FileAdapter):
    """Stores host file uploads as objects in an S3 (or S3-compatible) bucket."""

    def __init__(
        self,
        options: Union[S3Options, Mapping[str, Any]],
        schema: Optional[Mapping[str, bool]] = None,
        client=None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize S3 file adapter.

        Args:
            options: S3Options, or a mapping of its fields
            schema: Per-field persistence flags for the extra descriptor fields
            client: Pre-built boto3 S3 client (defaults to one built from options)
            logger: Logger to report on (defaults to this module's logger)
        """
        if not isinstance(options, S3Options):
            options = S3Options(**options)
        super().__init__(schema)

        self.options = options
        self.logger = logger or logging.getLogger(__name__)

        if client is None:
            client = boto3.client(
                "s3",
                aws_access_key_id=options.key,
                aws_secret_access_key=options.secret,
                region_name=options.region,
                endpoint_url=options.endpoint,
                config=BotoConfig(
                    s3={"addressing_style": "path" if options.force_path_style else "auto"}
                ),
            )
        # One client for every bucket; the bucket is passed on each call.
        self.client = client

    def _resolve_filename(self, path: Optional[str], filename: Optional[str]) -> str:
        """Absolute, key-safe store path for a file."""
        if not filename:
            raise DescriptorError("File has no filename")
        return encode_special_characters(resolve_path(path or self.options.path, filename))

    def _object_key(self, path: Optional[str], filename: Optional[str]) -> str:
        return to_object_key(self._resolve_filename(path, filename))

    def _request_failed(
        self, operation: str, exc: Exception, bucket: str, key: str
    ) -> StoreRequestError:
        error = StoreRequestError(operation, str(exc))
        self.logger.warning(
            "S3 request failed: %s",
            exc,
            extra={
                "operation": operation,
                "bucket": bucket,
                "object_key": key,
                "error_type": error.error_type,
            },
        )
        return error

    def _head_object(self, bucket: str, key: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.client.head_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            error_code = exc.response.get("Error", {}).get("Code", "")
            status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if error_code in _NOT_FOUND_CODES or status == 404:
                return None
            raise self._request_failed("head_object", exc, bucket, key) from exc
        except BotoCoreError as exc:
            raise self._request_failed("head_object", exc, bucket, key) from exc

        metadata = dict(response)
        metadata.pop("ResponseMetadata", None)
        return metadata

    def _generate_filename(self, file: FileDescriptor, path: str, bucket: str) -> str:
        for attempt in range(self.options.max_filename_attempts):
            filename = self.options.generate_filename(file, attempt)
            if self.options.overwrite:
                return filename
            if self._head_object(bucket, self._object_key(path, filename)) is None:
                return filename
            self.logger.debug("Filename %s is taken, generating another", filename)

        # TODO: the check above races with concurrent uploads; S3 conditional
        # writes (If-None-Match on put_object) would close that gap.
        raise FilenameConflictError(
            f"No free filename after {self.options.max_filename_attempts} attempts"
        )

    def upload_file(self, file: FileDescriptor) -> FileDescriptor:
        """Upload the descriptor's local file to S3."""
        if not file.local_path:
            raise SourceFileError("File has no local path to upload from")

        path = ensure_leading_slash(file.path or self.options.path)
        bucket = file.bucket or self.options.bucket
        filename = self._generate_filename(file, path, bucket)
        key = self._object_key(path, filename)

        try:
            body = open(file.local_path, "rb")
        except OSError as exc:
            raise SourceFileError(f"Cannot read upload source: {file.local_path}") from exc

        with body:
            size = file.size if file.size is not None else os.fstat(body.fileno()).st_size
            params = dict(self.options.upload_params)
            params.update(
                Key=key,
                Body=body,
                Bucket=bucket,
                ContentType=file.mimetype or DEFAULT_CONTENT_TYPE,
                ContentLength=int(size),
            )

            self.logger.debug(
                "Uploading file %s",
                filename,
                extra={"operation": "put_object", "bucket": bucket, "object_key": key},
            )
            try:
                response = self.client.put_object(**params)
            except (ClientError, BotoCoreError) as exc:
                raise self._request_failed("put_object", exc, bucket, key) from exc

        # The host persists whichever of these its schema enables. Storing path
        # and bucket per file lets old files stay where they are after the
        # defaults change.
        file.filename = filename
        file.etag = response.get("ETag")
        file.path = path
        file.bucket = bucket

        self.logger.info(
            "File upload successful",
            extra={"operation": "put_object", "bucket": bucket, "object_key": key},
        )
        return file

    def get_file_url(self, file: FileDescriptor) -> str:
        """
        Public URL for the file.

        The URL only resolves if the bucket or object is publicly readable
        (e.g. upload_params={"ACL": "public-read"}).
        """
        resolved = self._resolve_filename(file.path, file.filename)
        public_url = self.options.public_url

        if callable(public_url):
            return public_url(
                dataclasses.replace(
                    file,
                    path=file.path or self.options.path,
                    bucket=file.bucket or self.options.bucket,
                )
            )
        if public_url:
            return public_url.rstrip("/") + resolved

        bucket = file.bucket or self.options.bucket
        endpoint = self.options.endpoint or DEFAULT_ENDPOINT
        if self.options.force_path_style:
            return f"{endpoint.rstrip('/')}/{bucket}{resolved}"
        parts = urlsplit(endpoint)
        return f"{parts.scheme}://{bucket}.{parts.netloc}{resolved}"

    def remove_file(self, file: FileDescriptor) -> None:
        """Delete the file's object from S3."""
        bucket = file.bucket or self.options.bucket
        key = self._object_key(file.path, file.filename)
        try:
            response = self.client.delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            raise self._request_failed("delete_object", exc, bucket, key) from exc

        # S3 documents 204 for deletes, some compatible stores answer 200.
        status = response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if status not in _DELETE_OK_STATUSES:
            error = UnexpectedStatusError("delete_object", status)
            self.logger.warning(
                "%s",
                error,
                extra={
                    "operation": "delete_object",
                    "bucket": bucket,
                    "object_key": key,
                    "error_type": error.error_type,
                },
            )
            raise error

        self.logger.info(
            "File removed",
            extra={"operation": "delete_object", "bucket": bucket, "object_key": key},
        )

    def file_exists(self, filename: str) -> Optional[Dict[str, Any]]:
        """Return the object's metadata if it exists under the default path, else None."""
        key = self._object_key(self.options.path, filename)
        return self._head_object(self.options.bucket, key)
