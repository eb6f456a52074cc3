import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from s3files.core.errors import ConfigurationError


def _load_dotenv_if_available() -> None:
    """Load .env files without overriding variables already set."""
    # Prefer the s3files/.env next to this file (works no matter the cwd)
    env_path = Path(__file__).resolve().parent / ".env"
    if env_path.is_file():
        load_dotenv(dotenv_path=env_path, override=False)
    # Also try default resolution (cwd-based) as a fallback
    load_dotenv(override=False)


def _get_bool(value: str | None, default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("true", "1", "yes")


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


@dataclass(frozen=True)
class Config:
    # S3 credentials and location
    s3_key: str | None = None
    s3_secret: str | None = None
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint: str | None = None  # e.g. a MinIO URL; None means AWS
    s3_force_path_style: bool = False

    # Upload behaviour
    s3_path: str = "/"
    s3_public_url: str | None = None  # CDN prefix used instead of the bucket URL
    s3_acl: str | None = None  # canned ACL, e.g. "public-read"
    s3_overwrite: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file_path: str | None = None

    def validate(self) -> None:
        if self.log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigurationError("LOG_LEVEL must be DEBUG, INFO, WARNING, ERROR, or CRITICAL")

        if self.log_format not in {"json", "text"}:
            raise ConfigurationError("LOG_FORMAT must be 'json' or 'text'")

        if self.log_file_path:
            log_dir = Path(self.log_file_path).parent
            if not log_dir.exists():
                raise ConfigurationError(f"LOG_FILE_PATH directory does not exist: {log_dir}")

    def s3_options(self, **overrides):
        """
        Build adapter options from this configuration.

        Args:
            **overrides: S3Options fields that take precedence over the
                environment (e.g. generate_filename, upload_params)

        Returns:
            S3Options instance
        """
        from s3files.storage.s3_adapter import S3Options

        upload_params = {"ACL": self.s3_acl} if self.s3_acl else {}
        values = dict(
            key=self.s3_key,
            secret=self.s3_secret,
            bucket=self.s3_bucket,
            region=self.s3_region,
            endpoint=self.s3_endpoint,
            force_path_style=self.s3_force_path_style,
            path=self.s3_path,
            upload_params=upload_params,
            public_url=self.s3_public_url,
            overwrite=self.s3_overwrite,
        )
        values.update(overrides)
        return S3Options(**values)

    def create_storage_adapter(self, schema=None, **overrides):
        """
        Create the S3 file adapter for this configuration.

        Returns:
            S3FileAdapter logging through the configured handlers
        """
        from s3files.core.logging import setup_logger
        from s3files.storage import S3FileAdapter

        return S3FileAdapter(
            self.s3_options(**overrides),
            schema=schema,
            logger=setup_logger("s3files.storage", self),
        )


def load_config() -> Config:
    _load_dotenv_if_available()

    config = Config(
        s3_key=_first_env("S3_KEY", "AWS_ACCESS_KEY_ID"),
        s3_secret=_first_env("S3_SECRET", "AWS_SECRET_ACCESS_KEY"),
        s3_bucket=os.environ.get("S3_BUCKET"),
        s3_region=_first_env("S3_REGION", "AWS_REGION") or "us-east-1",
        s3_endpoint=os.environ.get("S3_ENDPOINT") or None,
        s3_force_path_style=_get_bool(os.environ.get("S3_FORCEPATHSTYLE"), False),
        s3_path=os.environ.get("S3_PATH", "/"),
        s3_public_url=os.environ.get("S3_PUBLIC_URL") or None,
        s3_acl=os.environ.get("S3_ACL") or None,
        s3_overwrite=_get_bool(os.environ.get("S3_OVERWRITE"), True),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        log_format=os.environ.get("LOG_FORMAT", "json"),
        log_file_path=os.environ.get("LOG_FILE_PATH") or None,
    )

    config.validate()
    return config
