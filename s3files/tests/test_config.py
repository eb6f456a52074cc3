import pytest

from s3files.config import Config, load_config
from s3files.core.errors import ConfigurationError
from s3files.core.naming import original_filename
from s3files.storage import S3FileAdapter

_ENV_VARS = (
    "S3_KEY",
    "AWS_ACCESS_KEY_ID",
    "S3_SECRET",
    "AWS_SECRET_ACCESS_KEY",
    "S3_BUCKET",
    "S3_REGION",
    "AWS_REGION",
    "S3_ENDPOINT",
    "S3_FORCEPATHSTYLE",
    "S3_PATH",
    "S3_PUBLIC_URL",
    "S3_ACL",
    "S3_OVERWRITE",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("s3files.config._load_dotenv_if_available", lambda: None)


def test_load_config_defaults():
    config = load_config()
    assert config.s3_key is None
    assert config.s3_region == "us-east-1"
    assert config.s3_endpoint is None
    assert config.s3_force_path_style is False
    assert config.s3_path == "/"
    assert config.s3_overwrite is True
    assert config.log_level == "INFO"
    assert config.log_format == "json"
    assert config.log_file_path is None


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("S3_ENDPOINT", "http://localhost:9000")
    monkeypatch.setenv("S3_KEY", "env_key")
    monkeypatch.setenv("S3_SECRET", "env_secret")
    monkeypatch.setenv("S3_BUCKET", "env_bucket")
    monkeypatch.setenv("S3_REGION", "env_region")
    monkeypatch.setenv("S3_FORCEPATHSTYLE", "true")
    monkeypatch.setenv("S3_PATH", "/uploads")
    monkeypatch.setenv("S3_ACL", "public-read")
    monkeypatch.setenv("S3_OVERWRITE", "no")

    config = load_config()

    assert config == Config(
        s3_key="env_key",
        s3_secret="env_secret",
        s3_bucket="env_bucket",
        s3_region="env_region",
        s3_endpoint="http://localhost:9000",
        s3_force_path_style=True,
        s3_path="/uploads",
        s3_acl="public-read",
        s3_overwrite=False,
    )


def test_load_config_falls_back_to_aws_env(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "aws_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "aws_secret")
    monkeypatch.setenv("AWS_REGION", "ap-southeast-2")

    config = load_config()

    assert config.s3_key == "aws_key"
    assert config.s3_secret == "aws_secret"
    assert config.s3_region == "ap-southeast-2"


def test_s3_specific_env_wins(monkeypatch):
    monkeypatch.setenv("S3_KEY", "s3_key")
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "aws_key")
    assert load_config().s3_key == "s3_key"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
        load_config()


def test_invalid_log_format(monkeypatch):
    monkeypatch.setenv("LOG_FORMAT", "xml")
    with pytest.raises(ConfigurationError, match="LOG_FORMAT"):
        load_config()


def test_missing_log_directory(tmp_path):
    config = Config(log_file_path=str(tmp_path / "missing" / "s3files.log"))
    with pytest.raises(ConfigurationError, match="LOG_FILE_PATH"):
        config.validate()


def test_s3_options():
    config = Config(s3_key="key", s3_secret="secret", s3_bucket="bucket", s3_acl="public-read")

    options = config.s3_options(generate_filename=original_filename)

    assert options.bucket == "bucket"
    assert dict(options.upload_params) == {"ACL": "public-read"}
    assert options.generate_filename is original_filename


def test_s3_options_validates():
    with pytest.raises(ConfigurationError, match="Missing required option `key`"):
        Config(s3_secret="secret", s3_bucket="bucket").s3_options()


def test_s3_options_rejects_relative_path():
    config = Config(s3_key="key", s3_secret="secret", s3_bucket="bucket", s3_path="uploads")
    with pytest.raises(ConfigurationError, match="absolute"):
        config.s3_options()


def test_create_storage_adapter(tmp_path):
    config = Config(
        s3_key="key",
        s3_secret="secret",
        s3_bucket="bucket",
        log_format="text",
        log_file_path=str(tmp_path / "s3files.log"),
    )

    adapter = config.create_storage_adapter(schema={"etag": True})

    assert isinstance(adapter, S3FileAdapter)
    assert adapter.schema_fields["etag"] is True
    assert adapter.logger.name == "s3files.storage"
