from pathlib import Path

import boto3
import pytest
from botocore.stub import Stubber

from s3files.storage import FileDescriptor, S3FileAdapter, S3Options


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="key",
        aws_secret_access_key="secret",
    )


@pytest.fixture
def stubber(s3_client):
    with Stubber(s3_client) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def make_adapter(s3_client):
    def _make(**overrides):
        values = {"key": "key", "secret": "secret", "bucket": "bucket"}
        values.update(overrides)
        return S3FileAdapter(S3Options(**values), client=s3_client)

    return _make


@pytest.fixture
def upload_file():
    return FileDescriptor(
        local_path=str(Path(__file__).resolve().parent / "fixtures" / "test-file.txt"),
        originalname="test-file.txt",
        mimetype="text/plain",
        size=18,
    )
