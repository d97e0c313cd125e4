"""Pytest fixtures for FileVault tests."""
import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from filevault.core.config import Settings
from filevault.main import create_app


class FakePaginator:
    def __init__(self, s3):
        self.s3 = s3

    def paginate(self, Bucket, Prefix=""):
        self.s3._check("ListObjectsV2")
        contents = [
            {"Key": key, "Size": len(obj["Body"])}
            for key, obj in self.s3.objects.items()
            if key.startswith(Prefix)
        ]
        # two pages, like a real listing past the page size
        half = len(contents) // 2
        return [{"Contents": contents[:half]}, {"Contents": contents[half:]}] if contents else [{}]


class FakeS3:
    """In-memory stand-in for the boto3 S3 client calls the app makes."""

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.failing = set()

    def _check(self, operation):
        self.calls.append(operation)
        if operation in self.failing:
            raise ClientError(
                {"Error": {"Code": "InternalError", "Message": "backend down"}}, operation
            )

    def put_object(self, Bucket, Key, Body, ContentType):
        self._check("PutObject")
        self.objects[Key] = {"Body": Body, "ContentType": ContentType}

    def get_paginator(self, name):
        assert name == "list_objects_v2"
        return FakePaginator(self)

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        self._check("GeneratePresignedUrl")
        return f"https://s3.test/{Params['Bucket']}/{Params['Key']}?X-Amz-Expires={ExpiresIn}"

    def delete_object(self, Bucket, Key):
        self._check("DeleteObject")
        self.objects.pop(Key, None)


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        s3_access_key_id="test-key",
        s3_secret_access_key="test-secret",
        s3_bucket_name="test-bucket",
        session_secret="test-session-secret",
        users_file=str(tmp_path / "users.json"),
        database_url=f"sqlite:///{tmp_path / 'sessions.db'}",
        max_upload_bytes=1024,
    )


@pytest.fixture
def app(settings, fake_s3):
    return create_app(settings, s3_client=fake_s3)


@pytest.fixture
def client(app):
    # session cookies are Secure, so talk to the app over https
    return TestClient(app, base_url="https://testserver")


@pytest.fixture
def make_client(app):
    """Factory for extra independent clients (separate cookie jars)."""
    def _make():
        return TestClient(app, base_url="https://testserver")
    return _make


@pytest.fixture
def alice(client):
    """A client logged in as a freshly registered user 'alice'."""
    response = client.post("/register", json={"username": "alice", "password": "pw1"})
    assert response.status_code == 200
    return client
