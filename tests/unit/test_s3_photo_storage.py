"""
Test suite for S3PhotoStorage.

boto3 is replaced by a MagicMock client; ClientError instances are
built the way botocore raises them.

System role: Verification of photo storage operations
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from motoshop.boundary.storage import S3PhotoStorage
from motoshop.core.exceptions import RemoteFailure


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def storage(s3_client) -> S3PhotoStorage:
    return S3PhotoStorage(bucket="moto-photos", region="ap-northeast-2", s3_client=s3_client)


class TestUrls:
    def test_default_public_url_should_use_bucket_endpoint(self, storage) -> None:
        url = storage.public_url("jobs/JOB-1/start/a.jpg")

        assert url == "https://moto-photos.s3.ap-northeast-2.amazonaws.com/jobs/JOB-1/start/a.jpg"

    def test_cdn_base_should_be_used_when_configured(self, s3_client) -> None:
        storage = S3PhotoStorage(bucket="moto-photos", public_base_url="https://cdn.example.com/", s3_client=s3_client)

        assert storage.public_url("/a.jpg") == "https://cdn.example.com/a.jpg"

    def test_key_for_url_should_invert_public_url(self, storage) -> None:
        url = storage.public_url("jobs/JOB-1/completion/b.png")

        assert storage.key_for_url(url) == "jobs/JOB-1/completion/b.png"
        assert storage.key_for_url("https://elsewhere.example.com/b.png") is None

    def test_missing_bucket_should_raise(self, s3_client) -> None:
        with pytest.raises(ValueError):
            S3PhotoStorage(bucket="", s3_client=s3_client)


class TestUploadAndRemove:
    async def test_upload_should_put_object_and_return_url(self, storage, s3_client) -> None:
        # Act
        url = await storage.upload("jobs/JOB-1/start/a.jpg", b"data", "image/jpeg")

        # Assert
        s3_client.put_object.assert_called_once_with(
            Bucket="moto-photos",
            Key="jobs/JOB-1/start/a.jpg",
            Body=b"data",
            ContentType="image/jpeg",
        )
        assert url.endswith("/jobs/JOB-1/start/a.jpg")

    async def test_rejected_upload_should_raise_remote_failure(self, storage, s3_client) -> None:
        # Arrange
        s3_client.put_object.side_effect = _client_error("AccessDenied", "PutObject")

        # Act / Assert
        with pytest.raises(RemoteFailure) as exc_info:
            await storage.upload("jobs/JOB-1/start/a.jpg", b"data", "image/jpeg")

        assert exc_info.value.details["error_code"] == "AccessDenied"
        assert exc_info.value.details["operation"] == "upload"

    async def test_remove_should_delete_object(self, storage, s3_client) -> None:
        await storage.remove("jobs/JOB-1/start/a.jpg")

        s3_client.delete_object.assert_called_once_with(Bucket="moto-photos", Key="jobs/JOB-1/start/a.jpg")

    async def test_rejected_remove_should_raise_remote_failure(self, storage, s3_client) -> None:
        s3_client.delete_object.side_effect = _client_error("NoSuchBucket", "DeleteObject")

        with pytest.raises(RemoteFailure) as exc_info:
            await storage.remove("jobs/JOB-1/start/a.jpg")

        assert exc_info.value.details["error_code"] == "NoSuchBucket"
