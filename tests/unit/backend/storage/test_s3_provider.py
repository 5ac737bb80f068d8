"""
Unit Tests for the S3 Storage Provider.

A MagicMock stands in for the boto3 client.
"""

import time
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from wedding_tma.backend.core.exceptions import StorageProviderError
from wedding_tma.backend.storage.base import DeleteOptions, UploadOptions
from wedding_tma.backend.storage.s3_provider import S3StorageProvider


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


def _provider(client, **overrides) -> S3StorageProvider:
    params = {
        "bucket": "wedding-media",
        "region": "eu-central-1",
        "access_key_id": "AKIATEST",
        "secret_access_key": "aws-secret",
        "timeout_seconds": 5,
        "client": client,
    }
    params.update(overrides)
    return S3StorageProvider(**params)


class TestUpload:
    async def test_puts_object_under_folder(self, client):
        result = await _provider(client).upload(
            b"png-bytes", UploadOptions(folder="wedding/4242", mime_type="image/png")
        )

        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "wedding-media"
        assert kwargs["Body"] == b"png-bytes"
        assert kwargs["ContentType"] == "image/png"
        assert kwargs["Key"].startswith("wedding/4242/")
        assert kwargs["Key"].endswith(".png")
        assert result.cloud_id == kwargs["Key"]

    async def test_thumbnail_is_object_url(self, client):
        result = await _provider(client).upload(
            b"x", UploadOptions(folder="wedding/1", mime_type="image/jpeg")
        )

        assert result.url == f"https://wedding-media.s3.amazonaws.com/{result.cloud_id}"
        assert result.thumbnail_url == result.url
        assert result.width is None
        assert result.height is None

    async def test_public_base_url_overrides_bucket_host(self, client):
        provider = _provider(client, public_base_url="https://cdn.example.com/")
        result = await provider.upload(b"x", UploadOptions(folder="wedding/1", mime_type="image/webp"))

        assert result.url == f"https://cdn.example.com/{result.cloud_id}"

    async def test_each_upload_gets_a_unique_key(self, client):
        provider = _provider(client)
        options = UploadOptions(folder="wedding/1", mime_type="image/jpeg")
        first = await provider.upload(b"x", options)
        second = await provider.upload(b"x", options)

        assert first.cloud_id != second.cloud_id

    async def test_client_error_becomes_storage_provider_error(self, client):
        client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
        )
        with pytest.raises(StorageProviderError, match="upload failed"):
            await _provider(client).upload(b"x", UploadOptions(folder="wedding/1", mime_type="image/jpeg"))

    async def test_timeout_becomes_storage_provider_error(self, client):
        client.put_object.side_effect = lambda **kwargs: time.sleep(0.5)
        provider = _provider(client, timeout_seconds=0.05)

        with pytest.raises(StorageProviderError, match="timed out"):
            await provider.upload(b"x", UploadOptions(folder="wedding/1", mime_type="image/jpeg"))


class TestDelete:
    async def test_deletes_by_key(self, client):
        await _provider(client).delete("wedding/1/abc.jpg", DeleteOptions())

        client.delete_object.assert_called_once_with(Bucket="wedding-media", Key="wedding/1/abc.jpg")

    async def test_connection_error_raises(self, client):
        client.delete_object.side_effect = EndpointConnectionError(endpoint_url="https://s3")
        with pytest.raises(StorageProviderError, match="delete failed"):
            await _provider(client).delete("wedding/1/abc.jpg", DeleteOptions())


def test_get_thumbnail_ignores_size(client):
    provider = _provider(client)
    assert provider.get_thumbnail("wedding/1/a.jpg", 100, 100) == provider.get_thumbnail("wedding/1/a.jpg")
