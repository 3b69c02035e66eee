"""Unit tests for UploadService."""

import re
from unittest.mock import Mock

import pytest

from golocal_spaces.errors import ValidationError
from golocal_spaces.services.uploads import UploadService, generate_object_key
from golocal_spaces.storage.object_storage import ObjectStorage

MAX_BYTES = 1024


@pytest.fixture
def uploads(storage: ObjectStorage) -> UploadService:
    return UploadService(storage, default_bucket="space-images", max_bytes=MAX_BYTES)


@pytest.mark.unit
def test_generate_object_key_keeps_extension() -> None:
    assert re.fullmatch(r"\d+-[0-9a-f]{8}\.png", generate_object_key("Photo.PNG"))
    assert generate_object_key("noext").endswith(".bin")
    assert generate_object_key(None).endswith(".bin")
    assert generate_object_key("a.b.jpeg").endswith(".jpeg")


@pytest.mark.unit
def test_generate_object_key_is_unique() -> None:
    assert generate_object_key("a.jpg") != generate_object_key("a.jpg")


@pytest.mark.unit
def test_upload_image(uploads: UploadService, s3_client: Mock) -> None:
    result = uploads.upload_image("lot.jpg", "image/jpeg", b"\xff\xd8\xff")

    key = result["path"]
    assert result["file_name"] == key
    assert result["url"] == f"https://cdn.example.com/space-images/{key}"
    s3_client.put_object.assert_called_once_with(
        Bucket="space-images", Key=key, Body=b"\xff\xd8\xff", ContentType="image/jpeg"
    )


@pytest.mark.unit
def test_upload_to_named_bucket(uploads: UploadService, s3_client: Mock) -> None:
    uploads.upload_image("lot.jpg", "image/jpeg", b"x", bucket="avatars")

    assert s3_client.put_object.call_args.kwargs["Bucket"] == "avatars"


@pytest.mark.unit
@pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", None])
def test_rejects_non_images(uploads: UploadService, s3_client: Mock, content_type) -> None:
    with pytest.raises(ValidationError, match="image"):
        uploads.upload_image("doc.pdf", content_type, b"%PDF")
    s3_client.put_object.assert_not_called()


@pytest.mark.unit
def test_rejects_empty_and_oversized(uploads: UploadService, s3_client: Mock) -> None:
    with pytest.raises(ValidationError):
        uploads.upload_image("a.png", "image/png", b"")
    with pytest.raises(ValidationError, match="less than"):
        uploads.upload_image("a.png", "image/png", b"x" * (MAX_BYTES + 1))
    s3_client.put_object.assert_not_called()


@pytest.mark.unit
def test_delete(uploads: UploadService, s3_client: Mock) -> None:
    uploads.delete("123-abc.jpg")

    s3_client.delete_object.assert_called_once_with(Bucket="space-images", Key="123-abc.jpg")


@pytest.mark.unit
def test_delete_requires_path(uploads: UploadService) -> None:
    with pytest.raises(ValidationError, match="path"):
        uploads.delete("")
