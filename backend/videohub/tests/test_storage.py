"""
Tests for the S3 asset store adapter.
"""
from unittest.mock import MagicMock, patch
import pytest
from botocore.exceptions import ClientError, ReadTimeoutError
from videohub.services.media_probe import MediaProbeError
from videohub.services.storage import AssetKind, AssetStoreError, S3AssetStore


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def store(s3_client):
    return S3AssetStore(s3_client=s3_client, bucket="test-bucket")


def client_error(code, operation="DeleteObject"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@patch("videohub.services.storage.probe_video_duration", return_value=10.5)
def test_put_video_reports_duration(mock_probe, store, s3_client):
    asset = store.put(b"video bytes", AssetKind.VIDEO, "video/mp4")

    assert asset.asset_ref.startswith("videos/")
    assert asset.asset_ref.endswith(".mp4")
    assert asset.duration_seconds == 10.5
    mock_probe.assert_called_once_with(b"video bytes")
    args, kwargs = s3_client.upload_fileobj.call_args
    assert args[1] == "test-bucket"
    assert args[2] == asset.asset_ref
    assert kwargs["ExtraArgs"] == {"ContentType": "video/mp4"}


@patch("videohub.services.storage.probe_video_duration")
def test_put_thumbnail_skips_probe(mock_probe, store):
    asset = store.put(b"png", AssetKind.THUMBNAIL, "image/png")
    assert asset.asset_ref.startswith("thumbnails/")
    assert asset.asset_ref.endswith(".png")
    assert asset.duration_seconds is None
    mock_probe.assert_not_called()


@patch("videohub.services.storage.probe_video_duration", side_effect=MediaProbeError("invalid data"))
def test_put_unreadable_video(mock_probe, store, s3_client):
    with pytest.raises(AssetStoreError):
        store.put(b"garbage", AssetKind.VIDEO, "video/mp4")
    s3_client.upload_fileobj.assert_not_called()


@pytest.mark.parametrize(
    "error",
    [client_error("AccessDenied", "PutObject"), ReadTimeoutError(endpoint_url="https://s3.amazonaws.com")],
)
def test_put_failure_and_timeout_raise(store, s3_client, error):
    s3_client.upload_fileobj.side_effect = error
    with pytest.raises(AssetStoreError) as exc_info:
        store.put(b"png", AssetKind.THUMBNAIL, "image/png")
    assert exc_info.value.operation == "put"


def test_delete(store, s3_client):
    store.delete("thumbnails/a.png")
    s3_client.delete_object.assert_called_once_with(Bucket="test-bucket", Key="thumbnails/a.png")


def test_delete_missing_object_succeeds(store, s3_client):
    s3_client.delete_object.side_effect = client_error("NoSuchKey")
    store.delete("thumbnails/gone.png")


@pytest.mark.parametrize(
    "error", [client_error("AccessDenied"), ReadTimeoutError(endpoint_url="https://s3.amazonaws.com")]
)
def test_delete_failure_raises(store, s3_client, error):
    s3_client.delete_object.side_effect = error
    with pytest.raises(AssetStoreError) as exc_info:
        store.delete("videos/a.mp4")
    assert exc_info.value.asset_ref == "videos/a.mp4"


def test_url_for(store, s3_client):
    s3_client.generate_presigned_url.return_value = "https://example.com/presigned-url"
    assert store.url_for("videos/a.mp4", expiration=60) == "https://example.com/presigned-url"
    s3_client.generate_presigned_url.assert_called_once_with(
        "get_object", Params={"Bucket": "test-bucket", "Key": "videos/a.mp4"}, ExpiresIn=60
    )

    s3_client.generate_presigned_url.side_effect = client_error("AccessDenied", "GetObject")
    assert store.url_for("videos/a.mp4") is None
