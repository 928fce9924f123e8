import enum
import io
import logging
import uuid
from dataclasses import dataclass
from typing import Optional
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from videohub.core.config import settings
from videohub.services.media_probe import MediaProbeError, probe_video_duration

logger = logging.getLogger(__name__)


class AssetKind(str, enum.Enum):
    VIDEO = "videos"
    THUMBNAIL = "thumbnails"


class AssetStoreError(Exception):
    """Raised by the asset store adapter for any upload or delete failure, timeouts included."""

    def __init__(self, operation: str, asset_ref: Optional[str], reason: str):
        super().__init__(f"{operation} failed for {asset_ref or 'new asset'}: {reason}")
        self.operation = operation
        self.asset_ref = asset_ref
        self.reason = reason


@dataclass(frozen=True)
class StoredAsset:
    asset_ref: str
    duration_seconds: Optional[float] = None  # Reported for videos only


_EXTENSIONS = {
    "video/mp4": "mp4",
    "video/quicktime": "mov",
    "video/webm": "webm",
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


class S3AssetStore:
    def __init__(self, s3_client=None, bucket: Optional[str] = None):
        if s3_client is None:
            s3_client = boto3.client(
                "s3",
                region_name=settings.aws_region,
                endpoint_url=settings.s3_endpoint_url or None,
                config=Config(
                    connect_timeout=settings.s3_connect_timeout,
                    read_timeout=settings.s3_read_timeout,
                    retries={"max_attempts": settings.s3_max_attempts, "mode": "standard"},
                ),
            )
        self.s3_client = s3_client
        self.bucket = bucket or settings.s3_bucket

    def put(self, data: bytes, kind: AssetKind, content_type: str) -> StoredAsset:
        """Upload ``data`` under a fresh key. Videos are probed for their duration first."""
        duration = None
        if kind is AssetKind.VIDEO:
            try:
                duration = probe_video_duration(data)
            except MediaProbeError as e:
                raise AssetStoreError("put", None, f"unreadable video: {e}") from e

        extension = _EXTENSIONS.get(content_type, "bin")
        asset_ref = f"{kind.value}/{uuid.uuid4()}.{extension}"
        try:
            self.s3_client.upload_fileobj(
                io.BytesIO(data),
                self.bucket,
                asset_ref,
                ExtraArgs={"ContentType": content_type},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error uploading to S3: {e}")
            raise AssetStoreError("put", asset_ref, str(e)) from e
        logger.info(f"Uploaded file to s3://{self.bucket}/{asset_ref}")
        return StoredAsset(asset_ref=asset_ref, duration_seconds=duration)

    def delete(self, asset_ref: str) -> None:
        """Delete an object. Deleting a missing object succeeds."""
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=asset_ref)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                logger.info(f"Asset already absent: s3://{self.bucket}/{asset_ref}")
                return
            logger.error(f"Error deleting from S3: {e}")
            raise AssetStoreError("delete", asset_ref, str(e)) from e
        except BotoCoreError as e:
            logger.error(f"Error deleting from S3: {e}")
            raise AssetStoreError("delete", asset_ref, str(e)) from e
        logger.info(f"Deleted s3://{self.bucket}/{asset_ref}")

    def url_for(self, asset_ref: str, expiration: Optional[int] = None) -> Optional[str]:
        """Generate presigned URL for an asset."""
        if expiration is None:
            expiration = settings.presigned_url_ttl
        try:
            return self.s3_client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": asset_ref},
                ExpiresIn=expiration,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Error generating presigned URL: {e}")
            return None
