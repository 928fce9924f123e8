"""
Media asset lifecycle manager.

The asset store and the database share no transaction, so every operation
that touches both runs as a saga with a fixed step order:

publish
    upload video -> upload thumbnail -> create record. A failed step deletes
    the assets uploaded before it, so no record ever lacks an asset and no
    failed publish leaves an asset behind unless its cleanup also failed.

update_details / replace_thumbnail
    upload new thumbnail -> conditional update of the record -> delete old
    thumbnail. The old asset is removed only after the update commits.

delete
    delete video asset -> delete thumbnail asset -> delete record. A failure
    leaves the record in place, and the record still resolves to assets that
    either exist or are already gone, so the delete can be retried.

Timeouts surface from the adapters as ordinary failures and take the same
compensation path.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional
from sqlalchemy import not_
from sqlalchemy.orm import Session
from videohub.core.database import transaction
from videohub.core.errors import AuthorizationError, DependencyError, NotFoundError, ValidationError
from videohub.models.video import Video, utcnow
from videohub.repositories.documents import Repository
from videohub.services.saga import SagaLog
from videohub.services.storage import AssetKind, AssetStoreError, S3AssetStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MediaUpload:
    data: bytes
    content_type: str


def _required_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field.capitalize()} is required", field=field)
    return value.strip()


class MediaLifecycleManager:
    def __init__(self, db: Session, asset_store: S3AssetStore):
        self.db = db
        self.asset_store = asset_store
        self.videos = Repository(db, Video)

    def _owned_video(self, video_id: uuid.UUID, owner_id: str) -> Video:
        with transaction(self.db):
            video = self.videos.find_by_id(video_id)
        if video is None:
            raise NotFoundError("Video not found")
        if video.owner_id != owner_id:
            logger.warning(f"User {owner_id} denied access to video {video_id}")
            raise AuthorizationError("You do not own this video")
        return video

    def _raise_unmatched(self, video_id: uuid.UUID, owner_id: str):
        if self.videos.find_by_id(video_id) is None:
            raise NotFoundError("Video not found")
        raise AuthorizationError("You do not own this video")

    def publish(
        self,
        video: MediaUpload,
        thumbnail: MediaUpload,
        title: Optional[str],
        description: Optional[str],
        owner_id: str,
    ) -> Video:
        title = _required_text(title, "title")
        description = _required_text(description, "description")
        saga = SagaLog("publish", subject=owner_id)

        try:
            video_asset = self.asset_store.put(video.data, AssetKind.VIDEO, video.content_type)
        except AssetStoreError as e:
            raise saga.failure("upload_video", e, "Error occurred while uploading video")
        saga.done("upload_video", video_asset.asset_ref)

        try:
            thumbnail_asset = self.asset_store.put(thumbnail.data, AssetKind.THUMBNAIL, thumbnail.content_type)
        except AssetStoreError as e:
            saga.compensate("delete_video_asset", self.asset_store.delete, video_asset.asset_ref)
            raise saga.failure("upload_thumbnail", e, "Error occurred while uploading thumbnail")
        saga.done("upload_thumbnail", thumbnail_asset.asset_ref)

        try:
            with transaction(self.db):
                record = self.videos.create(
                    title=title,
                    description=description,
                    video_asset_ref=video_asset.asset_ref,
                    thumbnail_asset_ref=thumbnail_asset.asset_ref,
                    duration_seconds=video_asset.duration_seconds or 0.0,
                    owner_id=owner_id,
                )
        except Exception as e:
            saga.compensate("delete_video_asset", self.asset_store.delete, video_asset.asset_ref)
            saga.compensate("delete_thumbnail_asset", self.asset_store.delete, thumbnail_asset.asset_ref)
            raise saga.failure("create_record", e, "Error occurred while creating video in database") from e
        saga.done("create_record", video_asset.asset_ref, thumbnail_asset.asset_ref)
        logger.info(f"Video published: {record.id} by {owner_id}")
        return record

    def update_details(
        self,
        video_id: uuid.UUID,
        owner_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail: Optional[MediaUpload] = None,
    ) -> Video:
        """
        Update title, description and/or thumbnail.

        A request that changes nothing returns the video unchanged.
        """
        video = self._owned_video(video_id, owner_id)
        patch = {}
        if title is not None and title.strip() != video.title:
            patch["title"] = _required_text(title, "title")
        if description is not None and description.strip() != video.description:
            patch["description"] = _required_text(description, "description")
        if not patch and thumbnail is None:
            logger.info(f"No changes for video {video_id}")
            return video

        saga = SagaLog("update_video", subject=str(video_id))
        new_thumbnail = None
        if thumbnail is not None:
            try:
                new_thumbnail = self.asset_store.put(thumbnail.data, AssetKind.THUMBNAIL, thumbnail.content_type)
            except AssetStoreError as e:
                raise saga.failure("upload_thumbnail", e, "Error occurred while uploading thumbnail")
            saga.done("upload_thumbnail", new_thumbnail.asset_ref)
            patch["thumbnail_asset_ref"] = new_thumbnail.asset_ref

        old_thumbnail_ref = video.thumbnail_asset_ref
        try:
            with transaction(self.db):
                updated = self.videos.conditional_update(
                    {"id": video_id, "owner_id": owner_id}, {**patch, "updated_at": utcnow()}
                )
                if updated is None:
                    self._raise_unmatched(video_id, owner_id)
        except (NotFoundError, AuthorizationError, DependencyError) as e:
            if new_thumbnail is not None:
                saga.compensate("delete_new_thumbnail", self.asset_store.delete, new_thumbnail.asset_ref)
                if isinstance(e, DependencyError):
                    raise saga.failure("update_record", e, "Error occurred while updating video") from e
            raise
        saga.done("update_record")

        if new_thumbnail is not None:
            try:
                self.asset_store.delete(old_thumbnail_ref)
            except AssetStoreError as e:
                # The record already points at the new thumbnail
                raise saga.failure(
                    "delete_old_thumbnail",
                    e,
                    "Video updated but the previous thumbnail could not be removed",
                    old_thumbnail_ref,
                )
            saga.done("delete_old_thumbnail", old_thumbnail_ref)
        return updated

    def replace_thumbnail(self, video_id: uuid.UUID, thumbnail: MediaUpload, owner_id: str) -> Video:
        return self.update_details(video_id, owner_id, thumbnail=thumbnail)

    def delete(self, video_id: uuid.UUID, owner_id: str) -> Video:
        video = self._owned_video(video_id, owner_id)
        saga = SagaLog("delete_video", subject=str(video_id))

        for step, asset_ref in (
            ("delete_video_asset", video.video_asset_ref),
            ("delete_thumbnail_asset", video.thumbnail_asset_ref),
        ):
            try:
                self.asset_store.delete(asset_ref)
            except AssetStoreError as e:
                raise saga.failure(step, e, "Error occurred while deleting video assets; retry the delete", asset_ref)
            saga.done(step, asset_ref)

        try:
            with transaction(self.db):
                deleted = self.videos.conditional_delete({"id": video_id, "owner_id": owner_id})
        except DependencyError as e:
            raise saga.failure("delete_record", e, "Assets removed but the video record remains; retry the delete") from e
        if deleted is None:
            raise NotFoundError("Video not found")
        saga.done("delete_record")
        logger.info(f"Video deleted: {video_id}")
        return deleted

    def toggle_publish(self, video_id: uuid.UUID, owner_id: str) -> Video:
        with transaction(self.db):
            video = self.videos.conditional_update(
                {"id": video_id, "owner_id": owner_id},
                {"is_published": not_(Video.is_published), "updated_at": utcnow()},
            )
            if video is None:
                self._raise_unmatched(video_id, owner_id)
        logger.info(f"Video {video_id} is_published={video.is_published}")
        return video
