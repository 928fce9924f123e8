"""
Playlist membership engine.

Every mutation is gated by a conditional update of the playlist row scoped by
(id, owner_id). When that update matches nothing, one follow-up lookup decides
between NotFoundError and AuthorizationError. Membership rows are unique per
(playlist_id, video_id), so add and remove are idempotent and commute under
concurrent requests, including across service instances.
"""
import logging
import uuid
from typing import List, Optional
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from videohub.core.database import transaction
from videohub.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from videohub.models.playlist import Playlist, PlaylistVideo
from videohub.models.video import Video, utcnow
from videohub.repositories.documents import Repository

logger = logging.getLogger(__name__)


def _required_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Playlist name is required", field="name")
    return name.strip()


class PlaylistService:
    def __init__(self, db: Session):
        self.db = db
        self.playlists = Repository(db, Playlist)
        self.videos = Repository(db, Video)

    def _raise_unmatched(self, playlist_id: uuid.UUID, requester_id: str):
        if self.playlists.find_by_id(playlist_id) is None:
            raise NotFoundError("Playlist not found")
        logger.warning(f"User {requester_id} denied access to playlist {playlist_id}")
        raise AuthorizationError("You do not own this playlist")

    def _gate(self, playlist_id: uuid.UUID, requester_id: str, **patch) -> Playlist:
        # An empty patch rewrites updated_at with itself so the owner check still takes the row lock
        playlist = self.playlists.conditional_update(
            {"id": playlist_id, "owner_id": requester_id},
            patch or {"updated_at": Playlist.updated_at},
        )
        if playlist is None:
            self._raise_unmatched(playlist_id, requester_id)
        return playlist

    def _touch(self, playlist_id: uuid.UUID) -> None:
        self.playlists.conditional_update({"id": playlist_id}, {"updated_at": utcnow()})

    def create(self, owner_id: str, name: Optional[str], description: Optional[str] = None) -> Playlist:
        name = _required_name(name)
        try:
            with transaction(self.db):
                playlist = self.playlists.create(
                    name=name,
                    description=(description or "").strip(),
                    owner_id=owner_id,
                )
        except IntegrityError as e:
            # Raised at flush or at commit when a concurrent create won the race
            raise ConflictError(f"A playlist named '{name}' already exists") from e
        logger.info(f"Playlist created: {playlist.id} for owner {owner_id}")
        return playlist

    def get(self, playlist_id: uuid.UUID) -> Playlist:
        with transaction(self.db):
            playlist = self.playlists.find_by_id(playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist not found")
        return playlist

    def list_for_owner(self, owner_id: str) -> List[Playlist]:
        with transaction(self.db):
            return self.playlists.find_all(
                {"owner_id": owner_id}, order_by=(Playlist.created_at.asc(), Playlist.id.asc())
            )

    def add_video(self, playlist_id: uuid.UUID, video_id: uuid.UUID, requester_id: str) -> Playlist:
        with transaction(self.db):
            if self.videos.find_by_id(video_id) is None:
                raise NotFoundError("Video not found")
            playlist = self._gate(playlist_id, requester_id)
            try:
                with self.db.begin_nested():
                    self.db.add(PlaylistVideo(playlist_id=playlist_id, video_id=video_id))
            except IntegrityError:
                logger.debug(f"Video {video_id} already in playlist {playlist_id}")
            else:
                self._touch(playlist_id)
        self.db.expire(playlist, ["entries"])
        return playlist

    def remove_video(self, playlist_id: uuid.UUID, video_id: uuid.UUID, requester_id: str) -> Playlist:
        """Remove a membership. The video need not exist, so dangling refs can be cleared."""
        with transaction(self.db):
            playlist = self._gate(playlist_id, requester_id)
            result = self.db.execute(
                delete(PlaylistVideo).where(
                    PlaylistVideo.playlist_id == playlist_id,
                    PlaylistVideo.video_id == video_id,
                )
            )
            if result.rowcount:
                self._touch(playlist_id)
        self.db.expire(playlist, ["entries"])
        return playlist

    def update(
        self,
        playlist_id: uuid.UUID,
        requester_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Playlist:
        if name is None and description is None:
            raise ValidationError("Changes in name or description are required")
        patch = {}
        if name is not None:
            patch["name"] = _required_name(name)
        if description is not None:
            patch["description"] = description.strip()
        try:
            with transaction(self.db):
                playlist = self._gate(playlist_id, requester_id, **patch, updated_at=utcnow())
        except IntegrityError as e:
            raise ConflictError(f"A playlist named '{patch.get('name')}' already exists") from e
        return playlist

    def delete(self, playlist_id: uuid.UUID, requester_id: str) -> Playlist:
        with transaction(self.db):
            playlist = self.playlists.conditional_delete({"id": playlist_id, "owner_id": requester_id})
            if playlist is None:
                self._raise_unmatched(playlist_id, requester_id)
            self.db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist_id))
        logger.info(f"Playlist deleted: {playlist_id}")
        return playlist
