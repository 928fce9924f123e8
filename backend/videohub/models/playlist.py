import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from videohub.models.video import Base, utcnow


class Playlist(Base):
    __tablename__ = "playlists"
    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_playlists_owner_name"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    owner_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    entries = relationship(
        "PlaylistVideo",
        order_by="PlaylistVideo.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def video_refs(self) -> list[uuid.UUID]:
        """Member video ids in insertion order. Referents may no longer exist."""
        return [entry.video_id for entry in self.entries]


class PlaylistVideo(Base):
    __tablename__ = "playlist_videos"
    __table_args__ = (UniqueConstraint("playlist_id", "video_id", name="uq_playlist_videos_member"),)

    id = Column(Integer, primary_key=True, autoincrement=True)  # Insertion order
    playlist_id = Column(
        UUID(as_uuid=True), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # No foreign key: deleting a video leaves the membership in place
    video_id = Column(UUID(as_uuid=True), nullable=False)
    added_at = Column(DateTime, nullable=False, default=utcnow)
