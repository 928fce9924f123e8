import enum
import uuid
from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from videohub.models.video import Base, utcnow


class Comment(Base):
    __tablename__ = "comments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    content = Column(Text, nullable=False)
    video_id = Column(UUID(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)


class LikedEntityKind(str, enum.Enum):
    VIDEO = "video"
    COMMENT = "comment"


class Like(Base):
    """A like on either a video or a comment, tagged by ``entity_kind``."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("entity_kind", "entity_id", "liked_by", name="uq_likes_entity_user"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    entity_kind = Column(Enum(LikedEntityKind, name="liked_entity_kind"), nullable=False)
    entity_id = Column(UUID(as_uuid=True), nullable=False)
    liked_by = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_pair"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    subscriber_id = Column(String, nullable=False, index=True)  # The user subscribing
    channel_id = Column(String, nullable=False, index=True)  # The user being subscribed to
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
