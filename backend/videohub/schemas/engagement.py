from datetime import datetime
from typing import Optional
from uuid import UUID
from videohub.models.engagement import LikedEntityKind
from videohub.schemas.envelope import CamelModel
from videohub.schemas.video import VideoResponse


class CommentResponse(CamelModel):
    id: UUID
    content: str
    video_id: UUID
    owner_id: str
    created_at: datetime
    updated_at: datetime


class LikedEntityResponse(CamelModel):
    entity_kind: LikedEntityKind
    entity_id: UUID
    liked_at: datetime
    video: Optional[VideoResponse] = None  # Set when entity_kind is video
    comment: Optional[CommentResponse] = None  # Set when entity_kind is comment
