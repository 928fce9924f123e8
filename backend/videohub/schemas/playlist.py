from datetime import datetime
from typing import List, Optional
from uuid import UUID
from videohub.schemas.envelope import CamelModel


class PlaylistCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistResponse(CamelModel):
    id: UUID
    name: str
    description: str
    owner_id: str
    video_refs: List[UUID]  # May include videos that were deleted since
    created_at: datetime
    updated_at: datetime
