from datetime import datetime
from typing import List, Optional
from uuid import UUID
from videohub.schemas.envelope import CamelModel


class VideoResponse(CamelModel):
    id: UUID
    title: str
    description: str
    video_asset_ref: str
    thumbnail_asset_ref: str
    video_url: Optional[str] = None  # Presigned URL
    thumbnail_url: Optional[str] = None  # Presigned URL
    duration_seconds: float
    view_count: int
    is_published: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime


class CatalogPageResponse(CamelModel):
    items: List[VideoResponse]
    total_count: int
    total_pages: int
    page: int
    limit: int
    has_next: bool
    has_prev: bool
