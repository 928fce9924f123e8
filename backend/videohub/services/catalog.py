"""
Catalog query engine.

Read-only paging over an owner's videos. A page is produced in two phases,
count then fetch, each a single statement. The phases may observe different
snapshots under concurrent writes, so ``total_count`` can disagree with the
items by the number of rows inserted or deleted in between; callers treat the
totals as advisory. Ordering always ends with ``id`` ascending so that rows
with equal sort values keep a fixed position across requests.
"""
import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List
from sqlalchemy.orm import Session
from videohub.core.database import transaction
from videohub.core.errors import NotFoundError
from videohub.models.video import Video
from videohub.repositories.documents import Repository
from videohub.services.query_validator import CatalogQuery, PublishedFilter, SortDirection

logger = logging.getLogger(__name__)


@dataclass
class CatalogPage:
    items: List[Video]
    total_count: int
    total_pages: int
    page: int
    limit: int
    has_next: bool
    has_prev: bool


def build_predicate(query: CatalogQuery) -> Dict[str, Any]:
    predicate: Dict[str, Any] = {"owner_id": query.owner_id}
    if query.published_filter is not PublishedFilter.ALL:
        predicate["is_published"] = query.published_filter is PublishedFilter.PUBLISHED
    return predicate


class CatalogQueryEngine:
    def __init__(self, db: Session):
        self.db = db
        self.videos = Repository(db, Video)

    def page(self, query: CatalogQuery) -> CatalogPage:
        predicate = build_predicate(query)
        with transaction(self.db):
            total_count = self.videos.count(predicate)
            items = self.videos.page(
                predicate,
                sort_field=query.sort_field,
                descending=query.sort_direction is SortDirection.DESCENDING,
                skip=(query.page - 1) * query.limit,
                limit=query.limit,
            )
        total_pages = math.ceil(total_count / query.limit)
        logger.debug(
            f"Catalog page {query.page}/{total_pages} for owner {query.owner_id}: "
            f"{len(items)} of {total_count} videos"
        )
        return CatalogPage(
            items=items,
            total_count=total_count,
            total_pages=total_pages,
            page=query.page,
            limit=query.limit,
            has_next=query.page < total_pages,
            has_prev=query.page > 1,
        )

    def get_video(self, video_id: uuid.UUID) -> Video:
        with transaction(self.db):
            video = self.videos.find_by_id(video_id)
        if video is None:
            raise NotFoundError("Video not found")
        return video
