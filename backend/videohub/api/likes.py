from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from videohub.api.deps import get_asset_store, get_current_user_id, get_db
from videohub.api.videos import to_video_response
from videohub.models.engagement import Comment
from videohub.schemas.engagement import CommentResponse, LikedEntityResponse
from videohub.schemas.envelope import ApiResponse
from videohub.services.likes import list_liked_entities, parse_entity_kind
from videohub.services.storage import S3AssetStore

router = APIRouter(prefix="/api/v1/likes", tags=["likes"])


@router.get("", response_model=ApiResponse[List[LikedEntityResponse]])
def get_liked_entities(
    kind: Optional[str] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    asset_store: S3AssetStore = Depends(get_asset_store),
):
    """List what the requester has liked, optionally only videos or only comments."""
    entity_kind = parse_entity_kind(kind) if kind is not None else None
    items = []
    for like, entity in list_liked_entities(db, user_id, entity_kind):
        item = LikedEntityResponse(entity_kind=like.entity_kind, entity_id=like.entity_id, liked_at=like.created_at)
        if isinstance(entity, Comment):
            item.comment = CommentResponse.model_validate(entity)
        else:
            item.video = to_video_response(entity, asset_store)
        items.append(item)
    return ApiResponse[List[LikedEntityResponse]](data=items, message="Liked entities fetched successfully")
