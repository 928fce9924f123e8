import logging
from typing import List, Optional, Tuple, Union
from sqlalchemy.orm import Session
from videohub.core.database import transaction
from videohub.core.errors import ValidationError
from videohub.models.engagement import Comment, Like, LikedEntityKind
from videohub.models.video import Video
from videohub.repositories.documents import Repository

logger = logging.getLogger(__name__)

LIKED_ENTITY_MODELS = {
    LikedEntityKind.VIDEO: Video,
    LikedEntityKind.COMMENT: Comment,
}


def parse_entity_kind(value: str) -> LikedEntityKind:
    try:
        return LikedEntityKind(value.strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid liked entity kind: {value!r}", field="entityKind")


def resolve_liked_entity(db: Session, like: Like) -> Optional[Union[Video, Comment]]:
    """Load the video or comment a like points at; None when it was deleted."""
    model = LIKED_ENTITY_MODELS[like.entity_kind]
    entity = db.get(model, like.entity_id)
    if entity is None:
        logger.debug(f"Like {like.id} points at missing {like.entity_kind.value} {like.entity_id}")
    return entity


def list_liked_entities(
    db: Session, liked_by: str, kind: Optional[LikedEntityKind] = None
) -> List[Tuple[Like, Union[Video, Comment]]]:
    """Likes by ``liked_by`` paired with their targets, newest first; dangling likes are skipped."""
    filter = {"liked_by": liked_by}
    if kind is not None:
        filter["entity_kind"] = kind
    with transaction(db):
        likes = Repository(db, Like).find_all(filter, order_by=(Like.created_at.desc(), Like.id.asc()))
        resolved = [(like, resolve_liked_entity(db, like)) for like in likes]
    return [(like, entity) for like, entity in resolved if entity is not None]
