from typing import Generator, Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from videohub.core.errors import AuthenticationError
from videohub.services.catalog import CatalogQueryEngine
from videohub.services.media_lifecycle import MediaLifecycleManager
from videohub.services.playlists import PlaylistService
from videohub.services.storage import S3AssetStore


def get_db(request: Request) -> Generator[Session, None, None]:
    yield from request.app.state.database.sessions()


def get_asset_store(request: Request) -> S3AssetStore:
    return request.app.state.asset_store


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Requester id injected by the upstream authentication proxy."""
    if x_user_id is None or not x_user_id.strip():
        raise AuthenticationError("Unauthorized request")
    return x_user_id.strip()


def get_catalog(db: Session = Depends(get_db)) -> CatalogQueryEngine:
    return CatalogQueryEngine(db)


def get_playlist_service(db: Session = Depends(get_db)) -> PlaylistService:
    return PlaylistService(db)


def get_media_manager(
    db: Session = Depends(get_db),
    asset_store: S3AssetStore = Depends(get_asset_store),
) -> MediaLifecycleManager:
    return MediaLifecycleManager(db, asset_store)
