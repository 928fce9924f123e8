"""Pytest configuration and fixtures."""
import io
import uuid
from datetime import datetime, timedelta
from unittest.mock import MagicMock
import pytest
from PIL import Image
from videohub.core.database import Database
from videohub.models.video import Base, Video
from videohub.services.storage import AssetKind, S3AssetStore, StoredAsset

VIDEO_DURATION = 12.5


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'test.db'}").open()
    yield db
    Base.metadata.drop_all(bind=db.engine)
    db.close()


@pytest.fixture
def db_session(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def asset_store():
    """Asset store double that hands out fresh refs and records deletes."""
    store = MagicMock(spec=S3AssetStore)

    def put(data, kind, content_type):
        duration = VIDEO_DURATION if kind is AssetKind.VIDEO else None
        return StoredAsset(asset_ref=f"{kind.value}/{uuid.uuid4()}", duration_seconds=duration)

    store.put.side_effect = put
    store.delete.return_value = None
    store.url_for.side_effect = lambda asset_ref, expiration=None: f"https://example.com/{asset_ref}"
    return store


@pytest.fixture
def make_video(db_session):
    """Insert a video record directly, bypassing the upload saga."""
    base_time = datetime(2024, 1, 1, 12, 0, 0)
    counter = {"n": 0}

    def _make(owner_id="u1", **overrides):
        counter["n"] += 1
        values = dict(
            title=f"Video {counter['n']}",
            description="A video",
            video_asset_ref=f"videos/{uuid.uuid4()}.mp4",
            thumbnail_asset_ref=f"thumbnails/{uuid.uuid4()}.png",
            duration_seconds=60.0,
            view_count=0,
            is_published=True,
            owner_id=owner_id,
            created_at=base_time + timedelta(minutes=counter["n"]),
            updated_at=base_time + timedelta(minutes=counter["n"]),
        )
        values.update(overrides)
        video = Video(**values)
        db_session.add(video)
        db_session.commit()
        return video

    return _make


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (16, 9), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()
