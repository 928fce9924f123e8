import logging
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from starlette.concurrency import run_in_threadpool
from videohub.api.deps import get_asset_store, get_catalog, get_current_user_id, get_media_manager
from videohub.core.config import settings
from videohub.core.errors import ValidationError
from videohub.models.video import Video
from videohub.schemas.envelope import ApiResponse
from videohub.schemas.video import CatalogPageResponse, VideoResponse
from videohub.services.catalog import CatalogQueryEngine
from videohub.services.media_lifecycle import MediaLifecycleManager, MediaUpload
from videohub.services.media_probe import MediaProbeError, probe_image
from videohub.services.query_validator import validate_catalog_query
from videohub.services.storage import S3AssetStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


def to_video_response(video: Video, asset_store: S3AssetStore) -> VideoResponse:
    response = VideoResponse.model_validate(video)
    response.video_url = asset_store.url_for(video.video_asset_ref)
    response.thumbnail_url = asset_store.url_for(video.thumbnail_asset_ref)
    return response


async def read_video_upload(file: Optional[UploadFile]) -> MediaUpload:
    if file is None:
        raise ValidationError("Video file is required", field="video")
    if file.content_type not in settings.allowed_video_types:
        logger.warning(f"Invalid MIME type: {file.content_type}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported media type. Allowed: {', '.join(settings.allowed_video_types)}",
        )
    content = await file.read()
    if len(content) > settings.max_video_size:
        logger.warning(f"File too large: {len(content)} bytes")
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size exceeds {settings.max_video_size // (1024*1024)}MB",
        )
    if not content:
        raise ValidationError("Video file is empty", field="video")
    return MediaUpload(data=content, content_type=file.content_type)


async def read_thumbnail_upload(file: Optional[UploadFile], required: bool) -> Optional[MediaUpload]:
    if file is None:
        if required:
            raise ValidationError("Thumbnail file is required", field="thumbnail")
        return None
    content = await file.read()
    if len(content) > settings.max_thumbnail_size:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"File size exceeds {settings.max_thumbnail_size // (1024*1024)}MB",
        )
    try:
        info = probe_image(content)
    except MediaProbeError as e:
        logger.warning(f"Rejected thumbnail {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Thumbnail is not a readable image",
        )
    if info.content_type not in settings.allowed_image_types:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported media type. Allowed: {', '.join(settings.allowed_image_types)}",
        )
    return MediaUpload(data=content, content_type=info.content_type)


@router.get("", response_model=ApiResponse[CatalogPageResponse])
def list_videos(
    user_id: Optional[str] = Query(None, alias="userId"),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    is_published: Optional[str] = Query(None, alias="isPublished"),
    catalog: CatalogQueryEngine = Depends(get_catalog),
    asset_store: S3AssetStore = Depends(get_asset_store),
    requester_id: str = Depends(get_current_user_id),
):
    query = validate_catalog_query(
        owner_id=user_id,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_type=sort_type,
        is_published=is_published,
    )
    result = catalog.page(query)
    data = CatalogPageResponse(
        items=[to_video_response(video, asset_store) for video in result.items],
        total_count=result.total_count,
        total_pages=result.total_pages,
        page=result.page,
        limit=result.limit,
        has_next=result.has_next,
        has_prev=result.has_prev,
    )
    return ApiResponse[CatalogPageResponse](data=data, message="Videos fetched successfully")


@router.post("", response_model=ApiResponse[VideoResponse])
async def publish_video(
    video: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    manager: MediaLifecycleManager = Depends(get_media_manager),
    asset_store: S3AssetStore = Depends(get_asset_store),
    requester_id: str = Depends(get_current_user_id),
):
    logger.info(f"Publish request from {requester_id}: {video.filename if video else None}")
    video_upload = await read_video_upload(video)
    thumbnail_upload = await read_thumbnail_upload(thumbnail, required=True)
    record = await run_in_threadpool(
        manager.publish, video_upload, thumbnail_upload, title, description, requester_id
    )
    return ApiResponse[VideoResponse](data=to_video_response(record, asset_store), message="Video published successfully")


@router.get("/{video_id}", response_model=ApiResponse[VideoResponse])
def get_video(
    video_id: uuid.UUID,
    catalog: CatalogQueryEngine = Depends(get_catalog),
    asset_store: S3AssetStore = Depends(get_asset_store),
    requester_id: str = Depends(get_current_user_id),
):
    video = catalog.get_video(video_id)
    return ApiResponse[VideoResponse](data=to_video_response(video, asset_store), message="Video fetched successfully")


@router.patch("/{video_id}", response_model=ApiResponse[VideoResponse])
async def update_video(
    video_id: uuid.UUID,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    manager: MediaLifecycleManager = Depends(get_media_manager),
    asset_store: S3AssetStore = Depends(get_asset_store),
    requester_id: str = Depends(get_current_user_id),
):
    thumbnail_upload = await read_thumbnail_upload(thumbnail, required=False)
    video = await run_in_threadpool(
        manager.update_details, video_id, requester_id, title, description, thumbnail_upload
    )
    return ApiResponse[VideoResponse](data=to_video_response(video, asset_store), message="Video updated successfully")


@router.delete("/{video_id}", response_model=ApiResponse[VideoResponse])
def delete_video(
    video_id: uuid.UUID,
    manager: MediaLifecycleManager = Depends(get_media_manager),
    requester_id: str = Depends(get_current_user_id),
):
    video = manager.delete(video_id, requester_id)
    # Assets are gone, so no presigned URLs
    return ApiResponse[VideoResponse](data=VideoResponse.model_validate(video), message="Video deleted successfully")


@router.patch("/toggle/publish/{video_id}", response_model=ApiResponse[VideoResponse])
def toggle_publish_status(
    video_id: uuid.UUID,
    manager: MediaLifecycleManager = Depends(get_media_manager),
    asset_store: S3AssetStore = Depends(get_asset_store),
    requester_id: str = Depends(get_current_user_id),
):
    video = manager.toggle_publish(video_id, requester_id)
    return ApiResponse[VideoResponse](data=to_video_response(video, asset_store), message="Publish status toggled successfully")
