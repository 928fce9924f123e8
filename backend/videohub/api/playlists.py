import uuid
from typing import List
from fastapi import APIRouter, Depends
from videohub.api.deps import get_current_user_id, get_playlist_service
from videohub.models.playlist import Playlist
from videohub.schemas.envelope import ApiResponse
from videohub.schemas.playlist import PlaylistCreate, PlaylistResponse, PlaylistUpdate
from videohub.services.playlists import PlaylistService

router = APIRouter(prefix="/api/v1/playlists", tags=["playlists"])


def to_playlist_response(playlist: Playlist) -> PlaylistResponse:
    return PlaylistResponse.model_validate(playlist)


@router.post("", response_model=ApiResponse[PlaylistResponse])
def create_playlist(
    payload: PlaylistCreate,
    service: PlaylistService = Depends(get_playlist_service),
    requester_id: str = Depends(get_current_user_id),
):
    playlist = service.create(requester_id, payload.name, payload.description)
    return ApiResponse[PlaylistResponse](data=to_playlist_response(playlist), message="Playlist created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse[List[PlaylistResponse]])
def get_user_playlists(
    user_id: str,
    service: PlaylistService = Depends(get_playlist_service),
    requester_id: str = Depends(get_current_user_id),
):
    playlists = service.list_for_owner(user_id)
    return ApiResponse[List[PlaylistResponse]](
        data=[to_playlist_response(playlist) for playlist in playlists],
        message="User playlists found successfully",
    )


@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def get_playlist(
    playlist_id: uuid.UUID,
    service: PlaylistService = Depends(get_playlist_service),
    requester_id: str = Depends(get_current_user_id),
):
    playlist = service.get(playlist_id)
    return ApiResponse[PlaylistResponse](data=to_playlist_response(playlist), message="Playlist found successfully")


@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def update_playlist(
    playlist_id: uuid.UUID,
    payload: PlaylistUpdate,
    service: PlaylistService = Depends(get_playlist_service),
    requester_id: str = Depends(get_current_user_id),
):
    playlist = service.update(playlist_id, requester_id, name=payload.name, description=payload.description)
    return ApiResponse[PlaylistResponse](data=to_playlist_response(playlist), message="Playlist updated successfully")


@router.delete("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def delete_playlist(
    playlist_id: uuid.UUID,
    service: PlaylistService = Depends(get_playlist_service),
    requester_id: str = Depends(get_current_user_id),
):
    playlist = service.delete(playlist_id, requester_id)
    return ApiResponse[PlaylistResponse](data=to_playlist_response(playlist), message="Playlist deleted successfully")


@router.patch("/add/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def add_video_to_playlist(
    video_id: uuid.UUID,
    playlist_id: uuid.UUID,
    service: PlaylistService = Depends(get_playlist_service),
    requester_id: str = Depends(get_current_user_id),
):
    playlist = service.add_video(playlist_id, video_id, requester_id)
    return ApiResponse[PlaylistResponse](
        data=to_playlist_response(playlist), message="Video added to playlist successfully"
    )


@router.patch("/remove/{video_id}/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
def remove_video_from_playlist(
    video_id: uuid.UUID,
    playlist_id: uuid.UUID,
    service: PlaylistService = Depends(get_playlist_service),
    requester_id: str = Depends(get_current_user_id),
):
    playlist = service.remove_video(playlist_id, video_id, requester_id)
    return ApiResponse[PlaylistResponse](
        data=to_playlist_response(playlist), message="Video removed from playlist successfully"
    )
