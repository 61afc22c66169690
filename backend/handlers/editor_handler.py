"""
Editor Handler - REST API endpoints for editing sessions.

Each session owns one EditorStore. Every mutating endpoint returns the full
snapshot after the change:
{
    "ok": true,
    "session_id": "<hex>",
    "state": { ...EditorState... }
}

Unknown session ids return 404. Unknown item ids inside a session are not
errors: the operation is a no-op and the unchanged snapshot is returned.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from models.api_models import (
    CreateSessionRequest,
    DurationInfoResponse,
    DurationRequest,
    EditorStateResponse,
    FrameRateRequest,
    FrameRequest,
    ReorderClipsRequest,
    ScrollRequest,
    SecondsRequest,
    SelectedItemResponse,
    SelectItemRequest,
    SessionListResponse,
    TimelineItemsResponse,
    TransportAction,
    TrimItemRequest,
    UploadedMediaRequest,
    ValidationResponse,
    VolumeRequest,
    ZoomRequest,
)
from models.editor_models import ClipUpdate, NewClip, NewTextOverlay, TextOverlayUpdate
from operators import duration_policy, timeline_ops
from operators.editor_sessions import (
    EditorConfig,
    EditorError,
    EditorSessionRegistry,
    SessionLimitError,
    SessionNotFoundError,
)
from operators.editor_store import EditorStore
from utils.media_utils import build_clip_from_upload, frames_to_time


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/editor/sessions", tags=["editor"])

_registry: EditorSessionRegistry | None = None


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def get_registry() -> EditorSessionRegistry:
    """Process-wide session registry, configured from the environment."""
    global _registry
    if _registry is None:
        _registry = EditorSessionRegistry(EditorConfig.from_env())
    return _registry


def handle_editor_error(e: Exception):
    """Convert editor exceptions to HTTP exceptions."""
    if isinstance(e, SessionNotFoundError):
        raise HTTPException(status_code=404, detail=str(e))
    elif isinstance(e, SessionLimitError):
        raise HTTPException(status_code=429, detail=str(e))
    elif isinstance(e, EditorError):
        raise HTTPException(status_code=400, detail=str(e))
    else:
        logger.exception("editor_request_failed")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


def require_store(
    session_id: str = Path(..., description="Editor session id"),
    registry: EditorSessionRegistry = Depends(get_registry),
) -> EditorStore:
    try:
        return registry.get_store(session_id)
    except Exception as e:
        handle_editor_error(e)


def state_response(session_id: str, store: EditorStore) -> EditorStateResponse:
    return EditorStateResponse(ok=True, session_id=session_id, state=store.state)


# =============================================================================
# SESSIONS
# =============================================================================


@router.post("", response_model=EditorStateResponse)
async def session_create(
    request: CreateSessionRequest | None = None,
    registry: EditorSessionRegistry = Depends(get_registry),
):
    """Open a new editing session with an empty timeline."""
    request = request or CreateSessionRequest()
    try:
        session_id, store = registry.create_session(
            frame_rate=request.frame_rate,
            duration=request.duration,
        )
        return state_response(session_id, store)
    except Exception as e:
        handle_editor_error(e)


@router.get("", response_model=SessionListResponse)
async def session_list(registry: EditorSessionRegistry = Depends(get_registry)):
    return SessionListResponse(ok=True, session_ids=registry.session_ids())


@router.get("/{session_id}", response_model=EditorStateResponse)
async def session_get(session_id: str, store: EditorStore = Depends(require_store)):
    return state_response(session_id, store)


@router.delete("/{session_id}")
async def session_close(
    session_id: str,
    registry: EditorSessionRegistry = Depends(get_registry),
):
    try:
        registry.close_session(session_id)
        return {"ok": True}
    except Exception as e:
        handle_editor_error(e)


@router.post("/{session_id}/reset", response_model=EditorStateResponse)
async def session_reset(session_id: str, store: EditorStore = Depends(require_store)):
    store.reset_state()
    return state_response(session_id, store)


# =============================================================================
# CLIPS AND OVERLAYS
# =============================================================================


@router.post("/{session_id}/clips", response_model=EditorStateResponse)
async def clip_add(
    session_id: str,
    request: NewClip,
    store: EditorStore = Depends(require_store),
):
    """Append a clip, select it and grow the timeline if needed."""
    store.add_clip(request)
    return state_response(session_id, store)


@router.post("/{session_id}/clips/upload", response_model=EditorStateResponse)
async def clip_add_from_upload(
    session_id: str,
    request: UploadedMediaRequest,
    store: EditorStore = Depends(require_store),
):
    """Append a clip for an uploaded media file, sized by its media type."""
    try:
        clip = build_clip_from_upload(request.url, request.filename, request.duration_frames)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    store.add_clip(clip)
    return state_response(session_id, store)


@router.patch("/{session_id}/clips/{clip_id}", response_model=EditorStateResponse)
async def clip_update(
    session_id: str,
    clip_id: str,
    request: ClipUpdate,
    store: EditorStore = Depends(require_store),
):
    store.update_clip(clip_id, request)
    return state_response(session_id, store)


@router.post("/{session_id}/clips/reorder", response_model=EditorStateResponse)
async def clip_reorder(
    session_id: str,
    request: ReorderClipsRequest,
    store: EditorStore = Depends(require_store),
):
    """Move a clip from one list position to another (out-of-range indices are clamped)."""
    store.reorder_clips(request.from_index, request.to_index)
    return state_response(session_id, store)


@router.put("/{session_id}/clips/{clip_id}/volume", response_model=EditorStateResponse)
async def clip_volume(
    session_id: str,
    clip_id: str,
    request: VolumeRequest,
    store: EditorStore = Depends(require_store),
):
    store.set_clip_volume(clip_id, request.volume)
    return state_response(session_id, store)


@router.post("/{session_id}/clips/{clip_id}/mute", response_model=EditorStateResponse)
async def clip_toggle_mute(
    session_id: str,
    clip_id: str,
    store: EditorStore = Depends(require_store),
):
    store.toggle_clip_mute(clip_id)
    return state_response(session_id, store)


@router.post("/{session_id}/overlays", response_model=EditorStateResponse)
async def overlay_add(
    session_id: str,
    request: NewTextOverlay,
    store: EditorStore = Depends(require_store),
):
    store.add_text_overlay(request)
    return state_response(session_id, store)


@router.patch("/{session_id}/overlays/{overlay_id}", response_model=EditorStateResponse)
async def overlay_update(
    session_id: str,
    overlay_id: str,
    request: TextOverlayUpdate,
    store: EditorStore = Depends(require_store),
):
    store.update_overlay(overlay_id, request)
    return state_response(session_id, store)


@router.delete("/{session_id}/items/{item_id}", response_model=EditorStateResponse)
async def item_remove(
    session_id: str,
    item_id: str,
    store: EditorStore = Depends(require_store),
):
    """Remove a clip or overlay. The timeline duration is not shrunk."""
    store.remove_item(item_id)
    return state_response(session_id, store)


@router.post("/{session_id}/items/{item_id}/trim", response_model=EditorStateResponse)
async def item_trim(
    session_id: str,
    item_id: str,
    request: TrimItemRequest,
    store: EditorStore = Depends(require_store),
):
    store.trim_item(item_id, request.start_frame, request.end_frame)
    return state_response(session_id, store)


@router.get("/{session_id}/items", response_model=TimelineItemsResponse)
async def item_list(
    store: EditorStore = Depends(require_store),
    frame: int | None = Query(default=None, description="Only items visible at this frame"),
):
    if frame is None:
        items = timeline_ops.get_timeline_items(store.state)
    else:
        items = store.get_items_at_frame(frame)
    return TimelineItemsResponse(ok=True, frame=frame, items=items)


@router.put("/{session_id}/selection", response_model=EditorStateResponse)
async def selection_set(
    session_id: str,
    request: SelectItemRequest,
    store: EditorStore = Depends(require_store),
):
    store.select_item(request.item_id)
    return state_response(session_id, store)


@router.get("/{session_id}/selection", response_model=SelectedItemResponse)
async def selection_get(store: EditorStore = Depends(require_store)):
    return SelectedItemResponse(
        ok=True,
        selected_id=store.state.selected_id,
        item=store.get_selected_item(),
    )


# =============================================================================
# TRANSPORT
# =============================================================================


@router.post("/{session_id}/transport/seek", response_model=EditorStateResponse)
async def transport_seek(
    session_id: str,
    request: FrameRequest,
    store: EditorStore = Depends(require_store),
):
    """User seek: moves the playhead and stops playback."""
    store.seek_to(request.frame)
    return state_response(session_id, store)


@router.post("/{session_id}/transport/sync", response_model=EditorStateResponse)
async def transport_sync(
    session_id: str,
    request: FrameRequest,
    store: EditorStore = Depends(require_store),
):
    """Frame report from the preview player's clock. Does not stop playback."""
    store.sync_playhead(request.frame)
    return state_response(session_id, store)


@router.post("/{session_id}/transport/{action}", response_model=EditorStateResponse)
async def transport_control(
    session_id: str,
    action: TransportAction,
    store: EditorStore = Depends(require_store),
):
    if action == "play":
        store.play()
    elif action == "pause":
        store.pause()
    elif action == "toggle":
        store.toggle_playback()
    else:
        store.stop()
    return state_response(session_id, store)


# =============================================================================
# VIEW AND AUDIO
# =============================================================================


@router.put("/{session_id}/zoom", response_model=EditorStateResponse)
async def view_zoom(
    session_id: str,
    request: ZoomRequest,
    store: EditorStore = Depends(require_store),
):
    store.set_zoom(request.zoom)
    return state_response(session_id, store)


@router.put("/{session_id}/scroll", response_model=EditorStateResponse)
async def view_scroll(
    session_id: str,
    request: ScrollRequest,
    store: EditorStore = Depends(require_store),
):
    store.set_scroll_position(request.position)
    return state_response(session_id, store)


@router.put("/{session_id}/volume", response_model=EditorStateResponse)
async def audio_master_volume(
    session_id: str,
    request: VolumeRequest,
    store: EditorStore = Depends(require_store),
):
    store.set_master_volume(request.volume)
    return state_response(session_id, store)


@router.post("/{session_id}/mute", response_model=EditorStateResponse)
async def audio_toggle_mute(session_id: str, store: EditorStore = Depends(require_store)):
    store.toggle_mute()
    return state_response(session_id, store)


# =============================================================================
# DURATION
# =============================================================================


@router.get("/{session_id}/duration", response_model=DurationInfoResponse)
async def duration_info(store: EditorStore = Depends(require_store)):
    state = store.state
    return DurationInfoResponse(
        ok=True,
        duration=state.duration,
        content_extent=duration_policy.content_extent(state),
        optimal_duration=duration_policy.optimal_duration(state),
        duration_time=frames_to_time(state.duration, state.frame_rate),
    )


@router.put("/{session_id}/duration", response_model=EditorStateResponse)
async def duration_set(
    session_id: str,
    request: DurationRequest,
    store: EditorStore = Depends(require_store),
):
    store.set_duration(request.duration)
    return state_response(session_id, store)


@router.post("/{session_id}/duration/fit", response_model=EditorStateResponse)
async def duration_fit(session_id: str, store: EditorStore = Depends(require_store)):
    """Fit the timeline to its content (may shrink, minimum 5 seconds)."""
    store.fit_timeline_to_content()
    return state_response(session_id, store)


@router.post("/{session_id}/duration/auto", response_model=EditorStateResponse)
async def duration_auto(session_id: str, store: EditorStore = Depends(require_store)):
    store.auto_adjust_timeline()
    return state_response(session_id, store)


@router.post("/{session_id}/duration/extend", response_model=EditorStateResponse)
async def duration_extend(
    session_id: str,
    request: SecondsRequest,
    store: EditorStore = Depends(require_store),
):
    store.extend_timeline(request.seconds)
    return state_response(session_id, store)


@router.post("/{session_id}/duration/shrink", response_model=EditorStateResponse)
async def duration_shrink(
    session_id: str,
    request: SecondsRequest,
    store: EditorStore = Depends(require_store),
):
    store.shrink_timeline(request.seconds)
    return state_response(session_id, store)


@router.put("/{session_id}/frame-rate", response_model=EditorStateResponse)
async def frame_rate_set(
    session_id: str,
    request: FrameRateRequest,
    store: EditorStore = Depends(require_store),
):
    store.set_frame_rate(request.frame_rate)
    return state_response(session_id, store)


# =============================================================================
# VALIDATION
# =============================================================================


@router.get("/{session_id}/validation", response_model=ValidationResponse)
async def timeline_validate(store: EditorStore = Depends(require_store)):
    errors = store.validate()
    return ValidationResponse(ok=True, valid=not errors, errors=errors)
