from typing import Literal

from pydantic import BaseModel, Field

from models.editor_models import Clip, EditorState, TextOverlay, TimelineItem


# =============================================================================
# REQUEST MODELS
# =============================================================================


class CreateSessionRequest(BaseModel):
    frame_rate: int | None = Field(default=None, ge=1)
    duration: int | None = Field(default=None, ge=0)


class TrimItemRequest(BaseModel):
    start_frame: int
    end_frame: int


class ReorderClipsRequest(BaseModel):
    from_index: int
    to_index: int


class SelectItemRequest(BaseModel):
    item_id: str | None = None


class FrameRequest(BaseModel):
    frame: int


class VolumeRequest(BaseModel):
    volume: float = Field(allow_inf_nan=False)


class ZoomRequest(BaseModel):
    zoom: float = Field(allow_inf_nan=False)


class ScrollRequest(BaseModel):
    position: float = Field(allow_inf_nan=False)


class DurationRequest(BaseModel):
    duration: int


class FrameRateRequest(BaseModel):
    frame_rate: int


class SecondsRequest(BaseModel):
    seconds: float = Field(allow_inf_nan=False)


class UploadedMediaRequest(BaseModel):
    url: str
    filename: str
    duration_frames: int | None = Field(default=None, description="Uploader estimate; media-type default when absent")


TransportAction = Literal["play", "pause", "toggle", "stop"]


# =============================================================================
# RESPONSE MODELS
# =============================================================================


class EditorStateResponse(BaseModel):
    ok: bool = True
    session_id: str
    state: EditorState


class SessionListResponse(BaseModel):
    ok: bool = True
    session_ids: list[str]


class SelectedItemResponse(BaseModel):
    ok: bool = True
    selected_id: str | None
    item: Clip | TextOverlay | None = None


class ValidationResponse(BaseModel):
    ok: bool = True
    valid: bool
    errors: list[str] = Field(default_factory=list)


class TimelineItemsResponse(BaseModel):
    ok: bool = True
    frame: int | None = None
    items: list[TimelineItem]


class DurationInfoResponse(BaseModel):
    ok: bool = True
    duration: int
    content_extent: int
    optimal_duration: int
    duration_time: str = Field(description="Duration as MM:SS")
