"""
Frame-based Pydantic models for the clip editor timeline.

This module defines the editing session snapshot and the items it holds:
- Clips (video/audio/image) ordered densely on the media track
- Text overlays rendered on their own conceptual track
- The EditorState aggregate with playhead, transport and view settings

All positions are expressed in frames. Ranges are half-open: an item is
visible for start_frame <= frame < end_frame.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


DEFAULT_FRAME_RATE = 30
DEFAULT_DURATION_FRAMES = 900  # 30 seconds at 30fps

MIN_ZOOM = 0.1
MAX_ZOOM = 10.0


# =============================================================================
# ENUMS
# =============================================================================


class ClipKind(str, Enum):
    """Type of media referenced by a clip."""
    VIDEO = "video"
    AUDIO = "audio"
    IMAGE = "image"


class TimelineTrack(str, Enum):
    """Display grouping derived from item type."""
    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"


# =============================================================================
# VISUAL PROPERTIES
# =============================================================================


class Position(BaseModel):
    """Placement of an item in the preview frame, as percentages."""
    x: float = Field(default=50.0, description="Percentage from left (0-100)")
    y: float = Field(default=50.0, description="Percentage from top (0-100)")


class Scale(BaseModel):
    """Scale factors relative to the source size (1.0 = original)."""
    width: float = 1.0
    height: float = 1.0


class TextStyle(BaseModel):
    """Typography for a text overlay."""
    font_size: float = 24
    font_family: str = "Arial, sans-serif"
    color: str = "#ffffff"
    background_color: str | None = None
    opacity: float = 1.0
    font_weight: Literal["normal", "bold"] = "normal"
    text_align: Literal["left", "center", "right"] = "center"


DEFAULT_TEXT_STYLE: dict[str, Any] = TextStyle().model_dump(exclude_none=True)


# =============================================================================
# TIMELINE ITEMS
# =============================================================================


class Clip(BaseModel):
    """
    A media clip placed on the timeline.

    start_frame/end_frame form a half-open interval on the timeline axis.
    order is the dense index of the clip among all clips (0..N-1) and is
    recomputed whenever clips are removed or reordered.
    """
    id: str
    src: str = Field(description="URL or path of the source media")
    start_frame: int = Field(description="First frame on the timeline")
    end_frame: int = Field(description="Exclusive end frame on the timeline")
    order: int = Field(default=0, description="Dense index among clips")
    kind: ClipKind = ClipKind.VIDEO
    name: str = ""
    position: Position | None = None
    scale: Scale | None = None
    rotation: float | None = Field(default=None, description="Rotation in degrees")
    volume: float | None = Field(default=None, description="0.0 to 1.0, unset = 1.0")
    muted: bool | None = None
    trim_start: int | None = Field(default=None, description="In point in source frames")
    trim_end: int | None = Field(default=None, description="Out point in source frames")

    @property
    def duration_frames(self) -> int:
        return self.end_frame - self.start_frame


class TextOverlay(BaseModel):
    """A block of text shown over the composition for a frame range."""
    id: str
    text: str
    start_frame: int
    end_frame: int
    position: Position = Field(default_factory=Position)
    scale: Scale | None = None
    rotation: float | None = None
    style: TextStyle = Field(default_factory=TextStyle)

    @property
    def duration_frames(self) -> int:
        return self.end_frame - self.start_frame


TimelineEntry = Clip | TextOverlay


# =============================================================================
# EDITOR STATE (aggregate root)
# =============================================================================


class EditorState(BaseModel):
    """
    Snapshot of one editing session.

    Snapshots are never mutated in place: every operation returns a new
    EditorState. selected_id is a weak reference and may point at an id
    that no longer exists.
    """
    clips: list[Clip] = Field(default_factory=list)
    overlays: list[TextOverlay] = Field(default_factory=list)
    selected_id: str | None = None
    playhead: int = Field(default=0, description="Current frame, within [0, duration]")
    frame_rate: int = Field(default=DEFAULT_FRAME_RATE, ge=1)
    duration: int = Field(default=DEFAULT_DURATION_FRAMES, ge=0)
    is_playing: bool = False
    master_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    muted: bool = False
    zoom: float = Field(default=1.0, ge=MIN_ZOOM, le=MAX_ZOOM)
    scroll_position: float = 0.0

    @classmethod
    def with_defaults(
        cls,
        frame_rate: int = DEFAULT_FRAME_RATE,
        duration: int = DEFAULT_DURATION_FRAMES,
    ) -> EditorState:
        """Create an empty session snapshot."""
        return cls(frame_rate=frame_rate, duration=duration)


# =============================================================================
# INPUT PAYLOADS
# =============================================================================


class NewClip(BaseModel):
    """Clip data supplied by a caller; id and order are assigned on insert."""
    src: str
    start_frame: int
    end_frame: int
    kind: ClipKind = ClipKind.VIDEO
    name: str = ""
    position: Position | None = None
    scale: Scale | None = None
    rotation: float | None = None
    volume: float | None = None
    muted: bool | None = None
    trim_start: int | None = None
    trim_end: int | None = None


class NewTextOverlay(BaseModel):
    """
    Overlay data supplied by a caller.

    style is partial: explicit keys override DEFAULT_TEXT_STYLE.
    """
    text: str
    start_frame: int
    end_frame: int
    position: Position = Field(default_factory=Position)
    scale: Scale | None = None
    rotation: float | None = None
    style: dict[str, Any] = Field(default_factory=dict)


class ClipUpdate(BaseModel):
    """Partial clip update; unset fields are left untouched."""
    src: str | None = None
    start_frame: int | None = None
    end_frame: int | None = None
    kind: ClipKind | None = None
    name: str | None = None
    position: Position | None = None
    scale: Scale | None = None
    rotation: float | None = None
    volume: float | None = None
    muted: bool | None = None
    trim_start: int | None = None
    trim_end: int | None = None


class TextOverlayUpdate(BaseModel):
    """Partial overlay update; style keys merge onto the current style."""
    text: str | None = None
    start_frame: int | None = None
    end_frame: int | None = None
    position: Position | None = None
    scale: Scale | None = None
    rotation: float | None = None
    style: dict[str, Any] | None = None


# =============================================================================
# DERIVED VIEWS
# =============================================================================


class TimelineItem(BaseModel):
    """Flattened view of a clip or overlay for display and preview."""
    id: str
    item_type: Literal["clip", "text"]
    track: TimelineTrack
    start_frame: int
    end_frame: int
    order: int = 0
    data: Clip | TextOverlay

    def is_visible_at(self, frame: int) -> bool:
        return self.start_frame <= frame < self.end_frame

    @classmethod
    def from_clip(cls, clip: Clip) -> TimelineItem:
        track = TimelineTrack.AUDIO if clip.kind == ClipKind.AUDIO else TimelineTrack.VIDEO
        return cls(
            id=clip.id,
            item_type="clip",
            track=track,
            start_frame=clip.start_frame,
            end_frame=clip.end_frame,
            order=clip.order,
            data=clip,
        )

    @classmethod
    def from_overlay(cls, overlay: TextOverlay) -> TimelineItem:
        return cls(
            id=overlay.id,
            item_type="text",
            track=TimelineTrack.TEXT,
            start_frame=overlay.start_frame,
            end_frame=overlay.end_frame,
            data=overlay,
        )
