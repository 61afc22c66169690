"""
Timeline Ops - pure state-to-state editing operations.

Every function takes an EditorState snapshot and returns a new one; the
input is never mutated. Operations addressing an item by id are silent
no-ops when the id matches nothing. Out-of-range numeric input is clamped,
never rejected.

These functions do not apply the duration policy. Callers that may have
extended content past the current duration run duration_policy.auto_adjust
afterwards (see operators.editor_store).
"""

from typing import Any
from uuid import uuid4

from models.editor_models import (
    MAX_ZOOM,
    MIN_ZOOM,
    Clip,
    ClipUpdate,
    EditorState,
    NewClip,
    NewTextOverlay,
    TextOverlay,
    TextOverlayUpdate,
    TextStyle,
    TimelineEntry,
    TimelineItem,
    TimelineTrack,
    DEFAULT_TEXT_STYLE,
)
from operators.duration_policy import content_extent, with_duration
from utils.media_utils import clamp


def generate_id() -> str:
    return uuid4().hex


def _renumber(clips: list[Clip]) -> list[Clip]:
    return [
        clip if clip.order == index else clip.model_copy(update={"order": index})
        for index, clip in enumerate(clips)
    ]


def _trimmed_range(new_start: int, new_end: int) -> dict[str, int]:
    # The one-frame floor applies to the clamped start.
    start = max(0, new_start)
    end = max(start + 1, new_end)
    return {"start_frame": start, "end_frame": end}


# =============================================================================
# INSERT / REMOVE
# =============================================================================


def insert_clip(state: EditorState, data: NewClip | dict[str, Any]) -> EditorState:
    """Append a new clip with a fresh id and select it."""
    if isinstance(data, dict):
        data = NewClip.model_validate(data)

    clip = Clip(
        id=generate_id(),
        order=len(state.clips),
        **data.model_dump(),
    )
    return state.model_copy(
        update={
            "clips": [*state.clips, clip],
            "selected_id": clip.id,
        }
    )


def insert_overlay(
    state: EditorState, data: NewTextOverlay | dict[str, Any]
) -> EditorState:
    """Append a new text overlay and select it. style is merged onto the defaults."""
    if isinstance(data, dict):
        data = NewTextOverlay.model_validate(data)

    fields = data.model_dump(exclude={"style"})
    overlay = TextOverlay(
        id=generate_id(),
        style=TextStyle(**{**DEFAULT_TEXT_STYLE, **data.style}),
        **fields,
    )
    return state.model_copy(
        update={
            "overlays": [*state.overlays, overlay],
            "selected_id": overlay.id,
        }
    )


def remove_item(state: EditorState, item_id: str) -> EditorState:
    """
    Remove the clip or overlay with item_id.

    Clears a matching selection and renumbers the remaining clips. The
    duration is left as is.
    """
    clips = [clip for clip in state.clips if clip.id != item_id]
    overlays = [overlay for overlay in state.overlays if overlay.id != item_id]
    return state.model_copy(
        update={
            "clips": _renumber(clips),
            "overlays": overlays,
            "selected_id": None if state.selected_id == item_id else state.selected_id,
        }
    )


# =============================================================================
# TRIM / UPDATE
# =============================================================================


def trim_item(
    state: EditorState, item_id: str, new_start: int, new_end: int
) -> EditorState:
    """
    Set the frame range of a clip or overlay.

    start = max(0, new_start), end = max(start + 1, new_end).
    """
    bounds = _trimmed_range(new_start, new_end)
    return state.model_copy(
        update={
            "clips": [
                clip.model_copy(update=bounds) if clip.id == item_id else clip
                for clip in state.clips
            ],
            "overlays": [
                overlay.model_copy(update=bounds) if overlay.id == item_id else overlay
                for overlay in state.overlays
            ],
        }
    )


def update_clip(
    state: EditorState, clip_id: str, changes: ClipUpdate | dict[str, Any]
) -> EditorState:
    if isinstance(changes, dict):
        changes = ClipUpdate.model_validate(changes)
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        return state

    validated = {key: getattr(changes, key) for key in fields}
    return state.model_copy(
        update={
            "clips": [
                clip.model_copy(update=validated) if clip.id == clip_id else clip
                for clip in state.clips
            ]
        }
    )


def update_overlay(
    state: EditorState,
    overlay_id: str,
    changes: TextOverlayUpdate | dict[str, Any],
) -> EditorState:
    if isinstance(changes, dict):
        changes = TextOverlayUpdate.model_validate(changes)
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        return state

    def _apply(overlay: TextOverlay) -> TextOverlay:
        update = {key: getattr(changes, key) for key in fields if key != "style"}
        if changes.style is not None:
            update["style"] = TextStyle(
                **{**overlay.style.model_dump(), **changes.style}
            )
        return overlay.model_copy(update=update)

    return state.model_copy(
        update={
            "overlays": [
                _apply(overlay) if overlay.id == overlay_id else overlay
                for overlay in state.overlays
            ]
        }
    )


# =============================================================================
# ORDERING / SELECTION
# =============================================================================


def reorder_clips(state: EditorState, from_index: int, to_index: int) -> EditorState:
    """
    Move the clip at from_index to to_index (splice, not swap).

    Indices outside the list are clamped into [0, len - 1]; negative values
    clamp to 0 rather than counting from the end.
    """
    if not state.clips:
        return state

    last = len(state.clips) - 1
    from_index = clamp(from_index, 0, last)
    to_index = clamp(to_index, 0, last)

    clips = list(state.clips)
    moved = clips.pop(from_index)
    clips.insert(to_index, moved)
    return state.model_copy(update={"clips": _renumber(clips)})


def select_item(state: EditorState, item_id: str | None) -> EditorState:
    """Replace the selection verbatim; existence is not checked."""
    return state.model_copy(update={"selected_id": item_id})


# =============================================================================
# PLAYHEAD / VIEW / AUDIO
# =============================================================================


def set_playhead(state: EditorState, frame: int) -> EditorState:
    """User seek: clamp into [0, duration] and stop playback."""
    return state.model_copy(
        update={
            "playhead": int(clamp(frame, 0, state.duration)),
            "is_playing": False,
        }
    )


def set_zoom(state: EditorState, zoom: float) -> EditorState:
    return state.model_copy(update={"zoom": clamp(zoom, MIN_ZOOM, MAX_ZOOM)})


def set_scroll_position(state: EditorState, position: float) -> EditorState:
    return state.model_copy(update={"scroll_position": max(0.0, position)})


def set_master_volume(state: EditorState, volume: float) -> EditorState:
    return state.model_copy(update={"master_volume": clamp(volume, 0.0, 1.0)})


def toggle_mute(state: EditorState) -> EditorState:
    return state.model_copy(update={"muted": not state.muted})


def set_clip_volume(state: EditorState, clip_id: str, volume: float) -> EditorState:
    volume = clamp(volume, 0.0, 1.0)
    return state.model_copy(
        update={
            "clips": [
                clip.model_copy(update={"volume": volume}) if clip.id == clip_id else clip
                for clip in state.clips
            ]
        }
    )


def toggle_clip_mute(state: EditorState, clip_id: str) -> EditorState:
    return state.model_copy(
        update={
            "clips": [
                clip.model_copy(update={"muted": not clip.muted})
                if clip.id == clip_id
                else clip
                for clip in state.clips
            ]
        }
    )


# =============================================================================
# TIMELINE LENGTH
# =============================================================================


def set_duration(state: EditorState, duration: int) -> EditorState:
    return with_duration(state, max(0, duration))


def set_frame_rate(state: EditorState, frame_rate: int) -> EditorState:
    return state.model_copy(update={"frame_rate": max(1, int(frame_rate))})


def extend_timeline(state: EditorState, additional_seconds: float) -> EditorState:
    return with_duration(
        state, state.duration + int(additional_seconds * state.frame_rate)
    )


def shrink_timeline(state: EditorState, seconds_to_remove: float) -> EditorState:
    """Shorten the timeline, never below the content extent."""
    frames_to_remove = int(seconds_to_remove * state.frame_rate)
    return with_duration(
        state, max(state.duration - frames_to_remove, content_extent(state))
    )


def reset_state(
    frame_rate: int | None = None, duration: int | None = None
) -> EditorState:
    state = EditorState()
    if frame_rate is not None:
        state = set_frame_rate(state, frame_rate)
    if duration is not None:
        state = set_duration(state, duration)
    return state


# =============================================================================
# QUERIES
# =============================================================================


def find_item(state: EditorState, item_id: str | None) -> TimelineEntry | None:
    if item_id is None:
        return None
    for clip in state.clips:
        if clip.id == item_id:
            return clip
    for overlay in state.overlays:
        if overlay.id == item_id:
            return overlay
    return None


def get_selected_item(state: EditorState) -> TimelineEntry | None:
    """Resolve the selection; a dangling selection resolves to None."""
    return find_item(state, state.selected_id)


def get_timeline_items(state: EditorState) -> list[TimelineItem]:
    """Clips and overlays as one list, stably sorted by start frame."""
    items = [TimelineItem.from_clip(clip) for clip in state.clips]
    items.extend(TimelineItem.from_overlay(overlay) for overlay in state.overlays)
    return sorted(items, key=lambda item: item.start_frame)


def get_items_at_frame(state: EditorState, frame: int) -> list[TimelineItem]:
    return [item for item in get_timeline_items(state) if item.is_visible_at(frame)]


def get_items_by_track(state: EditorState) -> dict[TimelineTrack, list[TimelineItem]]:
    tracks: dict[TimelineTrack, list[TimelineItem]] = {
        track: [] for track in TimelineTrack
    }
    for item in get_timeline_items(state):
        tracks[item.track].append(item)
    return tracks
