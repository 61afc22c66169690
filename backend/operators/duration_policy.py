"""
Duration Policy - how long the timeline is allowed to be.

Two policies write the timeline duration:
- auto_adjust: a ratchet applied after edits that may extend content.
  Content plus a playback buffer, never less than 10 seconds, never shrinks.
- fit_to_content: an explicit command that may shrink the timeline down to
  the content extent, floored at 5 seconds.

Every write of duration goes through with_duration(), which keeps the
playhead inside [0, duration].
"""

from models.editor_models import EditorState


DEFAULT_BUFFER_SECONDS = 2
MIN_OPTIMAL_SECONDS = 10
MIN_FIT_SECONDS = 5


def content_extent(state: EditorState) -> int:
    """Max end frame across clips and overlays, or 0 for an empty timeline."""
    return max(
        [clip.end_frame for clip in state.clips]
        + [overlay.end_frame for overlay in state.overlays]
        + [0]
    )


def minimum_duration(state: EditorState) -> int:
    return content_extent(state)


def optimal_duration(
    state: EditorState, buffer_seconds: float = DEFAULT_BUFFER_SECONDS
) -> int:
    buffer_frames = buffer_seconds * state.frame_rate
    return int(
        max(
            minimum_duration(state) + buffer_frames,
            state.frame_rate * MIN_OPTIMAL_SECONDS,
        )
    )


def with_duration(state: EditorState, duration: int) -> EditorState:
    duration = max(0, int(duration))
    return state.model_copy(
        update={
            "duration": duration,
            "playhead": max(0, min(state.playhead, duration)),
        }
    )


def auto_adjust(state: EditorState) -> EditorState:
    """Grow the timeline to the optimal duration. Never shrinks."""
    return with_duration(state, max(optimal_duration(state), state.duration))


def fit_to_content(state: EditorState) -> EditorState:
    """Set the duration to the content extent (min 5 seconds). May shrink."""
    return with_duration(
        state, max(minimum_duration(state), state.frame_rate * MIN_FIT_SECONDS)
    )


def needs_extension(before: EditorState, after: EditorState) -> bool:
    """True when an edit moved content past the duration it started from."""
    return content_extent(after) > before.duration
