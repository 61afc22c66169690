"""
Transport - playback state machine for the editor.

States:
    IDLE     is_playing=False
    PLAYING  is_playing=True

Two entry points move the playhead:
- seek(): a user scrub. Always lands in IDLE.
- sync_from_clock(): frame reports from the preview player's clock while
  PLAYING. Small drifts are ignored so the store does not fight the
  player's own advancement. Sync never stops playback except when the
  report reaches the end of the timeline (see end_reached).
"""

from enum import Enum

from models.editor_models import EditorState
from operators.timeline_ops import set_playhead
from utils.media_utils import clamp


DEFAULT_SYNC_THRESHOLD_FRAMES = 2


class TransportState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"


def transport_state(state: EditorState) -> TransportState:
    return TransportState.PLAYING if state.is_playing else TransportState.IDLE


def play(state: EditorState) -> EditorState:
    return state.model_copy(update={"is_playing": True})


def pause(state: EditorState) -> EditorState:
    return state.model_copy(update={"is_playing": False})


def toggle_playback(state: EditorState) -> EditorState:
    return state.model_copy(update={"is_playing": not state.is_playing})


def stop(state: EditorState) -> EditorState:
    return state.model_copy(update={"is_playing": False, "playhead": 0})


def seek(state: EditorState, frame: int) -> EditorState:
    return set_playhead(state, frame)


def end_reached(state: EditorState, frame: int) -> bool:
    """True when a clock report lands at or past the end of the timeline."""
    return state.is_playing and frame >= state.duration


def sync_from_clock(
    state: EditorState,
    frame: int,
    threshold: int = DEFAULT_SYNC_THRESHOLD_FRAMES,
) -> EditorState:
    """
    Apply a frame reported by the playback clock.

    Ignored unless playing. The playhead only moves when the report differs
    from it by more than threshold frames, and playback keeps running.

    The one exception is end_reached(): the player has run out of timeline,
    so the playhead parks at duration and playback pauses. This is the only
    way a clock report ends playback.
    """
    if not state.is_playing:
        return state

    if end_reached(state, frame):
        return state.model_copy(update={"playhead": state.duration, "is_playing": False})

    if abs(frame - state.playhead) <= threshold:
        return state

    return state.model_copy(update={"playhead": int(clamp(frame, 0, state.duration))})
