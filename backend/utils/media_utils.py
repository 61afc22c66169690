from __future__ import annotations

import math
from pathlib import Path

from models.editor_models import ClipKind, NewClip


VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".mkv", ".webm", ".m4v"}
AUDIO_EXTENSIONS = {".mp3", ".wav", ".aac", ".m4a", ".ogg", ".flac"}
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"}

DEFAULT_MEDIA_CLIP_FRAMES = 300
DEFAULT_IMAGE_CLIP_FRAMES = 150


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Bound value to [minimum, maximum]. NaN falls to minimum."""
    if math.isnan(value):
        return minimum
    return min(max(value, minimum), maximum)


def frames_to_time(frames: int, frame_rate: int) -> str:
    """Format a frame count as MM:SS."""
    total_seconds = frames / frame_rate
    minutes = math.floor(total_seconds / 60)
    seconds = math.floor(total_seconds % 60)
    return f"{minutes:02d}:{seconds:02d}"


def get_media_type(filename: str) -> str:
    """Classify a file by extension: video, audio, image or unknown."""
    ext = Path(filename).suffix.lower()
    if ext in VIDEO_EXTENSIONS:
        return ClipKind.VIDEO.value
    if ext in AUDIO_EXTENSIONS:
        return ClipKind.AUDIO.value
    if ext in IMAGE_EXTENSIONS:
        return ClipKind.IMAGE.value
    return "unknown"


def default_clip_frames(kind: ClipKind) -> int:
    if kind == ClipKind.IMAGE:
        return DEFAULT_IMAGE_CLIP_FRAMES
    return DEFAULT_MEDIA_CLIP_FRAMES


def build_clip_from_upload(
    url: str,
    filename: str,
    duration_frames: int | None = None,
) -> NewClip:
    """
    Turn an uploaded file into clip data placed at frame 0.

    duration_frames is the uploader's estimate; without one the clip gets the
    default length for its media type.
    """
    media_type = get_media_type(filename)
    if media_type == "unknown":
        raise ValueError(f"Unsupported media file: {filename}")

    kind = ClipKind(media_type)
    frames = duration_frames if duration_frames and duration_frames > 0 else default_clip_frames(kind)
    return NewClip(
        src=url,
        start_frame=0,
        end_frame=frames,
        kind=kind,
        name=Path(filename).stem,
    )
