"""
Advisory consistency checks for an editor snapshot.

Nothing here blocks a mutation. Overlap is only checked between clips;
overlapping text overlays are allowed.
"""

from models.editor_models import Clip, EditorState


def _overlapping_pairs(clips: list[Clip]) -> list[tuple[Clip, Clip]]:
    sorted_clips = sorted(clips, key=lambda clip: clip.start_frame)
    return [
        (current, following)
        for current, following in zip(sorted_clips, sorted_clips[1:])
        if current.end_frame > following.start_frame
    ]


def validate(state: EditorState) -> list[str]:
    errors = [
        f"Clip {current.id} overlaps with clip {following.id}"
        for current, following in _overlapping_pairs(state.clips)
    ]

    for item in [*state.clips, *state.overlays]:
        if item.start_frame >= item.end_frame:
            errors.append(
                f"Item {item.id} has invalid frame range: "
                f"{item.start_frame}-{item.end_frame}"
            )
        if item.start_frame < 0:
            errors.append(f"Item {item.id} has negative start frame: {item.start_frame}")

    return errors


def has_overlaps(state: EditorState) -> bool:
    return bool(_overlapping_pairs(state.clips))
