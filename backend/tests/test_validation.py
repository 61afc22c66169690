from models.editor_models import Clip, EditorState, TextOverlay
from operators.validation import has_overlaps, validate


def _clip(clip_id: str, start: int, end: int) -> Clip:
    return Clip(id=clip_id, src=f"{clip_id}.mp4", start_frame=start, end_frame=end)


def _overlay(overlay_id: str, start: int, end: int) -> TextOverlay:
    return TextOverlay(id=overlay_id, text=overlay_id, start_frame=start, end_frame=end)


def test_clean_state_has_no_errors():
    state = EditorState(clips=[_clip("a", 0, 60), _clip("b", 60, 100)])

    assert validate(state) == []
    assert not has_overlaps(state)


def test_single_overlap_names_both_clips():
    state = EditorState(clips=[_clip("c1", 0, 60), _clip("c2", 50, 100)])

    errors = validate(state)

    assert errors == ["Clip c1 overlaps with clip c2"]
    assert has_overlaps(state)


def test_overlap_uses_start_order_not_list_order():
    state = EditorState(clips=[_clip("late", 50, 100), _clip("early", 0, 60)])

    assert validate(state) == ["Clip early overlaps with clip late"]


def test_overlapping_overlays_are_allowed():
    state = EditorState(overlays=[_overlay("t1", 0, 100), _overlay("t2", 50, 150)])

    assert validate(state) == []


def test_invalid_and_negative_ranges():
    state = EditorState(
        clips=[_clip("zero", 10, 10)],
        overlays=[_overlay("neg", -5, 20)],
    )

    errors = validate(state)

    assert "Item zero has invalid frame range: 10-10" in errors
    assert "Item neg has negative start frame: -5" in errors
    assert len(errors) == 2


def test_validation_does_not_modify_state():
    state = EditorState(clips=[_clip("c1", 0, 60), _clip("c2", 50, 100)])
    before = state.model_dump()

    validate(state)

    assert state.model_dump() == before
