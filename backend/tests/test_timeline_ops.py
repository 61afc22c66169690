"""
Tests for the pure timeline operations.

Every operation returns a new snapshot; the input snapshot must be left
untouched and unknown ids must be no-ops.
"""

import pytest

from models.editor_models import (
    Clip,
    ClipKind,
    EditorState,
    NewClip,
    NewTextOverlay,
    TextOverlay,
    TimelineTrack,
)
from operators import timeline_ops


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def empty_state() -> EditorState:
    return EditorState(duration=0)


@pytest.fixture
def three_clips() -> EditorState:
    return EditorState(
        clips=[
            Clip(id="c1", src="one.mp4", start_frame=0, end_frame=30, order=0),
            Clip(id="c2", src="two.mp4", start_frame=30, end_frame=60, order=1),
            Clip(id="c3", src="three.mp4", start_frame=60, end_frame=90, order=2),
        ],
        overlays=[
            TextOverlay(id="t1", text="Title", start_frame=0, end_frame=45),
        ],
    )


def _orders(state: EditorState) -> list[int]:
    return [clip.order for clip in state.clips]


def _ids(state: EditorState) -> list[str]:
    return [clip.id for clip in state.clips]


# =============================================================================
# INSERT
# =============================================================================


class TestInsertClip:
    def test_appends_and_selects(self, empty_state):
        state = timeline_ops.insert_clip(
            empty_state, NewClip(src="test.mp4", start_frame=0, end_frame=150)
        )

        assert len(state.clips) == 1
        clip = state.clips[0]
        assert clip.src == "test.mp4"
        assert clip.order == 0
        assert clip.kind == ClipKind.VIDEO
        assert state.selected_id == clip.id
        assert empty_state.clips == []

    def test_order_is_current_count(self, three_clips):
        state = timeline_ops.insert_clip(
            three_clips, {"src": "four.mp4", "start_frame": 90, "end_frame": 120}
        )

        assert state.clips[-1].order == 3
        assert _orders(state) == [0, 1, 2, 3]

    def test_does_not_touch_duration(self, empty_state):
        state = timeline_ops.insert_clip(
            empty_state, NewClip(src="long.mp4", start_frame=0, end_frame=5000)
        )

        assert state.duration == 0

    def test_ids_are_unique(self, empty_state):
        state = empty_state
        for _ in range(20):
            state = timeline_ops.insert_clip(
                state, NewClip(src="x.mp4", start_frame=0, end_frame=10)
            )

        assert len({clip.id for clip in state.clips}) == 20


class TestInsertOverlay:
    def test_appends_and_selects(self, empty_state):
        state = timeline_ops.insert_overlay(
            empty_state, NewTextOverlay(text="Hello", start_frame=0, end_frame=90)
        )

        assert len(state.overlays) == 1
        assert state.selected_id == state.overlays[0].id

    def test_style_merges_onto_defaults(self, empty_state):
        state = timeline_ops.insert_overlay(
            empty_state,
            {
                "text": "Hello",
                "start_frame": 0,
                "end_frame": 90,
                "style": {"font_size": 48, "color": "#ff0000"},
            },
        )

        style = state.overlays[0].style
        assert style.font_size == 48
        assert style.color == "#ff0000"
        assert style.font_family == "Arial, sans-serif"
        assert style.text_align == "center"


# =============================================================================
# REMOVE
# =============================================================================


class TestRemoveItem:
    def test_renumbers_remaining_clips(self, three_clips):
        state = timeline_ops.remove_item(three_clips, "c1")

        assert _ids(state) == ["c2", "c3"]
        assert _orders(state) == [0, 1]

    def test_clears_matching_selection(self, three_clips):
        selected = timeline_ops.select_item(three_clips, "c2")
        state = timeline_ops.remove_item(selected, "c2")

        assert state.selected_id is None

    def test_keeps_other_selection(self, three_clips):
        selected = timeline_ops.select_item(three_clips, "c3")
        state = timeline_ops.remove_item(selected, "c2")

        assert state.selected_id == "c3"

    def test_removes_overlay(self, three_clips):
        state = timeline_ops.remove_item(three_clips, "t1")

        assert state.overlays == []
        assert len(state.clips) == 3

    def test_never_changes_duration(self, three_clips):
        state = timeline_ops.remove_item(three_clips, "c3")

        assert state.duration == three_clips.duration

    def test_unknown_id_is_noop(self, three_clips):
        state = timeline_ops.remove_item(three_clips, "missing")

        assert state == three_clips


# =============================================================================
# TRIM / UPDATE
# =============================================================================


class TestTrimItem:
    @pytest.mark.parametrize("start,end", [(0, 1), (5, 80), (100, 400)])
    def test_exact_range_when_valid(self, three_clips, start, end):
        state = timeline_ops.trim_item(three_clips, "c2", start, end)
        clip = state.clips[1]

        assert (clip.start_frame, clip.end_frame) == (start, end)

    @pytest.mark.parametrize("start,end", [(50, 50), (50, 10), (50, -3)])
    def test_end_floor_is_one_frame(self, three_clips, start, end):
        state = timeline_ops.trim_item(three_clips, "c2", start, end)
        clip = state.clips[1]

        assert clip.start_frame == start
        assert clip.end_frame == start + 1

    def test_negative_start_clamped_before_floor(self, three_clips):
        state = timeline_ops.trim_item(three_clips, "c1", -10, -5)
        clip = state.clips[0]

        assert clip.start_frame == 0
        assert clip.end_frame == 1

    def test_trims_overlay(self, three_clips):
        state = timeline_ops.trim_item(three_clips, "t1", 15, 30)

        assert state.overlays[0].start_frame == 15
        assert state.overlays[0].end_frame == 30

    def test_input_not_mutated(self, three_clips):
        timeline_ops.trim_item(three_clips, "c1", 10, 20)

        assert three_clips.clips[0].start_frame == 0
        assert three_clips.clips[0].end_frame == 30

    def test_unknown_id_is_noop(self, three_clips):
        assert timeline_ops.trim_item(three_clips, "missing", 1, 2) == three_clips


class TestUpdate:
    def test_update_clip_fields(self, three_clips):
        state = timeline_ops.update_clip(
            three_clips, "c1", {"rotation": 90, "position": {"x": 10, "y": 20}}
        )
        clip = state.clips[0]

        assert clip.rotation == 90
        assert clip.position.x == 10
        assert clip.order == 0

    def test_update_clip_unknown_id(self, three_clips):
        assert timeline_ops.update_clip(three_clips, "nope", {"rotation": 5}) == three_clips

    def test_update_overlay_merges_style(self, three_clips):
        state = timeline_ops.update_overlay(
            three_clips, "t1", {"text": "New", "style": {"font_weight": "bold"}}
        )
        overlay = state.overlays[0]

        assert overlay.text == "New"
        assert overlay.style.font_weight == "bold"
        assert overlay.style.font_size == 24


# =============================================================================
# REORDER / SELECT
# =============================================================================


class TestReorderClips:
    def test_splice_semantics(self, three_clips):
        state = timeline_ops.reorder_clips(three_clips, 0, 2)

        assert _ids(state) == ["c2", "c3", "c1"]
        assert _orders(state) == [0, 1, 2]

    def test_move_backwards(self, three_clips):
        state = timeline_ops.reorder_clips(three_clips, 2, 0)

        assert _ids(state) == ["c3", "c1", "c2"]
        assert _orders(state) == [0, 1, 2]

    def test_out_of_range_indices_are_clamped(self, three_clips):
        state = timeline_ops.reorder_clips(three_clips, -4, 99)

        assert _ids(state) == ["c2", "c3", "c1"]
        assert _orders(state) == [0, 1, 2]

    def test_empty_list_is_noop(self, empty_state):
        assert timeline_ops.reorder_clips(empty_state, 0, 3) == empty_state


class TestSelection:
    def test_dangling_selection(self, three_clips):
        state = timeline_ops.select_item(three_clips, "missing-id")

        assert state.selected_id == "missing-id"
        assert timeline_ops.get_selected_item(state) is None

    def test_resolves_clip_and_overlay(self, three_clips):
        clip_state = timeline_ops.select_item(three_clips, "c2")
        overlay_state = timeline_ops.select_item(three_clips, "t1")

        assert timeline_ops.get_selected_item(clip_state).id == "c2"
        assert timeline_ops.get_selected_item(overlay_state).id == "t1"

    def test_clear(self, three_clips):
        state = timeline_ops.select_item(three_clips, None)

        assert timeline_ops.get_selected_item(state) is None


# =============================================================================
# PLAYHEAD / VIEW / AUDIO
# =============================================================================


class TestSetPlayhead:
    @pytest.mark.parametrize("frame,expected", [(-50, 0), (0, 0), (450, 450), (10**9, 900)])
    def test_clamped_and_stopped(self, frame, expected):
        state = EditorState(is_playing=True)
        result = timeline_ops.set_playhead(state, frame)

        assert result.playhead == expected
        assert result.is_playing is False


class TestViewAndAudio:
    @pytest.mark.parametrize("zoom,expected", [(0.01, 0.1), (2.5, 2.5), (50, 10)])
    def test_zoom_clamped(self, zoom, expected):
        assert timeline_ops.set_zoom(EditorState(), zoom).zoom == expected

    @pytest.mark.parametrize("volume,expected", [(-1, 0.0), (0.4, 0.4), (3, 1.0)])
    def test_master_volume_clamped(self, volume, expected):
        assert timeline_ops.set_master_volume(EditorState(), volume).master_volume == expected

    def test_clip_volume_clamped(self, three_clips):
        state = timeline_ops.set_clip_volume(three_clips, "c1", 1.7)

        assert state.clips[0].volume == 1.0
        assert state.clips[1].volume is None

    def test_clip_volume_unknown_id(self, three_clips):
        assert timeline_ops.set_clip_volume(three_clips, "missing", 0.5) == three_clips

    def test_nan_zoom_and_volume_fall_to_lower_bound(self, three_clips):
        nan = float("nan")

        assert timeline_ops.set_zoom(EditorState(), nan).zoom == 0.1
        assert timeline_ops.set_master_volume(EditorState(), nan).master_volume == 0.0
        assert timeline_ops.set_clip_volume(three_clips, "c1", nan).clips[0].volume == 0.0

    def test_toggle_mute(self):
        state = timeline_ops.toggle_mute(EditorState())
        assert state.muted is True
        assert timeline_ops.toggle_mute(state).muted is False

    def test_toggle_clip_mute(self, three_clips):
        state = timeline_ops.toggle_clip_mute(three_clips, "c2")
        assert state.clips[1].muted is True
        assert timeline_ops.toggle_clip_mute(state, "c2").clips[1].muted is False

    def test_scroll_position_floor(self):
        assert timeline_ops.set_scroll_position(EditorState(), -20).scroll_position == 0.0


# =============================================================================
# TIMELINE LENGTH
# =============================================================================


class TestTimelineLength:
    def test_set_duration_reclamps_playhead(self):
        state = EditorState(playhead=800)
        result = timeline_ops.set_duration(state, 300)

        assert result.duration == 300
        assert result.playhead == 300

    def test_set_duration_negative(self):
        assert timeline_ops.set_duration(EditorState(), -5).duration == 0

    def test_set_frame_rate_floor(self):
        assert timeline_ops.set_frame_rate(EditorState(), 0).frame_rate == 1

    def test_extend(self):
        assert timeline_ops.extend_timeline(EditorState(), 5).duration == 900 + 150

    def test_shrink_stops_at_content(self, three_clips):
        state = timeline_ops.shrink_timeline(three_clips, 60)

        assert state.duration == 90

    def test_shrink_partial(self, three_clips):
        assert timeline_ops.shrink_timeline(three_clips, 10).duration == 600

    def test_reset_state(self):
        state = timeline_ops.reset_state()
        assert state == EditorState()

        custom = timeline_ops.reset_state(frame_rate=24, duration=480)
        assert custom.frame_rate == 24
        assert custom.duration == 480


# =============================================================================
# QUERIES
# =============================================================================


class TestQueries:
    def test_timeline_items_sorted_by_start(self, three_clips):
        items = timeline_ops.get_timeline_items(three_clips)

        assert [item.id for item in items] == ["c1", "t1", "c2", "c3"]

    def test_items_at_frame(self, three_clips):
        items = timeline_ops.get_items_at_frame(three_clips, 30)

        assert {item.id for item in items} == {"c2", "t1"}

    def test_items_by_track(self, three_clips):
        tracks = timeline_ops.get_items_by_track(three_clips)

        assert [item.id for item in tracks[TimelineTrack.VIDEO]] == ["c1", "c2", "c3"]
        assert [item.id for item in tracks[TimelineTrack.TEXT]] == ["t1"]
        assert tracks[TimelineTrack.AUDIO] == []
