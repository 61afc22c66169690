"""
Editor Store - the owner of one editing session's state.

The store holds the current EditorState snapshot and is the single writer
for it. Each action runs a pure operation from timeline_ops / transport /
duration_policy under a lock, swaps in the resulting snapshot and notifies
subscribers in commit order. No partially-updated snapshot is ever
observable.

Duration policy applied by actions:
- add_clip / add_text_overlay: always auto_adjust
- trim_item / update_clip / update_overlay: auto_adjust when the resulting
  content reaches past the current duration
- remove_item: never changes duration
- fit_timeline_to_content: explicit, may shrink
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Callable

from models.editor_models import (
    ClipUpdate,
    EditorState,
    NewClip,
    NewTextOverlay,
    TextOverlayUpdate,
    TimelineEntry,
    TimelineItem,
)
from operators import duration_policy, timeline_ops, transport
from operators.validation import validate


logger = logging.getLogger(__name__)

Listener = Callable[[Any, Any], None]
Selector = Callable[[EditorState], Any]


class _Subscription:
    def __init__(self, listener: Listener, selector: Selector | None):
        self.listener = listener
        self.selector = selector


class EditorStore:
    def __init__(
        self,
        initial_state: EditorState | None = None,
        sync_threshold: int = transport.DEFAULT_SYNC_THRESHOLD_FRAMES,
    ):
        self._initial_state = initial_state or EditorState()
        self._state = self._initial_state
        self._sync_threshold = sync_threshold
        self._lock = threading.RLock()
        self._subscriptions: list[_Subscription] = []
        self._pending: deque[tuple[str, EditorState, EditorState]] = deque()
        self._draining = False

    @property
    def state(self) -> EditorState:
        return self._state

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(
        self, listener: Listener, selector: Selector | None = None
    ) -> Callable[[], None]:
        """
        Register a change listener.

        Without a selector the listener gets (new_state, old_state) after
        every committed change. With a selector it gets (new_value, old_value)
        only when the selected value differs. Returns an unsubscribe callable.
        """
        subscription = _Subscription(listener, selector)
        with self._lock:
            self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            with self._lock:
                if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)

        return unsubscribe

    def _commit(self, action: str, new_state: EditorState) -> EditorState:
        with self._lock:
            old_state = self._state
            if new_state == old_state:
                return old_state
            self._state = new_state

            logger.debug(
                "editor_action action=%s clips=%d overlays=%d duration=%d playhead=%d playing=%s",
                action,
                len(new_state.clips),
                len(new_state.overlays),
                new_state.duration,
                new_state.playhead,
                new_state.is_playing,
            )

            self._pending.append((action, new_state, old_state))
            if not self._draining:
                self._drain()
            return self._state

    def _drain(self) -> None:
        # A listener that commits from inside a notification only queues its
        # change; every subscriber sees commits in order, newest last.
        self._draining = True
        try:
            while self._pending:
                action, new_state, old_state = self._pending.popleft()
                for subscription in list(self._subscriptions):
                    self._notify(subscription, action, new_state, old_state)
        finally:
            self._draining = False

    def _notify(
        self,
        subscription: _Subscription,
        action: str,
        new_state: EditorState,
        old_state: EditorState,
    ) -> None:
        try:
            if subscription.selector is None:
                subscription.listener(new_state, old_state)
                return
            new_value = subscription.selector(new_state)
            old_value = subscription.selector(old_state)
            if new_value != old_value:
                subscription.listener(new_value, old_value)
        except Exception:
            logger.exception("editor_listener_failed action=%s", action)

    def _apply(
        self, action: str, operation: Callable[..., EditorState], *args: Any
    ) -> EditorState:
        with self._lock:
            return self._commit(action, operation(self._state, *args))

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def add_clip(self, data: NewClip | dict[str, Any]) -> EditorState:
        with self._lock:
            new_state = timeline_ops.insert_clip(self._state, data)
            return self._commit("add_clip", duration_policy.auto_adjust(new_state))

    def add_text_overlay(self, data: NewTextOverlay | dict[str, Any]) -> EditorState:
        with self._lock:
            new_state = timeline_ops.insert_overlay(self._state, data)
            return self._commit("add_text_overlay", duration_policy.auto_adjust(new_state))

    def remove_item(self, item_id: str) -> EditorState:
        return self._apply("remove_item", timeline_ops.remove_item, item_id)

    def trim_item(self, item_id: str, start_frame: int, end_frame: int) -> EditorState:
        with self._lock:
            new_state = timeline_ops.trim_item(self._state, item_id, start_frame, end_frame)
            if duration_policy.needs_extension(self._state, new_state):
                new_state = duration_policy.auto_adjust(new_state)
            return self._commit("trim_item", new_state)

    def update_clip(self, clip_id: str, changes: ClipUpdate | dict[str, Any]) -> EditorState:
        if isinstance(changes, dict):
            changes = ClipUpdate.model_validate(changes)
        with self._lock:
            new_state = timeline_ops.update_clip(self._state, clip_id, changes)
            if duration_policy.needs_extension(self._state, new_state):
                new_state = duration_policy.auto_adjust(new_state)
            return self._commit("update_clip", new_state)

    def update_overlay(
        self, overlay_id: str, changes: TextOverlayUpdate | dict[str, Any]
    ) -> EditorState:
        if isinstance(changes, dict):
            changes = TextOverlayUpdate.model_validate(changes)
        with self._lock:
            new_state = timeline_ops.update_overlay(self._state, overlay_id, changes)
            if duration_policy.needs_extension(self._state, new_state):
                new_state = duration_policy.auto_adjust(new_state)
            return self._commit("update_overlay", new_state)

    def reorder_clips(self, from_index: int, to_index: int) -> EditorState:
        return self._apply("reorder_clips", timeline_ops.reorder_clips, from_index, to_index)

    def select_item(self, item_id: str | None) -> EditorState:
        return self._apply("select_item", timeline_ops.select_item, item_id)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def seek_to(self, frame: int) -> EditorState:
        return self._apply("seek_to", transport.seek, frame)

    def sync_playhead(self, frame: int) -> EditorState:
        return self._apply(
            "sync_playhead", transport.sync_from_clock, frame, self._sync_threshold
        )

    def play(self) -> EditorState:
        return self._apply("play", transport.play)

    def pause(self) -> EditorState:
        return self._apply("pause", transport.pause)

    def stop(self) -> EditorState:
        return self._apply("stop", transport.stop)

    def toggle_playback(self) -> EditorState:
        return self._apply("toggle_playback", transport.toggle_playback)

    # -------------------------------------------------------------------------
    # View / audio
    # -------------------------------------------------------------------------

    def set_zoom(self, zoom: float) -> EditorState:
        return self._apply("set_zoom", timeline_ops.set_zoom, zoom)

    def set_scroll_position(self, position: float) -> EditorState:
        return self._apply("set_scroll_position", timeline_ops.set_scroll_position, position)

    def set_master_volume(self, volume: float) -> EditorState:
        return self._apply("set_master_volume", timeline_ops.set_master_volume, volume)

    def toggle_mute(self) -> EditorState:
        return self._apply("toggle_mute", timeline_ops.toggle_mute)

    def set_clip_volume(self, clip_id: str, volume: float) -> EditorState:
        return self._apply("set_clip_volume", timeline_ops.set_clip_volume, clip_id, volume)

    def toggle_clip_mute(self, clip_id: str) -> EditorState:
        return self._apply("toggle_clip_mute", timeline_ops.toggle_clip_mute, clip_id)

    # -------------------------------------------------------------------------
    # Timeline length
    # -------------------------------------------------------------------------

    def set_duration(self, duration: int) -> EditorState:
        return self._apply("set_duration", timeline_ops.set_duration, duration)

    def set_frame_rate(self, frame_rate: int) -> EditorState:
        return self._apply("set_frame_rate", timeline_ops.set_frame_rate, frame_rate)

    def extend_timeline(self, additional_seconds: float) -> EditorState:
        return self._apply("extend_timeline", timeline_ops.extend_timeline, additional_seconds)

    def shrink_timeline(self, seconds_to_remove: float) -> EditorState:
        return self._apply("shrink_timeline", timeline_ops.shrink_timeline, seconds_to_remove)

    def fit_timeline_to_content(self) -> EditorState:
        return self._apply("fit_timeline_to_content", duration_policy.fit_to_content)

    def auto_adjust_timeline(self) -> EditorState:
        return self._apply("auto_adjust_timeline", duration_policy.auto_adjust)

    def reset_state(self) -> EditorState:
        """Replace the session with a fresh snapshot using the initial settings."""
        return self._commit(
            "reset_state",
            timeline_ops.reset_state(
                frame_rate=self._initial_state.frame_rate,
                duration=self._initial_state.duration,
            ),
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_selected_item(self) -> TimelineEntry | None:
        return timeline_ops.get_selected_item(self._state)

    def get_timeline_duration(self) -> int:
        """Content extent of the current snapshot."""
        return duration_policy.content_extent(self._state)

    def get_items_at_frame(self, frame: int) -> list[TimelineItem]:
        return timeline_ops.get_items_at_frame(self._state, frame)

    def validate(self) -> list[str]:
        return validate(self._state)
