"""
Editor Sessions - host-side ownership of editor stores.

The engine keeps no global state; the host application creates one
EditorStore per editing session and looks it up by session id.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from uuid import uuid4

from models.editor_models import DEFAULT_DURATION_FRAMES, DEFAULT_FRAME_RATE
from operators import timeline_ops
from operators.editor_store import EditorStore
from operators.transport import DEFAULT_SYNC_THRESHOLD_FRAMES


logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class EditorError(Exception):
    """Base exception for editor session operations."""
    pass


class SessionNotFoundError(EditorError):
    """Raised when no store exists for a session id."""
    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Editor session not found: {session_id}")


class SessionLimitError(EditorError):
    """Raised when the registry is full."""
    def __init__(self, max_sessions: int):
        self.max_sessions = max_sessions
        super().__init__(
            f"Too many open editor sessions (limit {max_sessions}). "
            f"Close a session and retry."
        )


# =============================================================================
# CONFIG
# =============================================================================


@dataclass
class EditorConfig:
    default_frame_rate: int = DEFAULT_FRAME_RATE
    default_duration_frames: int = DEFAULT_DURATION_FRAMES
    sync_threshold_frames: int = DEFAULT_SYNC_THRESHOLD_FRAMES
    max_sessions: int = 100

    @classmethod
    def from_env(cls) -> EditorConfig:
        return cls(
            default_frame_rate=int(os.getenv("EDITOR_DEFAULT_FRAME_RATE", str(DEFAULT_FRAME_RATE))),
            default_duration_frames=int(
                os.getenv("EDITOR_DEFAULT_DURATION_FRAMES", str(DEFAULT_DURATION_FRAMES))
            ),
            sync_threshold_frames=int(
                os.getenv("EDITOR_SYNC_THRESHOLD_FRAMES", str(DEFAULT_SYNC_THRESHOLD_FRAMES))
            ),
            max_sessions=int(os.getenv("EDITOR_MAX_SESSIONS", "100")),
        )


# =============================================================================
# REGISTRY
# =============================================================================


class EditorSessionRegistry:
    def __init__(self, config: EditorConfig | None = None):
        self.config = config or EditorConfig()
        self._stores: dict[str, EditorStore] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        frame_rate: int | None = None,
        duration: int | None = None,
    ) -> tuple[str, EditorStore]:
        initial_state = timeline_ops.reset_state(
            frame_rate=frame_rate or self.config.default_frame_rate,
            duration=self.config.default_duration_frames if duration is None else duration,
        )
        store = EditorStore(
            initial_state=initial_state,
            sync_threshold=self.config.sync_threshold_frames,
        )
        session_id = uuid4().hex

        with self._lock:
            if self.config.max_sessions and len(self._stores) >= self.config.max_sessions:
                raise SessionLimitError(self.config.max_sessions)
            self._stores[session_id] = store

        logger.info(
            "editor_session_created session_id=%s frame_rate=%d duration=%d",
            session_id,
            initial_state.frame_rate,
            initial_state.duration,
        )
        return session_id, store

    def get_store(self, session_id: str) -> EditorStore:
        with self._lock:
            store = self._stores.get(session_id)
        if store is None:
            raise SessionNotFoundError(session_id)
        return store

    def close_session(self, session_id: str) -> None:
        with self._lock:
            if self._stores.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
        logger.info("editor_session_closed session_id=%s", session_id)

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._stores)

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)
