"""Registry of live capture sessions."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from capture_narrator.services.capture import CapturePipeline
from capture_narrator.services.notifications import EventBuffer

logger = logging.getLogger(__name__)


@dataclass
class CaptureSessionHandle:
    """A mounted pipeline, its owner and its pending UI events."""

    id: UUID
    owner_id: UUID
    pipeline: CapturePipeline
    events: EventBuffer
    last_seen: float = 0.0


@dataclass
class CaptureSessionRegistry:
    """In-memory map of mounted capture sessions.

    Sessions untouched for ``idle_ttl_seconds`` are torn down on the next
    ``register`` or ``get``, so a client that goes away without closing its
    session does not hold the camera forever. A session in the middle of a
    submit is never expired.
    """

    idle_ttl_seconds: float = 900
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _handles: dict[UUID, CaptureSessionHandle] = field(
        default_factory=dict, init=False, repr=False
    )

    def register(
        self, pipeline: CapturePipeline, events: EventBuffer
    ) -> CaptureSessionHandle:
        self._expire_idle()
        handle = CaptureSessionHandle(
            id=uuid4(),
            owner_id=pipeline.session.user.id,
            pipeline=pipeline,
            events=events,
            last_seen=self.clock(),
        )
        self._handles[handle.id] = handle
        return handle

    def get(self, session_id: UUID, owner_id: UUID) -> CaptureSessionHandle | None:
        """Return the session when it exists and belongs to the owner."""
        self._expire_idle()
        handle = self._handles.get(session_id)
        if handle is None or handle.owner_id != owner_id:
            return None
        handle.last_seen = self.clock()
        return handle

    def close(self, session_id: UUID, owner_id: UUID) -> bool:
        """Tear down and forget a session."""
        handle = self.get(session_id, owner_id)
        if handle is None:
            return False
        self._handles.pop(session_id, None)
        handle.pipeline.teardown()
        return True

    def close_all(self) -> None:
        """Tear down every session, releasing all cameras."""
        handles, self._handles = list(self._handles.values()), {}
        for handle in handles:
            self._teardown(handle)

    def _expire_idle(self) -> None:
        deadline = self.clock() - self.idle_ttl_seconds
        expired = [
            handle
            for handle in self._handles.values()
            if handle.last_seen <= deadline and not handle.pipeline.state.is_busy
        ]
        for handle in expired:
            del self._handles[handle.id]
            logger.info("Expiring idle capture session", extra={"id": str(handle.id)})
            self._teardown(handle)

    def _teardown(self, handle: CaptureSessionHandle) -> None:
        try:
            handle.pipeline.teardown()
        except Exception:
            logger.exception(
                "Failed to release capture session", extra={"id": str(handle.id)}
            )

    def __len__(self) -> int:
        return len(self._handles)
