"""Short-lived cache of resolved sign-in sessions."""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from capture_narrator.domain.models import CurrentSession


class SessionCache(Protocol):
    """Token-keyed store of sessions the identity provider already vouched for."""

    def get(self, access_token: str) -> CurrentSession | None:
        """Return the live session for a token, if cached."""

    def put(self, session: CurrentSession) -> None:
        """Remember a session under its access token."""

    def forget(self, access_token: str) -> None:
        """Drop a token, e.g. on sign-out."""


@dataclass
class InMemorySessionCache(SessionCache):
    """Process-local LRU of sessions with a fixed time-to-live.

    A hit returns the same ``CurrentSession`` object, so preference updates
    made through one request are visible to the next.
    """

    ttl_seconds: float = 300
    max_entries: int = 1024
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    _entries: OrderedDict[str, tuple[float, CurrentSession]] = field(
        default_factory=OrderedDict, init=False, repr=False
    )

    def get(self, access_token: str) -> CurrentSession | None:
        entry = self._entries.get(access_token)
        if entry is None:
            return None
        expires_at, session = entry
        if self.clock() >= expires_at:
            del self._entries[access_token]
            return None
        self._entries.move_to_end(access_token)
        return session

    def put(self, session: CurrentSession) -> None:
        self._entries[session.access_token] = (
            self.clock() + self.ttl_seconds,
            session,
        )
        self._entries.move_to_end(session.access_token)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def forget(self, access_token: str) -> None:
        self._entries.pop(access_token, None)

    def __len__(self) -> int:
        return len(self._entries)
