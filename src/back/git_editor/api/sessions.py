"""Server-side sessions binding an opaque id to an upstream access token.

The browser only ever holds the session id. The access token stays in
the store and is handed to the upstream client per request.

This module provides:
  1. ``UserProfile`` / ``Session`` -- immutable records handed to callers.
  2. ``SessionStore`` -- abstract storage interface.
  3. ``InMemorySessionStore`` -- process-local store with sliding expiry.
  4. ``SessionSweeper`` -- background task evicting idle sessions.
"""

from __future__ import annotations

import asyncio
import secrets
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from ..observability import get_logger, redact
from ..observability.metrics import SESSIONS_ACTIVE, SESSIONS_EVICTED_TOTAL

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class UserProfile:
    """Snapshot of the upstream user taken at login. Never refreshed."""

    id: int
    login: str
    name: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    bio: str | None = None
    public_repos: int = 0
    total_private_repos: int = 0

    @classmethod
    def from_upstream(cls, data: dict[str, Any]) -> UserProfile:
        return cls(
            id=data['id'],
            login=data['login'],
            name=data.get('name'),
            avatar_url=data.get('avatar_url'),
            html_url=data.get('html_url'),
            bio=data.get('bio'),
            public_repos=data.get('public_repos') or 0,
            total_private_repos=data.get('total_private_repos') or 0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'login': self.login,
            'name': self.name,
            'avatar_url': self.avatar_url,
            'html_url': self.html_url,
            'bio': self.bio,
            'public_repos': self.public_repos,
            'total_private_repos': self.total_private_repos,
        }


@dataclass(frozen=True, slots=True)
class Session:
    """One authenticated browser client.

    Attributes:
        id: Opaque random identifier, the only thing the browser holds.
        user: Profile snapshot captured at login.
        access_token: Upstream credential. Excluded from repr; never
            serialized into a response.
        created_at: Login time.
        last_accessed_at: Last successful lookup (sliding expiry).
    """

    id: str
    user: UserProfile
    access_token: str = field(repr=False)
    created_at: datetime
    last_accessed_at: datetime


def generate_session_id() -> str:
    """Unpredictable session identifier (256 bits from the OS CSPRNG)."""
    return secrets.token_urlsafe(32)


class SessionStore(ABC):
    """Abstract session storage interface.

    The default InMemorySessionStore works for single-process
    deployments. A persistent implementation can be swapped in through
    ``create_app(session_store=...)``.
    """

    @abstractmethod
    async def create(self, user: UserProfile, access_token: str) -> str:
        """Store a new session and return its id."""
        ...

    @abstractmethod
    async def get(self, session_id: str) -> Session | None:
        """Look up a session, refreshing its last-access time on hit."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        ...

    @abstractmethod
    async def evict_expired(self, max_age: timedelta) -> list[str]:
        """Remove sessions idle for longer than max_age. Returns evicted ids."""
        ...

    @abstractmethod
    async def count(self) -> int:
        """Number of live sessions."""
        ...


class InMemorySessionStore(SessionStore):
    """In-memory session store.

    WARNING: Does not persist across restarts or work with multiple
    workers; a restart logs every browser out.

    The lock is never held across an ``await``, so it is safe both on
    the event loop and from worker threads.

    Args:
        clock: Source of the current time (injectable for tests).
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or _utcnow
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    async def create(self, user: UserProfile, access_token: str) -> str:
        if not access_token:
            raise ValueError('access_token is required')
        now = self._clock()
        with self._lock:
            session_id = generate_session_id()
            while session_id in self._sessions:
                session_id = generate_session_id()
            self._sessions[session_id] = Session(
                id=session_id,
                user=user,
                access_token=access_token,
                created_at=now,
                last_accessed_at=now,
            )
            SESSIONS_ACTIVE.set(len(self._sessions))
        logger.info('session_created', session=redact(session_id), login=user.login)
        return session_id

    async def get(self, session_id: str) -> Session | None:
        if not session_id:
            return None
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if now > session.last_accessed_at:
                session = replace(session, last_accessed_at=now)
                self._sessions[session_id] = session
            return session

    async def delete(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
            SESSIONS_ACTIVE.set(len(self._sessions))
        if removed is not None:
            logger.info('session_deleted', session=redact(session_id), login=removed.user.login)
        return removed is not None

    async def evict_expired(self, max_age: timedelta) -> list[str]:
        cutoff = self._clock() - max_age
        with self._lock:
            expired = [
                sid for sid, s in self._sessions.items()
                if s.last_accessed_at < cutoff
            ]
            for sid in expired:
                del self._sessions[sid]
            SESSIONS_ACTIVE.set(len(self._sessions))
        if expired:
            SESSIONS_EVICTED_TOTAL.inc(len(expired))
        return expired

    async def count(self) -> int:
        with self._lock:
            return len(self._sessions)


class SessionSweeper:
    """Periodically evicts idle sessions from a store.

    Bounds memory under a login-heavy, logout-rare workload. Started and
    stopped by the application lifespan.

    Args:
        store: Store to sweep.
        max_age: Idle time after which a session is evicted.
        interval_seconds: Delay between sweeps.
    """

    def __init__(
        self,
        store: SessionStore,
        max_age: timedelta,
        interval_seconds: float,
    ) -> None:
        self.store = store
        self.max_age = max_age
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> list[str]:
        evicted = await self.store.evict_expired(self.max_age)
        if evicted:
            logger.info(
                'sessions_evicted',
                count=len(evicted),
                max_age_seconds=self.max_age.total_seconds(),
            )
        return evicted

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.sweep_once()
            except Exception:
                logger.exception('session_sweep_failed')

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name='session-sweeper')

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
