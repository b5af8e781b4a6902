import json
import logging
import time
from asyncio import Lock
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict, Tuple
from uuid import UUID

from redis.asyncio import Redis
from redis.exceptions import RedisError

from minigames.converter import DataConverter
from minigames.domain.errors import ContentStoreError, SessionNotFoundError
from minigames.domain.win_or_lose_quiz import SessionState

data_converter = DataConverter()


class SessionRegistry:
    """Keyed store for live quiz sessions.

    Every session is bound to the game it was started on. Entries are replaced
    wholesale on every answer; callers never mutate a stored SessionState in
    place. A read-modify-write of one session must run inside `locked`.
    """

    def locked(self, session_id: str):
        raise NotImplementedError

    async def put(self, session_id: str, game_id: UUID, state: SessionState) -> None:
        raise NotImplementedError

    async def get(self, session_id: str, game_id: UUID | None = None) -> SessionState:
        raise NotImplementedError

    async def delete(self, session_id: str) -> None:
        raise NotImplementedError

    async def sweep_expired(self) -> int:
        raise NotImplementedError


class InMemorySessionRegistry(SessionRegistry):
    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        # session_id -> (game_id, state, last activity)
        self.sessions: Dict[str, Tuple[UUID, SessionState, float]] = {}
        self.session_locks: Dict[str, Lock] = {}  # session_id -> Lock held across an answer
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.lock = Lock()  # protects sessions and session_locks

    @asynccontextmanager
    async def locked(self, session_id: str) -> AsyncIterator[None]:
        """Hold the lock of one session

        Args:
            session_id (str): ID to identify this session
        """
        async with self.lock:
            if session_id not in self.session_locks:
                self.session_locks[session_id] = Lock()
            session_lock = self.session_locks[session_id]
        async with session_lock:
            yield

    async def put(self, session_id: str, game_id: UUID, state: SessionState) -> None:
        """Store or replace the state of a session

        Args:
            session_id (str): ID to identify this session
            game_id (UUID): Game the session was started on
            state (SessionState): New state of the session
        """
        async with self.lock:
            self.sessions[session_id] = (game_id, state, self.clock())

    async def get(self, session_id: str, game_id: UUID | None = None) -> SessionState:
        """Get the state of a session and refresh its last activity

        Args:
            session_id (str): ID to identify this session
            game_id (UUID | None): When given, the session must belong to this game

        Raises:
            SessionNotFoundError: The session never existed, finished, expired or belongs to another game

        Returns:
            SessionState: Current state of the session
        """
        async with self.lock:
            if session_id not in self.sessions:
                raise SessionNotFoundError(session_id)
            session_game_id, state, _ = self.sessions[session_id]
            if game_id is not None and session_game_id != game_id:
                raise SessionNotFoundError(session_id)
            self.sessions[session_id] = (session_game_id, state, self.clock())
            return state

    async def delete(self, session_id: str) -> None:
        async with self.lock:
            self.sessions.pop(session_id, None)
            self.session_locks.pop(session_id, None)

    async def sweep_expired(self) -> int:
        """Delete sessions idle for longer than the TTL

        Returns:
            int: Number of deleted sessions
        """
        now = self.clock()
        async with self.lock:
            expired = [
                session_id
                for session_id, (_, _, last_activity) in self.sessions.items()
                if now - last_activity > self.ttl_seconds
            ]
            for session_id in expired:
                del self.sessions[session_id]
                session_lock = self.session_locks.get(session_id)
                if session_lock is not None and not session_lock.locked():
                    del self.session_locks[session_id]
        if expired:
            logging.info(f"Swept {len(expired)} idle quiz sessions")
        return len(expired)


class RedisSessionRegistry(SessionRegistry):
    """Session store shared between workers. Redis expires idle keys by itself."""

    KEY_PREFIX = "win-or-lose-quiz:session:"
    LOCK_TIMEOUT_SECONDS = 10
    LOCK_WAIT_SECONDS = 5

    def __init__(self, redis: Redis, ttl_seconds: int):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    @asynccontextmanager
    async def locked(self, session_id: str) -> AsyncIterator[None]:
        """Hold a lock on one session that every worker sharing this Redis honours

        Raises:
            ContentStoreError: The lock could not be taken or Redis is unreachable
        """
        lock = self.redis.lock(
            f"{self._key(session_id)}:lock",
            timeout=self.LOCK_TIMEOUT_SECONDS,
            blocking_timeout=self.LOCK_WAIT_SECONDS,
        )
        # Registry calls inside the block convert their own RedisErrors.
        try:
            async with lock:
                yield
        except RedisError as e:
            logging.error(f"Failed to lock session {session_id}: {e}")
            raise ContentStoreError() from e

    async def put(self, session_id: str, game_id: UUID, state: SessionState) -> None:
        payload = json.dumps(
            {
                "game_id": str(game_id),
                "state": data_converter.convert_session_state_to_dict(state),
            }
        )
        try:
            await self.redis.set(self._key(session_id), payload, ex=self.ttl_seconds)
        except RedisError as e:
            logging.error(f"Failed to store session {session_id}: {e}")
            raise ContentStoreError() from e

    async def get(self, session_id: str, game_id: UUID | None = None) -> SessionState:
        try:
            payload = await self.redis.get(self._key(session_id))
            if payload is not None:
                await self.redis.expire(self._key(session_id), self.ttl_seconds)
        except RedisError as e:
            logging.error(f"Failed to read session {session_id}: {e}")
            raise ContentStoreError() from e

        if payload is None:
            raise SessionNotFoundError(session_id)
        data = json.loads(payload)
        if game_id is not None and UUID(data["game_id"]) != game_id:
            raise SessionNotFoundError(session_id)
        return data_converter.convert_dict_to_session_state(data["state"])

    async def delete(self, session_id: str) -> None:
        try:
            await self.redis.delete(self._key(session_id))
        except RedisError as e:
            logging.error(f"Failed to delete session {session_id}: {e}")
            raise ContentStoreError() from e

    async def sweep_expired(self) -> int:
        return 0
