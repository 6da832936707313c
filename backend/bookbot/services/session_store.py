"""
State Store Service - Redis-backed key/value storage with in-memory fallback,
plus the scoped state bags the turn orchestrator loads and saves each turn.
"""
import copy
import json
from typing import Dict, Any, Optional
from datetime import datetime, timedelta
from abc import ABC, abstractmethod

from bookbot.core.config import settings
from bookbot.core.logging import logger


class SessionStore(ABC):
    """Abstract base class for state storage."""

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get stored data by key."""
        pass

    @abstractmethod
    def set(self, key: str, data: Dict[str, Any], ttl_hours: int = 24) -> None:
        """Store data with a TTL."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete stored data."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Check if a key exists."""
        pass


class InMemorySessionStore(SessionStore):
    """In-memory store for development and tests.

    Values are serialized on write and deserialized on read, like the Redis
    store, so callers never hold a reference to the stored copy.
    """

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._expiry: Dict[str, datetime] = {}

    def _cleanup_expired(self):
        """Remove expired entries."""
        now = datetime.utcnow()
        expired = [k for k, v in self._expiry.items() if v < now]
        for key in expired:
            self._data.pop(key, None)
            self._expiry.pop(key, None)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        self._cleanup_expired()
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, data: Dict[str, Any], ttl_hours: int = 24) -> None:
        self._data[key] = json.dumps(data, default=str)
        self._expiry[key] = datetime.utcnow() + timedelta(hours=ttl_hours)

    def delete(self, key: str) -> bool:
        if key in self._data:
            del self._data[key]
            self._expiry.pop(key, None)
            return True
        return False

    def exists(self, key: str) -> bool:
        self._cleanup_expired()
        return key in self._data


class RedisSessionStore(SessionStore):
    """Redis-backed store for production."""

    def __init__(self, redis_url: str):
        import redis
        self._redis = redis.from_url(redis_url, decode_responses=True)
        self._prefix = "bookbot:state:"

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        data = self._redis.get(self._key(key))
        if data:
            return json.loads(data)
        return None

    def set(self, key: str, data: Dict[str, Any], ttl_hours: int = 24) -> None:
        self._redis.setex(
            self._key(key),
            timedelta(hours=ttl_hours),
            json.dumps(data, default=str)
        )

    def delete(self, key: str) -> bool:
        return self._redis.delete(self._key(key)) > 0

    def exists(self, key: str) -> bool:
        return self._redis.exists(self._key(key)) > 0


class StateBag:
    """
    State loaded for one scope id during a turn.

    Properties are read with get(key, default) and written with set(); nothing
    reaches the backing store until save() is called.
    """

    def __init__(self, store: SessionStore, storage_key: str, data: Dict[str, Any], ttl_hours: int):
        self._store = store
        self._storage_key = storage_key
        self._data = data
        self._ttl_hours = ttl_hours

    def get(self, key: str, default: Any = None) -> Any:
        """Return a property, storing a copy of default when it is absent."""
        if key not in self._data:
            if default is None:
                return None
            self._data[key] = copy.deepcopy(default)
        return self._data[key]

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def save(self) -> None:
        """Write the bag to the store. Saving unchanged data is a no-op in effect."""
        self._store.set(self._storage_key, self._data, ttl_hours=self._ttl_hours)


class ScopedState:
    """Factory for state bags in one scope (user or conversation)."""

    def __init__(self, store: SessionStore, scope: str, ttl_hours: int):
        self.store = store
        self.scope = scope
        self.ttl_hours = ttl_hours

    def storage_key(self, scope_id: str) -> str:
        return f"{self.scope}:{scope_id}"

    def exists(self, scope_id: str) -> bool:
        return self.store.exists(self.storage_key(scope_id))

    def load(self, scope_id: str) -> StateBag:
        """Load the bag for scope_id, starting empty when nothing is stored."""
        key = self.storage_key(scope_id)
        data = self.store.get(key) or {}
        return StateBag(self.store, key, data, self.ttl_hours)


# Singleton store instance
_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get the store instance (creates if needed)."""
    global _session_store

    if _session_store is not None:
        return _session_store

    # Try Redis first, fall back to in-memory
    if settings.REDIS_URL and settings.APP_ENV != "development":
        try:
            _session_store = RedisSessionStore(settings.REDIS_URL)
            # Test connection
            _session_store._redis.ping()
            logger.info("Using Redis state store")
        except Exception as e:
            logger.warning(f"Failed to connect to Redis, using in-memory store: {e}")
            _session_store = InMemorySessionStore()
    else:
        logger.info("Using in-memory state store (development mode)")
        _session_store = InMemorySessionStore()

    return _session_store


def get_user_state() -> ScopedState:
    """User-scoped state, persisted across conversations with the same user."""
    return ScopedState(get_session_store(), "user", settings.USER_STATE_TTL_HOURS)


def get_conversation_state() -> ScopedState:
    """Conversation-scoped state."""
    return ScopedState(get_session_store(), "conversation", settings.CONVERSATION_STATE_TTL_HOURS)
