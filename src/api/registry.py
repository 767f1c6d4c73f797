"""API-key registry: key -> calling agent identity.

Injected into the app so the in-memory store can be swapped for a
persistent one. Append-only; keys are never revoked here.
"""

from __future__ import annotations

import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol

import structlog

from config.settings import settings

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class AgentIdentity:
    id: str
    name: str
    owner: str
    created_at: float = field(default_factory=time.time)


class KeyRegistry(Protocol):
    def register(self, name: str, owner: str) -> tuple[str, AgentIdentity]: ...

    def lookup(self, api_key: str) -> Optional[AgentIdentity]: ...


class InMemoryKeyRegistry:
    """Dict-backed registry. Writes lock; reads are plain dict lookups."""

    def __init__(self, prefix: Optional[str] = None):
        self.prefix = prefix if prefix is not None else settings.API_KEY_PREFIX
        self._keys: dict[str, AgentIdentity] = {}
        self._lock = threading.Lock()

    def _new_key(self) -> str:
        return f"{self.prefix}{secrets.token_urlsafe(18)}"  # 24 chars

    def register(self, name: str, owner: str) -> tuple[str, AgentIdentity]:
        identity = AgentIdentity(id=secrets.token_hex(4), name=name, owner=owner)
        with self._lock:
            api_key = self._new_key()
            while api_key in self._keys:
                api_key = self._new_key()
            self._keys[api_key] = identity
        logger.info("agent_registered", agent_id=identity.id, name=name, owner=owner)
        return api_key, identity

    def lookup(self, api_key: str) -> Optional[AgentIdentity]:
        if not api_key:
            return None
        return self._keys.get(api_key)

    def __len__(self) -> int:
        return len(self._keys)
