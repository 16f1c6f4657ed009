import time
import uuid
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from flask import current_app, session


@dataclass
class StreamResource:
    """An in-memory document served once registered."""
    name: str
    data: bytes
    content_type: str = 'application/octet-stream'
    created_at: float = field(default_factory=time.time)


class ResourceRegistry:
    """Per-session registry of downloadable resources with a TTL.

    Each owner (browser session) keeps at most ``max_per_owner`` live
    registrations, so several open settings tabs each keep a working link.
    Registering beyond the limit releases that owner's oldest resource.
    """
    def __init__(self, ttl_seconds: int = 600, max_per_owner: int = 5):
        self.ttl_seconds = max(1, int(ttl_seconds))
        self.max_per_owner = max(1, int(max_per_owner))
        self._resources: Dict[str, tuple] = {}
        self._owners: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    def register(self, resource: StreamResource, owner: str) -> str:
        token = uuid.uuid4().hex
        exp = time.time() + self.ttl_seconds
        with self._lock:
            self._purge_expired()
            tokens = self._owners.setdefault(owner, [])
            while len(tokens) >= self.max_per_owner:
                self._drop(tokens[0])
            self._resources[token] = (resource, exp, owner)
            self._owners.setdefault(owner, []).append(token)
        return token

    def get(self, token: str) -> Optional[StreamResource]:
        now = time.time()
        with self._lock:
            item = self._resources.get(token)
            if not item:
                return None
            resource, exp, owner = item
            if exp < now:
                self._drop(token)
                return None
            return resource

    def release(self, token: str) -> None:
        with self._lock:
            self._drop(token)

    def release_owner(self, owner: str) -> None:
        """Release every resource registered by ``owner``."""
        with self._lock:
            for token in list(self._owners.get(owner, ())):
                self._drop(token)

    def clear(self) -> None:
        with self._lock:
            self._resources.clear()
            self._owners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources)

    def _drop(self, token: str) -> None:
        item = self._resources.pop(token, None)
        if not item:
            return
        owner = item[2]
        tokens = self._owners.get(owner)
        if tokens and token in tokens:
            tokens.remove(token)
            if not tokens:
                self._owners.pop(owner, None)

    def _purge_expired(self) -> None:
        now = time.time()
        for token in [t for t, (_, exp, _) in self._resources.items() if exp < now]:
            self._drop(token)


def get_resource_registry() -> ResourceRegistry:
    """Registry bound to the current app."""
    state = current_app.extensions.setdefault('book_project', {})
    if 'resource_registry' not in state:
        state['resource_registry'] = ResourceRegistry(
            current_app.config.get('EXPORT_RESOURCE_TTL_SECONDS', 600),
            current_app.config.get('EXPORT_RESOURCES_PER_SESSION', 5),
        )
    return state['resource_registry']


def current_resource_owner() -> str:
    """Stable per-session owner key for registered resources."""
    owner = session.get('resource_owner')
    if not owner:
        owner = uuid.uuid4().hex
        session['resource_owner'] = owner
    return owner
