"""Tests for the per-session download resource registry."""
from app.utils.resource_registry import ResourceRegistry, StreamResource


def _resource(data=b'[]'):
    return StreamResource(name='bookExport.json', data=data, content_type='application/json')


def test_register_and_get():
    registry = ResourceRegistry(ttl_seconds=60)
    token = registry.register(_resource(b'[1]'), owner='session-a')

    assert registry.get(token).data == b'[1]'
    assert registry.get('unknown') is None


def test_each_owner_keeps_several_live_resources():
    registry = ResourceRegistry(ttl_seconds=60)
    first = registry.register(_resource(), owner='session-a')
    other = registry.register(_resource(), owner='session-b')
    second = registry.register(_resource(), owner='session-a')

    assert registry.get(first) is not None
    assert registry.get(second) is not None
    assert registry.get(other) is not None
    assert len(registry) == 3


def test_oldest_resource_released_past_owner_limit():
    registry = ResourceRegistry(ttl_seconds=60, max_per_owner=2)
    other = registry.register(_resource(), owner='session-b')
    tokens = [registry.register(_resource(), owner='session-a') for _ in range(3)]

    assert registry.get(tokens[0]) is None
    assert registry.get(tokens[1]) is not None
    assert registry.get(tokens[2]) is not None
    assert registry.get(other) is not None
    assert len(registry) == 3


def test_resources_expire(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr('app.utils.resource_registry.time.time', lambda: now[0])
    registry = ResourceRegistry(ttl_seconds=10)
    token = registry.register(_resource(), owner='session-a')

    now[0] += 5
    assert registry.get(token) is not None
    now[0] += 6
    assert registry.get(token) is None
    assert len(registry) == 0


def test_release_owner_and_clear():
    registry = ResourceRegistry()
    tokens = [registry.register(_resource(), owner='session-a') for _ in range(2)]
    registry.release_owner('session-a')
    assert all(registry.get(token) is None for token in tokens)

    registry.register(_resource(), owner='session-b')
    registry.clear()
    assert len(registry) == 0
