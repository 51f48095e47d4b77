import pytest

from core.domain.errors import BackendUnavailable
from core.domain.models import ContentTypeDescriptor
from core.services.content_types import ContentTypeCache, ContentTypeDirectory


class _Source:
    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error
        self.calls = 0

    async def fetch_content_types(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.items


class _Clock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


async def test_internal_namespaces_are_filtered(content_types_payload):
    directory = ContentTypeDirectory(_Source(content_types_payload["data"]))

    content_types = await directory.list_content_types()

    assert [ct.uid for ct in content_types] == ["api::article.article", "api::category.category"]
    assert content_types[0].display_name == "Article"
    assert content_types[0].collection_name == "articles"


async def test_second_call_returns_same_object_without_fetch(content_types_payload):
    source = _Source(content_types_payload["data"])
    directory = ContentTypeDirectory(source)

    first = await directory.list_content_types()
    second = await directory.list_content_types()

    assert second is first
    assert source.calls == 1


async def test_fetch_failure_is_backend_unavailable_and_not_cached():
    source = _Source(error=BackendUnavailable("GET /api/content-types failed: boom"))
    directory = ContentTypeDirectory(source)

    with pytest.raises(BackendUnavailable, match="boom"):
        await directory.list_content_types()

    assert directory.cache.get() is None
    with pytest.raises(BackendUnavailable):
        await directory.list_content_types()
    assert source.calls == 2


async def test_malformed_descriptor_is_backend_unavailable():
    directory = ContentTypeDirectory(_Source([{"info": {"displayName": "No uid"}}]))

    with pytest.raises(BackendUnavailable):
        await directory.list_content_types()


async def test_invalidate_forces_refetch_and_bumps_version(content_types_payload):
    source = _Source(content_types_payload["data"])
    cache = ContentTypeCache()
    directory = ContentTypeDirectory(source, cache)

    await directory.list_content_types()
    assert cache.version == 1

    cache.invalidate()
    await directory.list_content_types()

    assert source.calls == 2
    assert cache.version == 3


async def test_ttl_uses_injected_clock(content_types_payload):
    clock = _Clock()
    source = _Source(content_types_payload["data"])
    directory = ContentTypeDirectory(source, ContentTypeCache(ttl_seconds=60, clock=clock))

    await directory.list_content_types()
    clock.now += 59
    await directory.list_content_types()
    assert source.calls == 1

    clock.now += 1
    await directory.list_content_types()
    assert source.calls == 2


def test_descriptor_accepts_builder_schema_shape():
    raw = {
        "uid": "api::article.article",
        "schema": {
            "collectionName": "articles",
            "displayName": "Article",
            "description": "From the builder",
        },
    }

    descriptor = ContentTypeDescriptor.from_backend(raw)

    assert descriptor.collection_name == "articles"
    assert descriptor.display_name == "Article"
    assert descriptor.summary() == {
        "uid": "api::article.article",
        "displayName": "Article",
        "description": "From the builder",
    }
