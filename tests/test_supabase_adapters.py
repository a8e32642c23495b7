"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field

import pytest
from postgrest.exceptions import APIError

from artbot.adapters.supabase_blob_storage import SupabaseBlobStorage
from artbot.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from artbot.adapters.supabase_state_store import SupabaseStateStore
from artbot.errors import StorageError, StoreQueryError


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None
    count: int | None = None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[FakeResponse]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_select: tuple[object, ...] = ()
    last_count: str | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_on_conflict: str | None = None
    error: APIError | None = None

    def queue(self, action: str, data: list[dict[str, object]], count=None) -> None:  # type: ignore[no-untyped-def]
        self.response_queue[action].append(FakeResponse(data=data, count=count))

    def select(self, *args, count=None) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "select"
        self.last_select = args
        self.last_count = count
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        return queue.pop(0) if queue else FakeResponse(data=[])


@dataclass
class FakeBucket:
    objects: dict[str, bytes] = field(default_factory=dict)
    options: dict[str, object] = field(default_factory=dict)
    fail: bool = False

    def upload(self, path: str, file: bytes, file_options=None):  # type: ignore[no-untyped-def]
        if self.fail:
            raise RuntimeError("bucket is full")
        self.objects[path] = file
        self.options = dict(file_options or {})
        return {"Key": path}

    def get_public_url(self, path: str) -> str:
        return f"https://example.supabase.co/storage/v1/object/public/paintings/{path}?"


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucket] = field(default_factory=dict)

    def from_(self, bucket: str) -> FakeBucket:
        if bucket not in self.buckets:
            self.buckets[bucket] = FakeBucket()
        return self.buckets[bucket]


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _api_error() -> APIError:
    return APIError({"message": "boom", "code": "500", "hint": "", "details": ""})


def test_catalog_count_uses_filters() -> None:
    client = FakeSupabaseClient()
    table = client.table("paintings")
    table.queue("select", [{"paintid": 5}, {"paintid": 5}], count=2)

    repository = SupabaseCatalogRepository(client)
    count = repository.count_tag_matches(5, ["sky", "tree's"])

    assert count == 2
    assert table.last_count == "exact"
    assert table.last_filters == [("paintid", 5), ("tag", ["sky", "tree's"])]


def test_catalog_count_falls_back_to_rows() -> None:
    client = FakeSupabaseClient()
    client.table("paintings").queue("select", [{"paintid": 5}])

    assert SupabaseCatalogRepository(client).count_tag_matches(5, ["sky"]) == 1


def test_catalog_list_tag_matches() -> None:
    client = FakeSupabaseClient()
    client.table("paintings").queue(
        "select", [{"paintid": 5}, {"paintid": "3"}, {"paintid": 5}]
    )

    assert SupabaseCatalogRepository(client).list_tag_matches(["sky"]) == [5, 3, 5]


def test_catalog_get_record_collects_tags() -> None:
    client = FakeSupabaseClient()
    row = {
        "paintid": 5,
        "title": "The Starry Night",
        "author": "Vincent van Gogh",
        "year": 1889,
        "style": "Post-Impressionism",
        "technique": "Oil on canvas",
        "url": "https://img.example/starry-night.jpg",
    }
    client.table("paintings").queue(
        "select", [{**row, "tag": "sky"}, {**row, "tag": "night"}]
    )

    record = SupabaseCatalogRepository(client).get_record(5)

    assert record is not None
    assert record.paintid == 5
    assert record.year == "1889"
    assert record.tags == ("sky", "night")


def test_catalog_get_record_missing() -> None:
    assert SupabaseCatalogRepository(FakeSupabaseClient()).get_record(99) is None


def test_catalog_errors_are_wrapped() -> None:
    client = FakeSupabaseClient()
    client.table("paintings").error = _api_error()
    repository = SupabaseCatalogRepository(client)

    with pytest.raises(StoreQueryError):
        repository.count_tag_matches(1, ["sky"])
    with pytest.raises(StoreQueryError):
        repository.get_record(1)


def test_state_store_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("bot_state")
    table.queue("select", [{"document": {"language": "fr"}}])

    store = SupabaseStateStore(client)
    store.save("webchat/users/user-1", {"language": "fr"})
    loaded = store.load("webchat/users/user-1")

    assert loaded == {"language": "fr"}
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["key"] == "webchat/users/user-1"
    assert table.last_payload["document"] == {"language": "fr"}
    assert "updated_at" in table.last_payload
    assert table.last_on_conflict == "key"


def test_state_store_missing_document() -> None:
    assert SupabaseStateStore(FakeSupabaseClient()).load("missing") is None


def test_state_store_errors_are_wrapped() -> None:
    client = FakeSupabaseClient()
    client.table("bot_state").error = _api_error()
    store = SupabaseStateStore(client)

    with pytest.raises(StoreQueryError):
        store.load("webchat/users/user-1")
    with pytest.raises(StoreQueryError):
        store.save("webchat/users/user-1", {"language": "en"})


def test_blob_storage_uploads_and_returns_public_url() -> None:
    client = FakeSupabaseClient()
    storage = SupabaseBlobStorage(client)

    url = storage.upload("paintings1.jpg", b"bytes", "image/jpeg")

    bucket = client.storage.buckets["paintings"]
    assert bucket.objects == {"paintings1.jpg": b"bytes"}
    assert bucket.options == {"content-type": "image/jpeg"}
    assert url == (
        "https://example.supabase.co/storage/v1/object/public/paintings/paintings1.jpg"
    )


def test_blob_storage_errors_are_wrapped() -> None:
    client = FakeSupabaseClient()
    client.storage.from_("paintings").fail = True

    with pytest.raises(StorageError):
        SupabaseBlobStorage(client).upload("paintings1.jpg", b"bytes", "image/jpeg")
