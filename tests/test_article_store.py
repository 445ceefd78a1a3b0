"""Tests for article storage."""

import json
import threading
from datetime import datetime, timedelta, timezone

import pytest

from ai_newsroom.storage.article_store import InMemoryArticleStore, JsonArticleStore, get_article, list_articles

from conftest import make_article

BASE = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(params=["json", "memory"])
def store(request, tmp_path):
    if request.param == "json":
        return JsonArticleStore(tmp_path / "data" / "news-store.json")
    return InMemoryArticleStore()


class TestUpsert:
    def test_upsert_twice_keeps_one_record(self, store) -> None:
        article = make_article(slug="same")
        store.upsert(article)
        store.upsert(article)

        assert [a.slug for a in store.list_all()] == ["same"]

    def test_second_upsert_wins(self, store) -> None:
        store.upsert(make_article(slug="same", content="A1 content"))
        store.upsert(make_article(slug="same", content="A2 content"))

        articles = store.list_all()
        assert len(articles) == 1
        assert articles[0].content == "A2 content"

    def test_distinct_slugs_are_appended(self, store) -> None:
        store.upsert(make_article(slug="one"))
        store.upsert(make_article(slug="two"))
        assert {a.slug for a in store.list_all()} == {"one", "two"}


class TestRead:
    def test_list_all_newest_first(self, store) -> None:
        store.upsert(make_article(slug="old", date=BASE))
        store.upsert(make_article(slug="new", date=BASE + timedelta(days=2)))
        store.upsert(make_article(slug="mid", date=BASE + timedelta(days=1)))

        assert [a.slug for a in store.list_all()] == ["new", "mid", "old"]

    def test_equal_dates_keep_storage_order(self, store) -> None:
        for slug in ["a", "b", "c"]:
            store.upsert(make_article(slug=slug, date=BASE))
        assert [a.slug for a in store.list_all()] == ["a", "b", "c"]

    def test_get_by_slug(self, store) -> None:
        store.upsert(make_article(slug="wanted", title="Wanted"))
        store.upsert(make_article(slug="other"))

        assert store.get_by_slug("wanted").title == "Wanted"
        assert store.get_by_slug("missing") is None

    def test_read_api_helpers(self, store) -> None:
        store.upsert(make_article(slug="x"))
        assert [a.slug for a in list_articles(store)] == ["x"]
        assert get_article(store, "x").slug == "x"
        assert get_article(store, "y") is None


class TestJsonArticleStore:
    def test_missing_file_reads_as_empty(self, tmp_path) -> None:
        store = JsonArticleStore(tmp_path / "nope.json")
        assert store.list_all() == []
        assert store.get_by_slug("anything") is None

    @pytest.mark.parametrize("payload", ["", "{not json", '{"an": "object"}', '[{"slug": "no-title"}]'])
    def test_corrupt_file_reads_as_empty(self, tmp_path, payload) -> None:
        path = tmp_path / "news-store.json"
        path.write_text(payload)
        assert JsonArticleStore(path).list_all() == []

    def test_upsert_replaces_unparseable_file(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        path.write_text("garbage")
        store = JsonArticleStore(path)

        store.upsert(make_article(slug="fresh"))

        assert [a.slug for a in store.list_all()] == ["fresh"]

    def test_persists_camel_case_records(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        JsonArticleStore(path).upsert(
            make_article(slug="s", image_url="https://img.example/x.png", source_url="https://src.example")
        )

        records = json.loads(path.read_text())
        assert isinstance(records, list)
        assert records[0]["imageUrl"] == "https://img.example/x.png"
        assert records[0]["sourceUrl"] == "https://src.example"
        assert records[0]["date"].startswith("2025-01-01T12:00:00")

    def test_reads_existing_camel_case_store(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        path.write_text(json.dumps([{
            "id": "0b9f8e2c-3c1e-4a57-9c39-2a8f1b9d6a11",
            "title": "Legacy",
            "slug": "legacy",
            "excerpt": "",
            "content": "Old body",
            "author": "AI Research Agent",
            "date": "2024-12-01T08:00:00.000Z",
            "tags": ["AI"],
            "imageUrl": "https://img.example/legacy.png",
        }]))

        article = JsonArticleStore(path).get_by_slug("legacy")

        assert article.image_url == "https://img.example/legacy.png"
        assert article.source_url is None

    def test_survives_reopen(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        JsonArticleStore(path).upsert(make_article(slug="kept", content="Persisted"))
        assert JsonArticleStore(path).get_by_slug("kept").content == "Persisted"

    def test_leaves_no_temp_files(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        store = JsonArticleStore(path)
        store.upsert(make_article(slug="a"))
        store.upsert(make_article(slug="b"))

        assert [p.name for p in tmp_path.iterdir()] == ["news-store.json"]


class TestInvalidRecords:
    @pytest.fixture
    def mixed_store(self, tmp_path):
        path = tmp_path / "news-store.json"
        good = [make_article(slug=s).model_dump(mode="json", by_alias=True) for s in ["a", "b", "c"]]
        bad = dict(good[0], slug="bad", tags=["AI", None])
        path.write_text(json.dumps(good + [bad]))
        return path

    def test_invalid_record_is_hidden_from_readers(self, mixed_store) -> None:
        store = JsonArticleStore(mixed_store)

        assert {a.slug for a in store.list_all()} == {"a", "b", "c"}
        assert store.get_by_slug("bad") is None

    def test_upsert_keeps_existing_records(self, mixed_store) -> None:
        JsonArticleStore(mixed_store).upsert(make_article(slug="new"))

        assert {a.slug for a in JsonArticleStore(mixed_store).list_all()} == {"a", "b", "c", "new"}
        records = json.loads(mixed_store.read_text())
        assert [r["slug"] for r in records] == ["a", "b", "c", "bad", "new"]
        assert records[3]["tags"] == ["AI", None]

    def test_upsert_replaces_invalid_record_with_same_slug(self, mixed_store) -> None:
        JsonArticleStore(mixed_store).upsert(make_article(slug="bad", title="Repaired"))

        records = json.loads(mixed_store.read_text())
        assert [r["slug"] for r in records] == ["a", "b", "c", "bad"]
        assert JsonArticleStore(mixed_store).get_by_slug("bad").title == "Repaired"

    def test_upsert_raises_when_store_cannot_be_read(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        path.mkdir()
        store = JsonArticleStore(path)

        assert store.list_all() == []
        with pytest.raises(OSError):
            store.upsert(make_article(slug="x"))
        assert path.is_dir()


class TestConcurrentUpserts:
    def test_stores_on_one_path_share_a_lock(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        assert JsonArticleStore(path)._lock is JsonArticleStore(str(path))._lock

    def test_parallel_upserts_keep_every_slug(self, tmp_path) -> None:
        path = tmp_path / "news-store.json"
        errors = []

        def worker(n: int) -> None:
            store = JsonArticleStore(path)
            try:
                for i in range(10):
                    store.upsert(make_article(slug=f"w{n}-{i}"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        records = json.loads(path.read_text())
        assert len(records) == 80
        assert {a.slug for a in JsonArticleStore(path).list_all()} == {
            f"w{n}-{i}" for n in range(8) for i in range(10)
        }
        assert [p.name for p in tmp_path.iterdir()] == ["news-store.json"]
