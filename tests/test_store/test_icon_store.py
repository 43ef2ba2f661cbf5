"""Tests for the JSONL icon store."""

from __future__ import annotations

import pytest

from iconsplit.models.icon import IconFragment
from iconsplit.store.icon_store import IconStore

SVG = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><path d="M0 0 L24 24"/></svg>'


def _fragment(name: str, **fields) -> IconFragment:
    return IconFragment(id=f"sheet-symbol-0-{name}", svg_content=SVG, name=name, **fields)


@pytest.fixture
def store(tmp_path) -> IconStore:
    return IconStore(tmp_path / "library")


def test_save_assigns_fresh_id(store):
    record = store.save(_fragment("Home"))
    assert record.id != "sheet-symbol-0-Home"
    assert len(record.id) == 36
    assert record.created_at == record.updated_at
    assert store.get(record.id) == record


def test_save_recomputes_file_size(store):
    record = store.save(_fragment("Home", file_size=999_999))
    assert record.file_size == len(SVG.encode("utf-8"))
    assert store.get(record.id).file_size == record.file_size


def test_persists_across_instances(store):
    record = store.save(_fragment("Home", category="nav"))
    reopened = IconStore(store.data_dir)
    assert reopened.get(record.id) == record


def test_list_newest_first(store):
    first = store.save(_fragment("First"))
    second = store.save(_fragment("Second"))
    assert [r.id for r in store.list()] == [second.id, first.id]


class TestFilters:
    @pytest.fixture(autouse=True)
    def _seed(self, store):
        store.save(_fragment("Home", category="nav", keywords=["house"]))
        store.save(_fragment("Arrow Left", category="nav", description="Go back"))
        store.save(_fragment("Bell", category="alerts"))
        store.save(_fragment("Blank"))

    def test_search_name_case_insensitive(self, store):
        assert [r.name for r in store.list(search="HOME")] == ["Home"]

    def test_search_keywords_and_description(self, store):
        assert [r.name for r in store.list(search="hous")] == ["Home"]
        assert [r.name for r in store.list(search="back")] == ["Arrow Left"]

    def test_category_exact(self, store):
        assert {r.name for r in store.list(category="nav")} == {"Home", "Arrow Left"}
        assert store.list(category="na") == []

    def test_search_and_category_combined(self, store):
        assert [r.name for r in store.list(search="b", category="alerts")] == ["Bell"]

    def test_categories_sorted_distinct(self, store):
        assert store.categories() == ["alerts", "nav"]


def test_update_metadata(store):
    record = store.save(_fragment("Home"))
    updated = store.update(record.id, {"name": "House", "keywords": ["home"], "svg_content": "<x/>"})
    assert updated is not None
    assert updated.name == "House"
    assert updated.keywords == ["home"]
    assert updated.svg_content == SVG
    assert updated.updated_at >= record.updated_at
    assert store.get(record.id).name == "House"


def test_update_missing(store):
    assert store.update("nope", {"name": "x"}) is None


def test_delete(store):
    record = store.save(_fragment("Home"))
    assert store.delete(record.id)
    assert store.get(record.id) is None
    assert not store.delete(record.id)


def test_no_temp_file_left_behind(store):
    store.save(_fragment("Home"))
    assert sorted(p.name for p in store.data_dir.iterdir()) == ["icons.jsonl"]
