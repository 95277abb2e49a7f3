# tests/test_task_cache.py

from __future__ import annotations

from dataclasses import replace

from taskdeck.tasks.task_cache import TaskCache
from taskdeck.tasks.task_models import TaskStatus

from .fakes import make_task


def test_upsert_appends_then_replaces_in_place() -> None:
    cache = TaskCache()
    a, b, c = make_task("a"), make_task("b"), make_task("c")
    for t in (a, b, c):
        cache.upsert(t)

    b2 = replace(b, title="B renamed")
    cache.upsert(b2)
    b3 = replace(b, title="B again")
    cache.upsert(b3)

    ids = [t.id for t in cache.all()]
    assert ids == ["a", "b", "c"]
    assert len(set(ids)) == len(ids)
    assert cache.find("b") == b3


def test_remove_is_idempotent_and_ignores_unknown_ids() -> None:
    cache = TaskCache([make_task("a"), make_task("b")])

    cache.remove("a")
    once = cache.all()
    cache.remove("a")
    assert cache.all() == once
    assert [t.id for t in once] == ["b"]

    cache.remove("missing")
    assert len(cache) == 1


def test_replace_all_keeps_given_order() -> None:
    cache = TaskCache([make_task("old")])
    cache.replace_all([make_task("z"), make_task("a")])

    assert [t.id for t in cache.all()] == ["z", "a"]
    assert "old" not in cache


def test_find_returns_none_when_absent() -> None:
    assert TaskCache().find("nope") is None


def test_all_returns_a_copy() -> None:
    cache = TaskCache([make_task("a")])
    snapshot = cache.all()
    snapshot.clear()
    assert len(cache) == 1


def test_by_status_keeps_cache_order() -> None:
    cache = TaskCache(
        [
            make_task("1", status=TaskStatus.DONE),
            make_task("2", status=TaskStatus.TODO),
            make_task("3", status=TaskStatus.DONE),
        ]
    )
    assert [t.id for t in cache.by_status(TaskStatus.DONE)] == ["1", "3"]
    assert cache.by_status(TaskStatus.IN_PROGRESS) == []


def test_replace_all_keeps_first_occurrence_of_repeated_id() -> None:
    cache = TaskCache([make_task("old")])
    first = make_task("a", title="first")
    repeat = make_task("a", title="repeat")

    cache.replace_all([first, make_task("b"), repeat])

    assert [t.id for t in cache.all()] == ["a", "b"]
    assert cache.find("a") == first
    assert "old" not in cache
