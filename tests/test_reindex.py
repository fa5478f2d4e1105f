"""
Full reindex tests.

Per-batch failures are deliberately not fatal: the run always completes,
reports what failed, and keeps everything that could be saved.
"""

import json

import httpx
import pytest

from conftest import FakeContentClient, make_item, make_settings

from wp_search_indexer.core.errors import InvalidArgumentError
from wp_search_indexer.indexing.reindex import Reindexer
from wp_search_indexer.records.transformers import default_registry
from wp_search_indexer.search.client import SearchClient

GLOBAL = "local_wp_global_search"
PEOPLE = "local_wp_people_search"


@pytest.fixture
def corpus():
    content = FakeContentClient()
    content.add(1, make_item(2, "page", title="Home", content="a" * 1500))
    content.add(1, make_item(3, "post", title="News"))
    content.add(1, make_item(4, "post", title="Draft", status="draft"))
    content.add(1, make_item(5, "faculty", title="Prof"))
    content.add(1, make_item(6, "faculty", title="Gone", status="trash"))
    content.add(1, make_item(7, "student", title="Stu"))
    content.add(1, make_item(8, "job_listing", title="Hiring"))
    content.add(1, make_item(9, "attachment", title="Image"))
    content.add(2, make_item(3, "post", title="Sub-site news"))
    content.add(2, make_item(10, "person", title="Sub-site person"))
    return content


def make_reindexer(search_client, content, settings=None, **kwargs):
    return Reindexer(search_client, content, default_registry(), settings or make_settings(), **kwargs)


def test_full_reindex_clears_and_repopulates(search_client, corpus):
    stale = search_client.init_index(GLOBAL)
    stale.objects["1#post#99#0"] = {"objectID": "1#post#99#0", "distinct_key": "1#post#99"}

    report = make_reindexer(search_client, corpus).run()

    assert report.ok
    assert sorted(search_client.indexes[GLOBAL].objects) == [
        "1#faculty#5#0",
        "1#page#2#0",
        "1#page#2#1",
        "1#post#3#0",
        "1#student#7#0",
        "2#person#10#0",
        "2#post#3#0",
    ]
    assert report.items_indexed == 8  # 6 global + 2 people
    assert report.records_indexed == 9


def test_people_index_holds_only_primary_site_people(search_client, corpus):
    make_reindexer(search_client, corpus).run()

    people = search_client.indexes[PEOPLE].objects
    assert sorted(people) == ["1#faculty#5#0", "1#student#7#0"]
    assert {record["type"] for record in people.values()} <= {"student", "faculty", "person"}


def test_phases_run_in_order(search_client, corpus):
    make_reindexer(search_client, corpus).run()

    global_calls = search_client.indexes[GLOBAL].calls
    people_calls = search_client.indexes[PEOPLE].calls
    assert global_calls[0] == ("clear",)
    assert people_calls[0] == ("clear",)
    assert all(call[0] == "save" for call in global_calls[1:] + people_calls[1:])

    # the people phase only starts once every site went through the global phase
    cut = corpus.fetches.index((2, "program", 1)) + 1
    assert corpus.fetches[cut:] == [
        (1, "student", 1),
        (1, "student", 2),
        (1, "faculty", 1),
        (1, "faculty", 2),
        (1, "person", 1),
    ]


def test_sites_are_processed_one_after_the_other(search_client, corpus):
    make_reindexer(search_client, corpus).run()

    global_phase = corpus.fetches[: corpus.fetches.index((2, "program", 1)) + 1]
    sites = [site for site, _, _ in global_phase]
    assert sites == sorted(sites)


def test_excluded_and_unregistered_types_are_never_fetched(search_client, corpus):
    make_reindexer(search_client, corpus).run()

    fetched_types = {type_tag for _, type_tag, _ in corpus.fetches}
    assert "job_listing" not in fetched_types
    assert "attachment" not in fetched_types


def test_one_batch_per_page_until_empty_page(search_client):
    content = FakeContentClient(types=["post"])
    for i in range(1, 6):
        content.add(1, make_item(i, "post"))
    settings = make_settings(reindex_page_size=2, wp_sites=[{"id": 1, "base_url": "https://example.org"}])

    report = make_reindexer(search_client, content, settings).run()

    saves = [c for c in search_client.indexes[GLOBAL].calls if c[0] == "save"]
    assert [len(c[1]) for c in saves] == [2, 2, 1]
    assert [page for _, _, page in content.fetches] == [1, 2, 3, 4]
    assert report.batches_saved == 3


def test_failed_batch_is_logged_and_skipped(search_client):
    content = FakeContentClient(types=["post"])
    for i in range(1, 6):
        content.add(1, make_item(i, "post"))
    settings = make_settings(reindex_page_size=2, wp_sites=[{"id": 1, "base_url": "https://example.org"}])
    search_client.init_index(GLOBAL).fail_saves = {2}

    report = make_reindexer(search_client, content, settings).run()

    assert not report.ok
    assert report.batches_failed == 1
    assert report.batches_saved == 2
    assert sorted(search_client.indexes[GLOBAL].objects) == ["1#post#1#0", "1#post#2#0", "1#post#5#0"]
    assert "save post batch 2" in report.errors[0]


def test_failed_clear_does_not_stop_the_run(search_client, corpus):
    search_client.init_index(GLOBAL).fail_clear = True

    report = make_reindexer(search_client, corpus).run()

    assert not report.ok
    assert "1#post#3#0" in search_client.indexes[GLOBAL].objects
    assert search_client.indexes[PEOPLE].objects


def test_failed_fetch_moves_on_to_next_type(search_client, corpus):
    corpus.failing.add((1, "post"))

    report = make_reindexer(search_client, corpus).run()

    assert not report.ok
    objects = search_client.indexes[GLOBAL].objects
    assert "1#post#3#0" not in objects
    assert "1#page#2#0" in objects
    assert "2#post#3#0" in objects


def test_failed_transform_skips_only_that_item(search_client, corpus):
    registry = default_registry()

    def broken_page(item, tenant):
        raise RuntimeError("bad field")

    registry.register("page", broken_page)
    reindexer = Reindexer(search_client, corpus, registry, make_settings())

    report = reindexer.run()

    assert len(report.errors) == 1
    assert "1#post#3#0" in search_client.indexes[GLOBAL].objects
    assert not any(key.startswith("1#page") for key in search_client.indexes[GLOBAL].objects)


def test_type_filter_reindexes_without_clearing(search_client, corpus):
    existing = search_client.init_index(GLOBAL)
    existing.objects["1#page#2#0"] = {"objectID": "1#page#2#0", "distinct_key": "1#page#2"}

    report = make_reindexer(search_client, corpus).run("faculty")

    assert report.ok
    assert ("clear",) not in existing.calls
    assert "1#page#2#0" in existing.objects
    assert {t for _, t, _ in corpus.fetches} == {"faculty"}
    assert list(search_client.indexes[PEOPLE].objects) == ["1#faculty#5#0"]


@pytest.mark.parametrize("type_filter", ["job_listing", "nonsense"])
def test_invalid_type_filter_aborts_before_any_mutation(search_client, corpus, type_filter):
    with pytest.raises(InvalidArgumentError):
        make_reindexer(search_client, corpus).run(type_filter)

    assert search_client.indexes == {}
    assert corpus.fetches == []


def test_verbose_progress(search_client, corpus):
    lines = []

    make_reindexer(search_client, corpus, echo=lines.append, verbose=True).run("student")

    assert "Serializing [student] Stu" in lines
    assert "Sending batch..." in lines
    assert "1 student records indexed" in lines


def test_failed_clear_task_poll_does_not_stop_the_run(corpus):
    saved = []

    def algolia(request):
        path = request.url.path
        if path.endswith("/clear"):
            return httpx.Response(200, json={"taskID": 1})
        if "/task/" in path:
            return httpx.Response(503, json={"message": "unavailable"})
        if path.endswith("/batch"):
            body = json.loads(request.content)
            saved.extend(r["body"]["objectID"] for r in body["requests"])
            return httpx.Response(200, json={"taskID": 2})
        return httpx.Response(404, json={"message": "not found"})

    search = SearchClient("APPID", "secret", transport=httpx.MockTransport(algolia), sleep=lambda s: None)

    report = make_reindexer(search, corpus).run()

    assert not report.ok
    assert any(e.startswith(f"clear {GLOBAL}") for e in report.errors)
    assert any(e.startswith(f"clear {PEOPLE}") for e in report.errors)
    assert report.batches_failed == 0
    assert "1#post#3#0" in saved
    assert "2#person#10#0" in saved
    assert "1#faculty#5#0" in saved
