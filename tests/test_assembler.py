from datetime import datetime

from conftest import make_item

from wp_search_indexer.records.assembler import assemble, default_attributes, record_key
from wp_search_indexer.tenants import Tenant


TENANT = Tenant(id=1, base_url="https://example.org")


def test_record_key():
    assert record_key(1, "page", 7) == "1#page#7"
    assert record_key(1, "page", 7, 2) == "1#page#7#2"


def test_long_page_splits_into_three_records():
    item = make_item(7, "page", title="About Us", content="<p>" + "z" * 2500 + "</p>")

    records = assemble(item, TENANT)

    assert [r.object_id for r in records] == ["1#page#7#0", "1#page#7#1", "1#page#7#2"]
    assert {r.distinct_key for r in records} == {"1#page#7"}
    assert [len(r.content) for r in records] == [1000, 1000, 500]
    assert all(r.title == "About Us" for r in records)


def test_empty_body_still_produces_one_record():
    records = assemble(make_item(3, "post", content=""), TENANT)

    assert len(records) == 1
    assert records[0].object_id == "1#post#3#0"
    assert records[0].content == ""


def test_default_attributes():
    item = make_item(
        5,
        "post",
        title="Hello",
        date=datetime(2023, 1, 1, 7, 0, 0),
        date_gmt=datetime(2023, 1, 1, 12, 0, 0),
        link="https://example.org/hello/",
    )

    attrs = default_attributes(item, TENANT)

    assert attrs == {
        "objectID": "1#post#5",
        "distinct_key": "1#post#5",
        "blog_id": 1,
        "type": "post",
        "title": "Hello",
        "date": "2023-01-01 07:00:00",
        "timestamp": 1672574400,
        "url": "https://example.org/hello/",
    }


def test_timestamp_falls_back_to_local_date():
    item = make_item(5, date=datetime(2023, 1, 1, 12, 0, 0), date_gmt=None)

    assert default_attributes(item, TENANT)["timestamp"] == 1672574400


def test_type_attributes_override_defaults_but_not_object_id():
    item = make_item(9, "page", title="Home", content="body")

    records = assemble(item, TENANT, {"title": "Site Name", "objectID": "nope", "extra": [1]})

    assert records[0].title == "Site Name"
    assert records[0].object_id == "1#page#9#0"
    assert records[0].extra == [1]


def test_payload_uses_index_attribute_names():
    payload = assemble(make_item(2, content="abc"), TENANT, {"topics": ["x"]})[0].to_payload()

    assert payload["objectID"] == "1#page#2#0"
    assert payload["blog_id"] == 1
    assert payload["content"] == "abc"
    assert payload["topics"] == ["x"]
    assert "object_id" not in payload
    assert "tenant_id" not in payload


def test_records_of_other_sites_do_not_collide():
    other = Tenant(id=2, base_url="https://example.org/news")
    item = make_item(7, content="a")

    first = assemble(item, TENANT)[0]
    second = assemble(item, other)[0]

    assert first.object_id != second.object_id
    assert first.distinct_key != second.distinct_key
