from conftest import make_item

from wp_search_indexer.content.models import Term
from wp_search_indexer.records.transformers import (
    faculty_to_records,
    page_to_records,
    person_to_records,
    post_to_records,
    program_to_records,
    resource_to_records,
)
from wp_search_indexer.tenants import Tenant

TENANT = Tenant(id=1, base_url="https://example.org", name="Example School", front_page_id=2)


def _terms(taxonomy, *names, meta=None):
    return {taxonomy: [Term(name=n, taxonomy=taxonomy, meta=meta or {}) for n in names]}


def test_front_page_takes_site_name():
    front = page_to_records(make_item(2, "page", title="Home"), TENANT)[0]
    other = page_to_records(make_item(3, "page", title="About"), TENANT)[0]

    assert front.is_front_page is True
    assert front.title == "Example School"
    assert other.is_front_page is False
    assert other.title == "About"


def test_post_people_and_terms():
    item = make_item(
        10,
        "post",
        fields={
            "introduction": "Intro",
            "people_in_this_story": {
                "selected_posts": [{"ID": 41, "post_title": "Ada Lovelace"}],
            },
        },
        terms={**_terms("topic", "Math"), **_terms("post_tag", "news")},
        featured_image="https://example.org/img.jpg",
    )

    record = post_to_records(item, TENANT)[0]

    assert record.people == [{"id": 41, "name": "Ada Lovelace"}]
    assert record.topics == ["Math"]
    assert record.tags == ["news"]
    assert record.categories == []
    assert record.featured_image == "https://example.org/img.jpg"


def test_faculty_bio_is_stripped():
    item = make_item(11, "faculty", fields={"bio": "<p>Teaches <em>art</em></p>", "first_name": "Ann"})

    record = faculty_to_records(item, TENANT)[0]

    assert record.bio == "Teaches art"
    assert record.first_name == "Ann"
    assert record.headshot is False


def test_person_types_grouped_by_refinement_list():
    terms = {
        "person_type": [
            Term(name="Staff", taxonomy="person_type", meta={"refinement_list": "staff"}),
            Term(name="Donor", taxonomy="person_type", meta={"refinement_list": "friends_partners"}),
            Term(name="Advisor", taxonomy="person_type"),
        ]
    }

    record = person_to_records(make_item(12, "person", terms=terms), TENANT)[0]

    assert record.staff_types == ["Staff", "Advisor"]
    assert record.friends_partners_types == ["Donor"]


def test_resource_link_follows_link_type():
    link = make_item(
        13,
        "resource",
        fields={"resource_link_type": "Link", "resource_link": {"url": "https://a.example"}},
    )
    file = make_item(
        14,
        "resource",
        fields={"resource_link_type": "File", "resource_file": {"url": "https://b.example/f.pdf"}},
    )

    assert resource_to_records(link, TENANT)[0].resource_link == "https://a.example"
    assert resource_to_records(file, TENANT)[0].resource_link == "https://b.example/f.pdf"


def test_only_program_landing_pages_are_indexed():
    landing = make_item(15, "program", fields={"page_type": "landing"}, terms=_terms("program_type", "MFA"))
    subpage = make_item(16, "program", fields={"page_type": "detail"})

    assert program_to_records(landing, TENANT)[0].program_types == ["MFA"]
    assert program_to_records(subpage, TENANT) == []
