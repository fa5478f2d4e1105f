"""
Site Record Transformers

One function per content type of the site, each building the type-specific
attributes of its records from custom fields and taxonomy terms.
"""

from __future__ import annotations

import html
from typing import Any, Dict, List

from .assembler import assemble
from .models import SearchRecord
from .registry import TransformerRegistry
from .splitter import strip_tags
from ..content.models import ContentItem
from ..tenants import Tenant


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _post_title(post: Dict[str, Any]) -> str:
    title = post.get("post_title", post.get("title"))
    if isinstance(title, dict):
        title = html.unescape(title.get("rendered") or "")
    return title or ""


def _linked_people(posts: Any) -> List[Dict[str, Any]]:
    """
    Map a relationship field (list of post objects) to `{id, name}` pairs.
    """
    if not posts:
        return []

    people = []
    for post in posts:
        if isinstance(post, dict):
            people.append({
                "id": post.get("ID", post.get("id")),
                "name": _post_title(post),
            })
    return people


def _featured_image(item: ContentItem) -> Any:
    return item.featured_image or False


# ---------------------------------------------------------------------
# Transformers
# ---------------------------------------------------------------------

def page_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    is_front_page = tenant.front_page_id is not None and item.id == tenant.front_page_id

    attrs = {
        "is_front_page": is_front_page,
        "title": tenant.name if is_front_page and tenant.name else item.title,
    }

    return assemble(item, tenant, attrs)


def post_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    people_field = item.field("people_in_this_story") or {}
    selected = people_field.get("selected_posts") if isinstance(people_field, dict) else None

    attrs = {
        "featured_image": _featured_image(item),
        "introduction": item.field("introduction"),
        "people": _linked_people(selected),
        "tags": item.term_names("post_tag"),
        "categories": item.term_names("category"),
        "topics": item.term_names("topic"),
        "departments": item.term_names("department"),
        "research_centers": item.term_names("research_center"),
        "semesters": item.term_names("semester"),
    }

    return assemble(item, tenant, attrs)


def student_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    attrs = {
        "first_name": item.field("first_name"),
        "last_name": item.field("last_name"),
        "headshot": _featured_image(item),
        "areas_of_study": item.field("areas_of_study"),
        "pathway": item.field("pathway"),
        "introduction": strip_tags(item.field("introduction")),
        "graduation_status": item.field("graduation_status"),
        "student_types": item.term_names("student_type"),
        "degrees": item.term_names("degree"),
        "topics": item.term_names("topic"),
        "departments": item.term_names("department"),
        "research_centers": item.term_names("research_center"),
    }

    return assemble(item, tenant, attrs)


def faculty_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    attrs = {
        "first_name": item.field("first_name"),
        "last_name": item.field("last_name"),
        "headshot": _featured_image(item),
        "job_title": item.field("job_title"),
        "bio": strip_tags(item.field("bio")),
        "phone_number": item.field("phone_number"),
        "email_address": item.field("email_address"),
        "faculty_types": item.term_names("faculty_type"),
        "topics": item.term_names("topic"),
        "departments": item.term_names("department"),
        "research_centers": item.term_names("research_center"),
    }

    return assemble(item, tenant, attrs)


def person_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    # Person types are grouped into the "Staff" and "Friends & Partners"
    # refinement lists by a field on the term itself.
    staff_types = []
    friends_partners_types = []
    for term in item.terms.get("person_type", []):
        if term.meta.get("refinement_list") == "friends_partners":
            friends_partners_types.append(term.name)
        else:
            staff_types.append(term.name)

    attrs = {
        "first_name": item.field("first_name"),
        "last_name": item.field("last_name"),
        "headshot": _featured_image(item),
        "job_title": item.field("job_title"),
        "bio": strip_tags(item.field("bio")),
        "phone_number": item.field("phone_number"),
        "email_address": item.field("email_address"),
        "staff_types": staff_types,
        "friends_partners_types": friends_partners_types,
        "topics": item.term_names("topic"),
    }

    return assemble(item, tenant, attrs)


def project_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    attrs = {
        "featured_image": _featured_image(item),
        "subhead_text": item.field("subhead_text"),
        "people": _linked_people(item.field("project_team")),
        "topics": item.term_names("topic"),
        "departments": item.term_names("department"),
        "research_centers": item.term_names("research_center"),
        "project_types": item.term_names("project_type"),
    }

    return assemble(item, tenant, attrs)


def dialogue_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    attrs = {
        "session": item.field("session"),
        "year": item.field("year"),
        "countries": item.field("countries"),
        "people": _linked_people(item.field("led_by")),
        "topics": item.term_names("topic"),
    }

    return assemble(item, tenant, attrs)


def resource_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    link_type = item.field("resource_link_type")
    link_field = item.field("resource_link" if link_type == "Link" else "resource_file")
    resource_link = link_field.get("url") if isinstance(link_field, dict) else link_field

    attrs = {
        "resource_source": item.field("resource_source"),
        "resource_link_type": link_type,
        "resource_link": resource_link,
        "audiences": item.term_names("audience"),
        "departments": item.term_names("department"),
        "resource_types": item.term_names("resource_type"),
    }

    return assemble(item, tenant, attrs)


def program_to_records(item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
    # Only program landing pages are searchable
    if item.field("page_type") != "landing":
        return []

    attrs = {
        "program_types": item.term_names("program_type"),
    }

    return assemble(item, tenant, attrs)


# ---------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------

SITE_TRANSFORMERS = {
    "page": page_to_records,
    "post": post_to_records,
    "student": student_to_records,
    "faculty": faculty_to_records,
    "person": person_to_records,
    "project": project_to_records,
    "dialogue": dialogue_to_records,
    "resource": resource_to_records,
    "program": program_to_records,
}


def register_site_transformers(registry: TransformerRegistry) -> TransformerRegistry:
    for type_tag, transform_fn in SITE_TRANSFORMERS.items():
        registry.register(type_tag, transform_fn)
    return registry


def default_registry() -> TransformerRegistry:
    """
    Build a registry holding every site transformer.
    """
    return register_site_transformers(TransformerRegistry())
