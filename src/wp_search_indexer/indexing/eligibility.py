"""
Searchable Content Types

Which post types end up in which index.
"""

from __future__ import annotations

from typing import Iterable, List

from ..content.client import WordPressClient
from ..tenants import Tenant


def searchable_types(
    content_client: WordPressClient,
    tenant: Tenant,
    excluded: Iterable[str] = (),
) -> List[str]:
    """
    Public, search-eligible post types of a site, minus the excluded ones.
    """
    excluded = set(excluded)
    return [
        content_type.slug
        for content_type in content_client.list_content_types(tenant)
        if content_type.searchable and content_type.slug not in excluded
    ]


def people_types(types: Iterable[str], people: Iterable[str]) -> List[str]:
    """
    The person-like types among `types`, in the order of `types`.
    """
    people = set(people)
    return [type_tag for type_tag in types if type_tag in people]
