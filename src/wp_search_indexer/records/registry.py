"""
Record Transformer Registry

This module maps a content type slug to the function that turns a content
item of that type into search records.

This is the only place content types become indexable: a type without a
registered transformer is never sent to the search service.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from .models import SearchRecord
from ..content.models import ContentItem
from ..core.errors import UnknownTransformError
from ..tenants import Tenant


# ---------------------------------------------------------------------
# Transformer Type Definitions
# ---------------------------------------------------------------------

TransformFn = Callable[[ContentItem, Tenant], Optional[Sequence[SearchRecord]]]


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

class TransformerRegistry:
    """
    Explicit mapping from content type slug to record transformer.
    """

    def __init__(self) -> None:
        self._transformers: Dict[str, TransformFn] = {}

    def register(self, type_tag: str, transform_fn: TransformFn) -> None:
        """
        Register (or replace) the transformer of a content type.
        """
        if not type_tag:
            raise ValueError("Content type slug must be non-empty.")
        if not callable(transform_fn):
            raise TypeError(f"Transformer for '{type_tag}' must be callable.")
        self._transformers[type_tag] = transform_fn

    def transformer(self, type_tag: str) -> Callable[[TransformFn], TransformFn]:
        """
        Decorator form of register().

        Example:
            @registry.transformer("page")
            def page_to_records(item, tenant):
                ...
        """
        def decorator(transform_fn: TransformFn) -> TransformFn:
            self.register(type_tag, transform_fn)
            return transform_fn

        return decorator

    def lookup(self, type_tag: str) -> Optional[TransformFn]:
        """
        Return the transformer of a content type, or None if there is none.
        """
        return self._transformers.get(type_tag)

    def get(self, type_tag: str) -> TransformFn:
        """
        Return the transformer of a content type.

        Raises
        ------
        UnknownTransformError
            If no transformer is registered for the type.
        """
        transform_fn = self.lookup(type_tag)
        if transform_fn is None:
            raise UnknownTransformError(type_tag)
        return transform_fn

    def transform(self, item: ContentItem, tenant: Tenant) -> List[SearchRecord]:
        """
        Run the transformer registered for the item's type.

        A transformer may return None or an empty sequence to index nothing.
        """
        records = self.get(item.type)(item, tenant)
        return list(records or [])

    @property
    def types(self) -> List[str]:
        return sorted(self._transformers)

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._transformers

    def __len__(self) -> int:
        return len(self._transformers)
