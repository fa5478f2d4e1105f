"""
Search Service Access

Client, index naming and index configuration for the hosted search service.
"""

from .client import SearchClient, SearchIndex
from .naming import index_name, GLOBAL_INDEX, PEOPLE_INDEX

__all__ = [
    "SearchClient",
    "SearchIndex",
    "index_name",
    "GLOBAL_INDEX",
    "PEOPLE_INDEX",
]
