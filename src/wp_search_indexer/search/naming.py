"""
Index Naming

Every logical index name is expanded to a physical name so that several
environments and WordPress installs can share one search application.
"""

GLOBAL_INDEX = "global_search"
PEOPLE_INDEX = "people_search"


def index_name(name: str = "", env_prefix: str = "", table_prefix: str = "wp_") -> str:
    """
    Return the prefixed index name for a logical index name.

    Example: ("global_search", "local", "wp_") -> "local_wp_global_search".
    With no name, the bare prefix ("local_wp_") is returned; the search
    front end appends its own index names to it.
    """
    return f"{env_prefix}_{table_prefix}{name}"
