from wp_search_indexer.search.naming import GLOBAL_INDEX, PEOPLE_INDEX, index_name


def test_index_name_is_prefixed():
    assert index_name(GLOBAL_INDEX, "local", "wp_") == "local_wp_global_search"
    assert index_name(PEOPLE_INDEX, "prod", "wp_") == "prod_wp_people_search"


def test_bare_prefix_without_name():
    assert index_name("", "local", "wp_") == "local_wp_"


def test_environments_do_not_share_indexes():
    names = {
        index_name(GLOBAL_INDEX, env, prefix)
        for env in ("local", "dev", "prod")
        for prefix in ("wp_", "site2_")
    }
    assert len(names) == 6
