from campaign_manager.core import cache_keys


def test_single_resource_key():
    assert cache_keys.campaign_key("abc123") == "campaign:abc123"
    assert cache_keys.resource_key("profile", "42") == "profile:42"


def test_list_key_defaults_to_all():
    assert cache_keys.campaign_list_key(None, 100, 0) == "campaigns:all:100:0"
    assert cache_keys.campaign_list_key("INACTIVE", 10, 20) == "campaigns:INACTIVE:10:20"


def test_each_pagination_window_is_its_own_key():
    first = cache_keys.campaign_list_key(None, 10, 0)
    second = cache_keys.campaign_list_key(None, 10, 10)
    assert first != second
    assert first.startswith(cache_keys.campaign_list_prefix())
    assert second.startswith(cache_keys.campaign_list_prefix())


def test_filtered_keys_do_not_share_the_unfiltered_prefix():
    assert not cache_keys.campaign_list_key("ACTIVE", 100, 0).startswith(cache_keys.campaign_list_prefix())
    assert cache_keys.campaign_list_prefix("ACTIVE") == "campaigns:ACTIVE:"
