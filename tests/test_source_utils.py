import pytest

from altsource.domain.source_utils import is_valid_path_component, join_url, strip_nulls
from altsource.services.authentication import verify_access_token


def test_strip_nulls_recurses_into_lists_and_dicts():
    value = {"a": None, "b": [{"c": None, "d": 1}], "e": {"f": None}}
    assert strip_nulls(value) == {"b": [{"d": 1}], "e": {}}


@pytest.mark.parametrize("component", ["Demo", "Demo_1.0.ipa", "My App", "v1.2.3"])
def test_valid_path_components(component):
    assert is_valid_path_component(component)


@pytest.mark.parametrize("component", ["", ".", "..", ".hidden", "a..b", "a/b", "a\\b"])
def test_invalid_path_components(component):
    assert not is_valid_path_component(component)


def test_join_url_trims_trailing_slash_and_quotes():
    assert join_url("https://x.example/", "apps", "A B", "c#d.ipa") == "https://x.example/apps/A%20B/c%23d.ipa"


class TestVerifyAccessToken:
    def test_open_when_unconfigured(self):
        assert verify_access_token(None, None)
        assert verify_access_token("anything", "")

    def test_required_when_configured(self):
        assert not verify_access_token(None, "secret")
        assert not verify_access_token("wrong", "secret")
        assert verify_access_token("secret", "secret")
