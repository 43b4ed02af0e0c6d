"""
Tests for loading the slug store.
"""

import pytest

from redirector.core.exceptions import SlugStoreError
from redirector.services.slug_store import SlugStore


def test_load_valid_file(urls_path):
    store = SlugStore.load(str(urls_path))

    assert len(store) == 3
    assert store.get("gh") == "https://github.com"
    assert store.get("nope") is None


def test_missing_file_raises(tmp_path):
    with pytest.raises(SlugStoreError):
        SlugStore.load(str(tmp_path / "absent.json"))


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "urls.json"
    path.write_text("{not json")

    with pytest.raises(SlugStoreError):
        SlugStore.load(str(path))


@pytest.mark.parametrize("content", ['["a", "b"]', '{"gh": 42}'])
def test_wrong_shape_raises(tmp_path, content):
    path = tmp_path / "urls.json"
    path.write_text(content)

    with pytest.raises(SlugStoreError):
        SlugStore.load(str(path))


def test_empty_store():
    assert SlugStore().get("anything") is None
