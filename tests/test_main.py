"""Tests del CLI."""

from unittest.mock import patch

import pytest

import main
from taxonomies import PLATFORMS
from taxonomies.models import FetchResult

CONFIG = {
    "http_timeout": 5,
    "http_max_retries": 1,
    "fetch_workers": 2,
    "taxonomy_urls": {},
}


def fake_fetch_all(platforms, **kwargs):
    return {p: FetchResult(platform=p, categories=[]) for p in platforms}


@pytest.fixture
def patched():
    with patch("main.get_mapper_config", return_value=CONFIG), \
            patch("main.fetch_all", side_effect=fake_fetch_all) as fetch_all:
        yield fetch_all


def test_categories_fetch_without_platforms_fetches_all(patched):
    main.main(["categories", "fetch"])

    assert patched.call_args.args[0] == list(PLATFORMS)


def test_categories_fetch_selected_platforms(patched):
    main.main(["categories", "fetch", "google", "heureka"])

    assert patched.call_args.args[0] == ["google", "heureka"]


def test_categories_fetch_unknown_platform_exits(patched):
    with pytest.raises(SystemExit) as exc_info:
        main.main(["categories", "fetch", "amazon"])

    assert exc_info.value.code == 1
    patched.assert_not_called()
