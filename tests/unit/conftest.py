"""Unit test configuration - isolated environment and engine cache"""

import pytest

from fdp_search.engine import SearchEngineFactory

CONFIG_VARIABLES = [
    "SEARCH_FILTER_PUNCTUATION",
    "SEARCH_STOPWORDS_FILE",
    "SEARCH_MIN_KEYWORD_LENGTH",
    "SEARCH_ASSOCIATION_THRESHOLD",
    "SEARCH_MAX_CONCURRENT_LOOKUPS",
    "ONTOLOGY_SOURCES",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """
    Remove search engine variables so that a developer's shell or .env
    cannot change unit test results.
    """
    for name in CONFIG_VARIABLES:
        # setenv first so monkeypatch also undoes values written by load_dotenv
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield


@pytest.fixture(autouse=True)
def reset_engine_factory():
    """Each test starts without a cached engine"""
    SearchEngineFactory.cleanup()
    yield
    SearchEngineFactory.cleanup()
