"""
Shared pytest fixtures and configuration.

conftest.py is auto-loaded by pytest; fixtures defined here are available
to all test files without explicit imports.
"""

import os
import sys

import httpx
import pytest

# Add the service directory to the path so tests can import service modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "service"))

from config import settings  # noqa: E402
from ingestion.parser import Parser  # noqa: E402
from ingestion.wiki_api import WikiAPI  # noqa: E402

WIKI_URL = "https://wiki.test/api.php"

EDIT_LINE = "[[Page]] https://wiki.test/index.php?diff=100&oldid=99 * X * (+300) typo"


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    """Keep tenacity retries instant."""
    monkeypatch.setattr(settings, "http_backoff_initial", 0)
    monkeypatch.setattr(settings, "http_backoff_max", 0)


@pytest.fixture
def parser():
    return Parser(wiki="wiki.test")


@pytest.fixture
def edit(parser):
    return parser.create(EDIT_LINE, "edit", title="Page", user="X", revid=100, oldid=99)


@pytest.fixture
def wiki_factory():
    """Build a WikiAPI whose requests are answered by handler(request)."""

    def factory(handler):
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return WikiAPI(http=http, url=WIKI_URL)

    return factory


def revisions_response(*revisions):
    """prop=revisions payload holding the given (revid, size) pairs."""
    return {
        "query": {
            "pages": {
                "12": {
                    "pageid": 12,
                    "title": "Page",
                    "revisions": [{"revid": revid, "parentid": 0, "size": size} for revid, size in revisions],
                }
            }
        }
    }


def users_response(name="X", editcount=42, groups=("*", "user")):
    return {"query": {"users": [{"userid": 7, "name": name, "editcount": editcount, "groups": list(groups)}]}}
