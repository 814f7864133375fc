"""Shared test fixtures."""

import os

import pytest

from triager.cache import InMemoryVersionCache
from triager.models import Issue, LabelRequest

REPO_URL = "https://api.github.com/repos/jdoss/quickvm"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TRIAGER_* variables from the outer environment out of every test."""
    for key in list(os.environ):
        if key.startswith("TRIAGER_"):
            monkeypatch.delenv(key)


@pytest.fixture
def bug_issue() -> Issue:
    return Issue(
        id=42,
        source_url=REPO_URL,
        title="Crash on logout",
        body="Steps to reproduce... /kind bug",
        updated_at="2024-05-01T10:00:00Z",
        labels=frozenset(),
    )


@pytest.fixture
def pull_request() -> Issue:
    return Issue(
        id=43,
        source_url=REPO_URL,
        title="Fix crash on logout",
        body="/kind bug",
        updated_at="2024-05-01T11:00:00Z",
        is_pull_request=True,
    )


@pytest.fixture
def label_request() -> LabelRequest:
    return LabelRequest(url=REPO_URL, number=42, label="bug")


@pytest.fixture
def cache() -> InMemoryVersionCache:
    return InMemoryVersionCache(name="issues", max_entries=100)


@pytest.fixture
def issue_node() -> dict:
    return {
        "id": 987654321,
        "number": 42,
        "repository_url": REPO_URL,
        "title": "Crash on logout",
        "body": "Steps to reproduce... /kind bug",
        "updated_at": "2024-05-01T10:00:00Z",
        "labels": [],
        "state": "open",
    }
