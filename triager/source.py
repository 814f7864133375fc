"""Upstream issue listing."""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from triager.models import Issue
from triager.settings import TriagerSettings

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
PULLER_URL_TEMPLATE = "http://issue-puller.{namespace}.svc"


class FetchError(Exception):
    """The upstream issue list could not be fetched or parsed."""


def issue_from_node(node: Mapping[str, Any]) -> Issue:
    """Map one snake_case issue object from the listing onto an Issue.

    Raises FetchError when the node (or its pull_request reference) is not an object.
    """
    if not isinstance(node, Mapping):
        raise FetchError(f"Expected an issue object, got {type(node).__name__}")
    pull_request = node.get("pull_request") or {}
    if not isinstance(pull_request, Mapping):
        raise FetchError(f"Issue #{node.get('number')} has a malformed pull_request reference")
    return Issue(
        id=node["number"],
        source_url=node["repository_url"],
        title=node.get("title") or "",
        body=node.get("body") or "",
        updated_at=node["updated_at"],
        labels=frozenset(label["name"] for label in node.get("labels") or []),
        is_pull_request=pull_request.get("url") is not None,
    )


class IssueSource:
    def __init__(self, url: str, token: str | None = None, timeout: float = 30) -> None:
        self.url = url
        self._timeout = timeout
        self._headers = {"Accept": "application/json"}
        if token:
            self._headers = {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }

    def fetch(self) -> list[Issue]:
        """Fetch the whole current list. All-or-nothing: raises FetchError on any problem."""
        try:
            response = httpx.get(self.url, headers=self._headers, timeout=self._timeout)
            response.raise_for_status()
            nodes = response.json()
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not fetch issues from {self.url}: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"Issue list from {self.url} is not valid JSON: {exc}") from exc

        if not isinstance(nodes, list):
            raise FetchError(f"Expected a JSON array from {self.url}, got {type(nodes).__name__}")
        try:
            return [issue_from_node(node) for node in nodes]
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise FetchError(f"Malformed issue in listing from {self.url}: {exc!r}") from exc


def resolve_upstream(settings: TriagerSettings) -> IssueSource:
    """Pick the issue listing endpoint from settings.

    Precedence:
    1. upstream_url — any service returning the JSON array, no credential sent
    2. github_repo — list the repo's issues straight from the GitHub API
    3. namespace — the issue-puller service in that cluster namespace
    """
    timeout = settings.request_timeout
    if settings.upstream_url:
        return IssueSource(settings.upstream_url, timeout=timeout)
    if settings.github_repo:
        owner, repo = settings.github_repo.split("/", 1)
        token = settings.github_token.get_secret_value() if settings.github_token else None
        return IssueSource(f"{GITHUB_API}/repos/{owner}/{repo}/issues", token=token, timeout=timeout)
    if settings.namespace:
        return IssueSource(PULLER_URL_TEMPLATE.format(namespace=settings.namespace), timeout=timeout)
    raise ValueError("No issue source configured. Set upstream_url, github_repo or namespace.")
