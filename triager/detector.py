"""Change detection over a stateless issue listing.

The upstream list has no cursor or since-token, so every tick sees every open
issue. The detector compares each issue's ``updated_at`` against the last
version recorded in the cache and lets through only new or changed issues.
The cache is written on every evaluation, unchanged issues included, so it
never needs a separate maintenance pass.

Only ``(id, updated_at)`` crosses the cache boundary. The full issue is
threaded through in the returned :class:`Detection`, unchanged.
"""

import logging

from triager.cache import CacheError, VersionCache
from triager.models import ChangeDecision, Detection, Issue

logger = logging.getLogger(__name__)


class ChangeDetector:
    def __init__(self, cache: VersionCache) -> None:
        self._cache = cache

    def _lookup(self, issue_id: int) -> str | None:
        try:
            return self._cache.get(issue_id)
        except CacheError as exc:
            # A cold cache only costs an extra notification, never a missed one.
            logger.warning("Cache %r lookup failed for #%s, treating as new: %s", self._cache.name, issue_id, exc)
            return None

    def _record(self, issue_id: int, version: str) -> None:
        try:
            self._cache.put(issue_id, version)
        except CacheError as exc:
            logger.warning("Cache %r write failed for #%s: %s", self._cache.name, issue_id, exc)

    def evaluate(self, issue: Issue) -> ChangeDecision | None:
        """Classify the issue against the cache and record its version.

        Returns None for pull requests, which are never looked up or recorded.
        """
        if issue.is_pull_request:
            return None

        last_seen = self._lookup(issue.id)
        if last_seen is None:
            decision = ChangeDecision.NEW
        elif last_seen == issue.updated_at:
            decision = ChangeDecision.UNCHANGED
        else:
            decision = ChangeDecision.CHANGED

        self._record(issue.id, issue.updated_at)
        return decision

    def detect(self, issue: Issue) -> Detection | None:
        """Return the issue with its decision, or None when there is nothing to forward."""
        decision = self.evaluate(issue)
        if decision is None:
            logger.debug("Skipping pull request #%s", issue.id)
            return None
        if decision is ChangeDecision.UNCHANGED:
            logger.debug("Issue #%s unchanged since %s", issue.id, issue.updated_at)
            return None
        logger.info(">> new or modified issue found. #%s (%s)", issue.id, decision.value)
        return Detection(issue=issue, decision=decision)
