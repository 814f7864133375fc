"""Kind-marker classification of issue bodies."""

import logging
import re
from collections.abc import Mapping

from triager.models import Issue, LabelRequest, NoOp

logger = logging.getLogger(__name__)

_KIND_RE = re.compile(r"/kind +([a-zA-Z]+)", re.IGNORECASE)

DEFAULT_TAXONOMY: dict[str, str] = {
    "enhancement": "enhancement",
    "feature": "enhancement",
    "bug": "bug",
    "doc": "documentation",
}


def parse_kind(body: str | None) -> str | None:
    """Return the word after the first ``/kind`` marker in body, as written."""
    if not body:
        return None
    match = _KIND_RE.search(body)
    return match.group(1) if match else None


class Classifier:
    def __init__(self, taxonomy: Mapping[str, str] | None = None) -> None:
        self.taxonomy = dict(DEFAULT_TAXONOMY if taxonomy is None else taxonomy)

    def label_for(self, kind: str) -> str | None:
        # Marker words are matched lower-cased; taxonomy keys are exact.
        return self.taxonomy.get(kind.lower())

    def classify(self, issue: Issue) -> LabelRequest | None:
        if issue.is_pull_request:
            return None
        kind = parse_kind(issue.body)
        if kind is None:
            return None
        label = self.label_for(kind)
        if label is None:
            logger.debug("Issue #%s has unknown kind %r", issue.id, kind)
            return None
        if issue.has_label(label):
            logger.debug("Issue #%s already labeled %r", issue.id, label)
            return None
        return LabelRequest(url=issue.source_url, number=issue.id, label=label)

    def inspect(self, issue: Issue) -> NoOp | LabelRequest:
        request = self.classify(issue)
        if request is None:
            return NoOp()
        logger.info("OUTGOING EVENT %s", request)
        return request
