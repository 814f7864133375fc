"""Applies labels through the GitHub REST API v3."""

import logging

import httpx

from triager.models import LabelRequest, LabelResult, NoOp, Outcome

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({200, 201})


class LabelApplier:
    def __init__(self, token: str, timeout: float = 30) -> None:
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._timeout = timeout

    def apply(self, request: LabelRequest) -> LabelResult:
        """Add request.label to the issue. One attempt; never raises."""
        url = f"{request.url}/issues/{request.number}/labels"
        try:
            response = httpx.post(
                url,
                headers=self._headers,
                json={"labels": [request.label]},
                timeout=self._timeout,
            )
            success = response.status_code in SUCCESS_STATUSES
            if not success:
                logger.error("Label API returned %s for %s", response.status_code, url)
        except httpx.HTTPError as exc:
            logger.error("Label API request to %s failed: %s", url, exc)
            success = False
        except Exception:
            logger.exception("Unexpected error adding label to %s", url)
            success = False

        verdict = "SUCCESS" if success else "FAILURE"
        message = (
            f"Inclusion of label {request.label} to the Issue #{request.number} "
            f"of repository {request.url} was {verdict}"
        )
        logger.info(message)
        return LabelResult(outcome=Outcome.SUCCESS if success else Outcome.FAILURE, message=message)

    def handle(self, event: NoOp | LabelRequest) -> LabelResult | None:
        match event:
            case LabelRequest():
                return self.apply(event)
            case NoOp():
                return None
