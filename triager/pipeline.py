"""Per-issue triage: detect, inspect, label, report."""

import logging
from collections.abc import Callable, Iterable

from triager.classifier import Classifier
from triager.detector import ChangeDetector
from triager.events import Envelope, decode_request, outcome_event, request_event
from triager.labeler import LabelApplier
from triager.models import Issue, LabelResult

logger = logging.getLogger(__name__)

OutcomeSink = Callable[[Envelope], None]


def log_outcome(event: Envelope) -> None:
    level = logging.INFO if event.type == LabelResult.SUCCESS_EVENT else logging.WARNING
    logger.log(level, "%s from %s: %s", event.type, event.source, event.data.get("message", ""))


class TriagePipeline:
    """Runs one issue through every stage.

    Stages may see the same issue more than once (overlapping ticks, evicted
    cache entries); the classifier's already-labeled check keeps repeats from
    issuing a second label call.
    """

    def __init__(
        self,
        detector: ChangeDetector,
        classifier: Classifier,
        applier: LabelApplier,
        sinks: Iterable[OutcomeSink] = (log_outcome,),
    ) -> None:
        self.detector = detector
        self.classifier = classifier
        self.applier = applier
        self.sinks = list(sinks)

    def process(self, issue: Issue) -> LabelResult | None:
        """Return the label outcome, or None when the issue needed no action."""
        detection = self.detector.detect(issue)
        if detection is None:
            return None

        # Requests reach the labeler in their envelope form.
        event = request_event(self.classifier.inspect(detection.issue))
        logger.debug("%s event %s for issue #%s", event.type, event.id, issue.id)
        result = self.applier.handle(decode_request(event))
        if result is not None:
            self._emit(outcome_event(result))
        return result

    def _emit(self, event: Envelope) -> None:
        for sink in self.sinks:
            try:
                sink(event)
            except Exception:
                logger.exception("Outcome sink %r failed for event %s", sink, event.id)
