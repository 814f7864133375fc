"""Fixed-interval poller feeding the triage pipeline."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait

from triager.models import Issue, LabelResult
from triager.pipeline import TriagePipeline
from triager.source import FetchError, IssueSource

logger = logging.getLogger(__name__)


class Poller:
    def __init__(
        self,
        source: IssueSource,
        pipeline: TriagePipeline,
        interval: float = 30.0,
        max_workers: int = 4,
    ) -> None:
        self.source = source
        self.pipeline = pipeline
        self.interval = interval
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="triage-")
        self._shutdown_event = threading.Event()

    def _process(self, issue: Issue) -> LabelResult | None:
        try:
            return self.pipeline.process(issue)
        except Exception:
            logger.exception("Triage of issue #%s failed", issue.id)
            return None

    def tick(self) -> list[Future[LabelResult | None]]:
        """Fetch the issue list once and submit every issue. Does not wait for the work."""
        try:
            issues = self.source.fetch()
        except FetchError as exc:
            # The next tick is the retry.
            logger.error("Skipping tick: %s", exc)
            return []
        logger.debug("Fetched %d issues from %s", len(issues), self.source.url)
        return [self._executor.submit(self._process, issue) for issue in issues]

    def run_once(self) -> list[LabelResult | None]:
        futures = self.tick()
        wait(futures)
        return [future.result() for future in futures]

    def run(self) -> None:
        """Tick every interval until stop() is called or the process is interrupted."""
        logger.info("Polling %s every %ss", self.source.url, self.interval)
        try:
            while not self._shutdown_event.is_set():
                try:
                    self.tick()
                except Exception:
                    logger.exception("Poll tick failed, retrying in %ss", self.interval)
                if self._shutdown_event.wait(timeout=self.interval):
                    break
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self.close()

    def stop(self) -> None:
        """Ask run() to return after the current tick."""
        self._shutdown_event.set()

    def close(self) -> None:
        """Wait for submitted issues to finish and release the worker threads."""
        self._shutdown_event.set()
        self._executor.shutdown(wait=True)
