"""アップロード結果の集計"""
import threading
from dataclasses import replace

from ..models.result import BatchTiming, OutcomeStatus, RunSummary, UploadOutcome


class ResultAggregator:
    """UploadOutcome を RunSummary に集計する (スレッドセーフ)"""

    def __init__(self, collect_urls: bool = False):
        self.collect_urls = collect_urls
        self._summary = RunSummary()
        self._lock = threading.Lock()

    def add(self, outcome: UploadOutcome):
        with self._lock:
            summary = self._summary
            if outcome.status is OutcomeStatus.UPLOADED:
                summary.uploaded += 1
            elif outcome.status is OutcomeStatus.SKIPPED:
                summary.skipped += 1
            elif outcome.status is OutcomeStatus.FAILED:
                summary.failed += 1
                summary.failures.append(outcome)
            else:
                summary.excluded += 1

            if self.collect_urls and outcome.url:
                summary.urls[outcome.key] = outcome.url

    def record_batch(self, index: int, size: int, seconds: float):
        with self._lock:
            self._summary.batch_timings.append(BatchTiming(index, size, seconds))

    def summary(self) -> RunSummary:
        """現時点のサマリーのコピー"""
        with self._lock:
            return replace(
                self._summary,
                failures=list(self._summary.failures),
                batch_timings=list(self._summary.batch_timings),
                urls=dict(self._summary.urls),
            )
