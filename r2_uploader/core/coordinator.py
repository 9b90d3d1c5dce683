"""アップロードの実行制御"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Sequence

from ..errors import UploadAbortedError
from ..models.config import FailureMode
from ..models.result import OutcomeStatus, RunSummary, UploadOutcome
from ..utils.file_utils import FileRecord
from ..utils.logger import LoggerManager
from ..utils.outputs import actions_group
from ..utils.progress import BatchTimer, ProgressTracker
from .aggregator import ResultAggregator
from .planner import Assignment, BatchPlanner
from .s3_client import S3ClientPool
from .uploader import ConditionalUploader


class UploadCoordinator:
    """バッチを順番に処理し、バッチ内のファイルを並列でアップロード"""

    def __init__(self, pool: S3ClientPool, uploader: ConditionalUploader,
                 planner: BatchPlanner, failure_mode: FailureMode = FailureMode.FAIL_FAST,
                 collect_urls: bool = False, group_batches: bool = False):
        self.pool = pool
        self.uploader = uploader
        self.planner = planner
        self.failure_mode = failure_mode
        self.collect_urls = collect_urls
        self.group_batches = group_batches
        self.logger = LoggerManager.get_logger()

    def run(self, records: Sequence[FileRecord]) -> RunSummary:
        """全ファイルをアップロード

        Raises:
            UploadAbortedError: fail-fast モードでいずれかのファイルが失敗した場合
        """
        aggregator = ResultAggregator(collect_urls=self.collect_urls)
        progress = ProgressTracker(len(records))
        steps = self.planner.steps(self.planner.plan(records))

        self.logger.info(f"Files count: {len(records)}")
        self.logger.info(
            f"Partition: {self.planner.policy.value}, "
            f"batch size: {self.planner.batch_size or '-'}, pool size: {len(self.pool)}"
        )
        self.logger.info(f"Batch count: {len(steps)}")

        for i, step in enumerate(steps, 1):
            title = f"Batch {i} of {len(steps)}"
            with actions_group(title, enabled=self.group_batches):
                self.logger.info(title)
                with BatchTimer() as timer:
                    failure = self._run_step(step, aggregator, progress)
            aggregator.record_batch(i, len(step), timer.seconds)
            self.logger.info(f"↪️ done in {timer.seconds:.3f} seconds")

            if failure is not None:
                self.logger.error(f"Aborting after batch {i}: {failure.error}")
                raise UploadAbortedError(failure, aggregator.summary())

        summary = aggregator.summary()
        self.logger.info(
            f"Upload completed: {summary.uploaded} uploaded, {summary.skipped} not modified, "
            f"{summary.failed} failed, {summary.excluded} excluded "
            f"in {progress.elapsed:.1f}s"
        )
        return summary

    def _run_step(self, step: List[Assignment], aggregator: ResultAggregator,
                  progress: ProgressTracker):
        """1ステップ分を並列実行

        fail-fast の場合は最初の失敗を返す。未開始のタスクはキャンセルし、
        実行中のタスクは完了を待つ。
        """
        if not step:
            return None

        failure = None
        with ThreadPoolExecutor(max_workers=len(step)) as executor:
            future_to_record = {
                executor.submit(self._upload_one, record, slot, progress): record
                for record, slot in step
            }

            for future in as_completed(future_to_record):
                if future.cancelled():
                    continue
                outcome = future.result()
                aggregator.add(outcome)

                if (outcome.status is OutcomeStatus.FAILED
                        and self.failure_mode is FailureMode.FAIL_FAST
                        and failure is None):
                    failure = outcome
                    for pending in future_to_record:
                        pending.cancel()

        return failure

    def _upload_one(self, record: FileRecord, slot: int,
                    progress: ProgressTracker) -> UploadOutcome:
        outcome = self.uploader.upload(self.pool.client(slot), record)
        progress.advance(outcome)
        return outcome
