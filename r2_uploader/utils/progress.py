"""アップロード進捗管理"""
import time
import threading
from typing import Optional

from ..models.result import OutcomeStatus, UploadOutcome
from .logger import LoggerManager

_LABELS = {
    OutcomeStatus.UPLOADED: "✔️ R2 Uploaded",
    OutcomeStatus.SKIPPED: "✔️ R2 Not Modified",
    OutcomeStatus.FAILED: "✖️ R2 failed",
    OutcomeStatus.EXCLUDED: "R2 Excluded",
}


class ProgressTracker:
    """実行全体のファイル単位の進捗を追跡"""

    def __init__(self, total: int):
        self.total = total
        self.completed = 0
        self.lock = threading.Lock()
        self.start_time = time.time()
        self.logger = LoggerManager.get_logger()

    def advance(self, outcome: UploadOutcome):
        """ワーカースレッドから呼ばれる"""
        with self.lock:
            self.completed += 1
            completed = self.completed

        message = f"[{completed}/{self.total}] {_LABELS[outcome.status]} - {outcome.path}"
        if outcome.status is OutcomeStatus.FAILED:
            self.logger.error(f"{message}: {outcome.error}")
        else:
            self.logger.info(message)

    @property
    def elapsed(self) -> float:
        return time.time() - self.start_time


class BatchTimer:
    """バッチ単位の経過時間"""

    def __init__(self):
        self._start: Optional[float] = None
        self.seconds = 0.0

    def __enter__(self) -> 'BatchTimer':
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.seconds = time.perf_counter() - self._start
        return False
