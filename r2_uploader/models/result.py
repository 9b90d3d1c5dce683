"""アップロード結果のデータクラス"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ..errors import UploadError


class OutcomeStatus(Enum):
    """1ファイル分のアップロード結果"""
    UPLOADED = "uploaded"
    SKIPPED = "skipped"  # 内容に変更なし (412)
    FAILED = "failed"
    EXCLUDED = "excluded"  # プレースホルダー (.gitkeep 等)


@dataclass(frozen=True)
class UploadOutcome:
    """アップロード結果"""
    path: str
    key: str
    status: OutcomeStatus
    etag: Optional[str] = None
    url: Optional[str] = None
    error: Optional[UploadError] = None

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind if self.error else None

    @classmethod
    def uploaded(cls, path: str, key: str, etag: Optional[str] = None,
                 url: Optional[str] = None) -> 'UploadOutcome':
        return cls(path, key, OutcomeStatus.UPLOADED, etag=etag, url=url)

    @classmethod
    def skipped(cls, path: str, key: str, url: Optional[str] = None) -> 'UploadOutcome':
        return cls(path, key, OutcomeStatus.SKIPPED, url=url)

    @classmethod
    def failed(cls, error: UploadError) -> 'UploadOutcome':
        return cls(error.path, error.key, OutcomeStatus.FAILED, error=error)

    @classmethod
    def excluded(cls, path: str, key: str) -> 'UploadOutcome':
        return cls(path, key, OutcomeStatus.EXCLUDED)


@dataclass(frozen=True)
class BatchTiming:
    """バッチごとの処理時間"""
    index: int
    size: int
    seconds: float


@dataclass
class RunSummary:
    """実行結果のサマリー"""
    uploaded: int = 0
    skipped: int = 0
    failed: int = 0
    excluded: int = 0
    failures: List[UploadOutcome] = field(default_factory=list)
    batch_timings: List[BatchTiming] = field(default_factory=list)
    urls: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.uploaded + self.skipped + self.failed + self.excluded

    @property
    def succeeded(self) -> bool:
        return self.failed == 0

    @property
    def result(self) -> str:
        """GitHub Actions の result 出力値"""
        return "success" if self.succeeded else "failure"
