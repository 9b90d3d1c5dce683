"""バッチ分割"""
from dataclasses import dataclass, field
from itertools import zip_longest
from typing import List, Optional, Sequence, Tuple

from ..models.config import PartitionPolicy
from ..utils.file_utils import FileRecord


@dataclass
class Batch:
    """一緒に処理するファイルのグループ

    slot が指定されている場合は、そのスロットのクライアントだけで処理する。
    """
    index: int
    records: List[FileRecord] = field(default_factory=list)
    slot: Optional[int] = None

    def __len__(self) -> int:
        return len(self.records)


# (ファイル, クライアントスロット) の組
Assignment = Tuple[FileRecord, int]


class BatchPlanner:
    """ファイル一覧をバッチに分割"""

    def __init__(self, policy: PartitionPolicy, pool_size: int,
                 batch_size: Optional[int] = None):
        if pool_size < 1:
            raise ValueError(f"Invalid pool_size: {pool_size}. Must be >= 1")
        if policy is PartitionPolicy.FIXED and (batch_size is None or batch_size < 1):
            raise ValueError(f"Invalid batch_size: {batch_size}. Must be >= 1")

        self.policy = policy
        self.pool_size = pool_size
        self.batch_size = batch_size

    def plan(self, records: Sequence[FileRecord]) -> List[Batch]:
        if not records:
            return []

        if self.policy is PartitionPolicy.FIXED:
            return [
                Batch(index=i, records=list(records[start:start + self.batch_size]))
                for i, start in enumerate(range(0, len(records), self.batch_size))
            ]

        return [
            Batch(index=slot, records=list(records[slot::self.pool_size]), slot=slot)
            for slot in range(self.pool_size)
        ]

    def steps(self, batches: Sequence[Batch]) -> List[List[Assignment]]:
        """実行単位 (同時に処理するファイルの組) に変換

        FIXED: 1バッチ = 1ステップ。バッチ内はスロットを round-robin で割り当てる。
        POOL: 各グループの k 番目のファイルを集めたものが k 番目のステップ。
        """
        if self.policy is PartitionPolicy.FIXED:
            return [
                [(record, i % self.pool_size) for i, record in enumerate(batch.records)]
                for batch in batches
            ]
        return self.waves(batches)

    @staticmethod
    def waves(batches: Sequence[Batch]) -> List[List[Assignment]]:
        """スロット付きバッチを足並みを揃えたウェーブに変換"""
        columns = [[(record, batch.slot) for record in batch.records] for batch in batches]
        return [
            [assignment for assignment in wave if assignment is not None]
            for wave in zip_longest(*columns)
        ]
