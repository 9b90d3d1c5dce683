"""S3クライアントプール管理"""
import boto3
from typing import Any, List, Optional, Sequence
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError
from ..models.config import R2Config, UploadOptions
from ..utils.logger import LoggerManager


def create_client(r2_config: R2Config, options: UploadOptions):
    """S3クライアントを作成"""
    logger = LoggerManager.get_logger()
    boto_config = BotoConfig(
        retries={"max_attempts": options.max_retries, "mode": "standard"},
        connect_timeout=options.connect_timeout,
        read_timeout=options.read_timeout,
        # 1バッチ分の同時リクエストを賄える接続数
        max_pool_connections=max(options.batch_size or 1, 10),
        # R2 は既定のCRC32チェックサムに対応していない
        request_checksum_calculation="when_required",
        response_checksum_validation="when_required",
    )

    try:
        # クライアントごとに独立したセッションを使う
        session = boto3.session.Session()
        return session.client(
            's3',
            region_name=r2_config.region,
            endpoint_url=r2_config.endpoint,
            aws_access_key_id=r2_config.access_key_id,
            aws_secret_access_key=r2_config.secret_access_key,
            config=boto_config,
        )

    except (BotoCoreError, ValueError) as e:
        logger.error(f"Error creating S3 client: {e}")
        raise


class S3ClientPool:
    """固定数のS3クライアントを保持

    クライアントは作成後に変更しないため、スレッド間で共有してよい。
    """

    def __init__(self, clients: Sequence[Any]):
        if not clients:
            raise ValueError("At least one client is required")
        self._clients: List[Any] = list(clients)
        self.logger = LoggerManager.get_logger()

    @classmethod
    def build(cls, r2_config: R2Config, size: int,
              options: Optional[UploadOptions] = None) -> 'S3ClientPool':
        """接続設定から size 個のクライアントを作成"""
        if size < 1:
            raise ValueError(f"Invalid pool size: {size}. Must be >= 1")

        options = options or UploadOptions()
        pool = cls([create_client(r2_config, options) for _ in range(size)])
        pool.logger.info(f"Created {size} S3 clients for {r2_config.endpoint}")
        return pool

    def __len__(self) -> int:
        return len(self._clients)

    def client(self, slot: int):
        """スロット番号に対応するクライアントを取得"""
        return self._clients[slot % len(self._clients)]
