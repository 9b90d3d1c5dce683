"""設定管理用のデータクラス"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional
from urllib.parse import urlparse
import json
import os
import re


class PartitionPolicy(Enum):
    """バッチ分割ポリシー"""
    FIXED = "fixed"  # batch_size ごとの逐次バッチ
    POOL = "pool"  # クライアント数で round-robin


class FailureMode(Enum):
    """失敗時の挙動"""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


@dataclass
class LoggingConfig:
    """ロギング設定"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    github_annotations: bool = False  # ::error:: 形式で出力


@dataclass
class R2Config:
    """R2 (S3互換) 接続設定"""
    account_id: str
    access_key_id: str
    secret_access_key: str
    endpoint_url: Optional[str] = None
    region: str = "auto"

    def __post_init__(self):
        """接続設定のバリデーション"""
        for name in ("account_id", "access_key_id", "secret_access_key"):
            value = getattr(self, name)
            if not value or not str(value).strip():
                raise ValueError(f"{name} cannot be empty")

        # account_idはエンドポイントのホスト名に埋め込まれるため英数字のみ許可
        if not re.match(r'^[a-zA-Z0-9]+$', self.account_id):
            raise ValueError(
                f"Invalid account_id: {self.account_id}. "
                "Must contain only alphanumeric characters"
            )

        if self.endpoint_url:
            parsed = urlparse(self.endpoint_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(
                    f"Invalid endpoint_url: {self.endpoint_url}. "
                    "Expected format: https://HOST[:PORT]"
                )

    @property
    def endpoint(self) -> str:
        """実際に接続するエンドポイント"""
        if self.endpoint_url:
            return self.endpoint_url
        return f"https://{self.account_id}.r2.cloudflarestorage.com"


@dataclass
class UploadTarget:
    """アップロード元とアップロード先"""
    bucket: str
    source_dir: str
    destination_dir: str = ""

    def __post_init__(self):
        if not self.bucket:
            raise ValueError("bucket cannot be empty")
        if not self.source_dir:
            raise ValueError("source_dir cannot be empty")
        if self.destination_dir is None:
            self.destination_dir = ""


@dataclass
class UploadOptions:
    """アップロードオプション"""
    batch_size: Optional[int] = None
    pool_size: int = 5
    partition: Optional[PartitionPolicy] = None
    failure_mode: FailureMode = FailureMode.FAIL_FAST
    cache_control: Optional[str] = None
    output_file_url: bool = False
    url_expires_in: int = 3600  # 署名付きURLの有効期限（秒）
    public_url_base: Optional[str] = None
    placeholder_markers: List[str] = field(default_factory=lambda: [".gitkeep"])
    max_retries: int = 3
    connect_timeout: int = 10
    read_timeout: int = 60

    def __post_init__(self):
        if isinstance(self.failure_mode, str):
            self.failure_mode = FailureMode(self.failure_mode.replace("-", "_"))
        if isinstance(self.partition, str):
            self.partition = PartitionPolicy(self.partition)

        # 分割ポリシー未指定の場合は batch_size の有無で決める
        if self.partition is None:
            self.partition = (
                PartitionPolicy.FIXED if self.batch_size is not None else PartitionPolicy.POOL
            )

        if self.partition is PartitionPolicy.FIXED:
            if self.batch_size is None:
                raise ValueError("batch_size is required for the fixed partition policy")
            if self.batch_size < 1:
                raise ValueError(f"Invalid batch_size: {self.batch_size}. Must be >= 1")

        if self.pool_size < 1:
            raise ValueError(f"Invalid pool_size: {self.pool_size}. Must be >= 1")
        if self.url_expires_in < 1:
            raise ValueError(f"Invalid url_expires_in: {self.url_expires_in}")
        if self.max_retries < 0:
            raise ValueError(f"Invalid max_retries: {self.max_retries}")

        if not self.cache_control:
            self.cache_control = None


# GitHub Actions の入力名 (INPUT_<NAME>)
_ENV_PREFIX = "INPUT_"


def _get_input(environ: Mapping[str, str], name: str, required: bool = False) -> str:
    """GitHub Actions形式の入力値を取得"""
    value = environ.get(f"{_ENV_PREFIX}{name.replace(' ', '_').upper()}", "").strip()
    if required and not value:
        raise ValueError(f"Input required and not supplied: {name}")
    return value


@dataclass
class Config:
    """メイン設定クラス"""
    logging: LoggingConfig
    r2: R2Config
    target: UploadTarget
    options: UploadOptions

    @classmethod
    def from_dict(cls, data: Dict) -> 'Config':
        """辞書から設定を作成"""
        return cls(
            logging=LoggingConfig(**data.get("logging", {})),
            r2=R2Config(**data.get("r2", {})),
            target=UploadTarget(**data.get("target", {})),
            options=UploadOptions(**data.get("options", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error decoding JSON from {config_path}: {e}")

        try:
            return cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Error loading configuration: {e}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """環境変数 (GitHub Actions の入力) から読み込み"""
        if environ is None:
            environ = os.environ

        r2 = R2Config(
            account_id=_get_input(environ, "r2-account-id", required=True),
            access_key_id=_get_input(environ, "r2-access-key-id", required=True),
            secret_access_key=_get_input(environ, "r2-secret-access-key", required=True),
            endpoint_url=_get_input(environ, "r2-endpoint") or None,
        )
        target = UploadTarget(
            bucket=_get_input(environ, "r2-bucket", required=True),
            source_dir=_get_input(environ, "source-dir", required=True),
            destination_dir=_get_input(environ, "destination-dir"),
        )

        batch_size = _get_input(environ, "batch-size")
        pool_size = _get_input(environ, "pool-size")
        try:
            options = UploadOptions(
                batch_size=int(batch_size) if batch_size else None,
                pool_size=int(pool_size) if pool_size else 5,
                failure_mode=_get_input(environ, "failure-mode") or FailureMode.FAIL_FAST,
                cache_control=_get_input(environ, "cache-control") or None,
                output_file_url=_get_input(environ, "output-file-url") == "true",
            )
        except ValueError as e:
            raise ValueError(f"Invalid upload input: {e}")

        return cls(
            logging=LoggingConfig(
                level=environ.get("R2_UPLOADER_LOG_LEVEL", "INFO"),
                github_annotations=environ.get("GITHUB_ACTIONS") == "true",
            ),
            r2=r2,
            target=target,
            options=options,
        )
