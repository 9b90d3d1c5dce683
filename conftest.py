"""テスト共通のフィクスチャ"""
import hashlib
import threading
from typing import Dict, List, Optional, Set

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from r2_uploader.models.config import LoggingConfig
from r2_uploader.utils.logger import LoggerManager


class FakeBucket:
    """If-None-Match を ETag で評価するインメモリのバケット"""

    def __init__(self):
        self.objects: Dict[str, Dict] = {}
        self.calls: List[Dict] = []
        self.reject_keys: Set[str] = set()
        self.unreachable_keys: Set[str] = set()
        self.lock = threading.Lock()

    def put_object(self, **params):
        key = params["Key"]
        with self.lock:
            self.calls.append(params)

        if key in self.unreachable_keys:
            raise EndpointConnectionError(endpoint_url="https://fake.r2.cloudflarestorage.com")
        if key in self.reject_keys:
            raise ClientError(
                {
                    "Error": {"Code": "AccessDenied", "Message": "Access Denied"},
                    "ResponseMetadata": {"HTTPStatusCode": 403},
                },
                "PutObject",
            )

        etag = f'"{hashlib.md5(params["Body"]).hexdigest()}"'
        with self.lock:
            current = self.objects.get(key)
            if current is not None and current["ETag"] == params.get("IfNoneMatch"):
                raise ClientError(
                    {
                        "Error": {"Code": "PreconditionFailed", "Message": "At least one of the pre-conditions you specified did not hold"},
                        "ResponseMetadata": {"HTTPStatusCode": 412},
                    },
                    "PutObject",
                )
            self.objects[key] = {"ETag": etag, "Body": params["Body"]}
        return {"ETag": etag, "ResponseMetadata": {"HTTPStatusCode": 200}}

    def attempted_keys(self) -> List[str]:
        return [call["Key"] for call in self.calls]


class FakeS3Client:
    """boto3 S3クライアントの代わり (put_object と generate_presigned_url のみ)"""

    def __init__(self, bucket: FakeBucket, name: str = "client"):
        self.bucket = bucket
        self.name = name
        self.calls: List[Dict] = []

    def put_object(self, **params):
        self.calls.append(params)
        return self.bucket.put_object(**params)

    def generate_presigned_url(self, operation: str, Params: Optional[Dict] = None,
                               ExpiresIn: int = 3600) -> str:
        return f"https://signed.example/{Params['Bucket']}/{Params['Key']}?expires={ExpiresIn}"


@pytest.fixture(autouse=True)
def logger():
    """テストごとにロガーを初期化"""
    LoggerManager.reset()
    yield LoggerManager.setup(LoggingConfig(level="DEBUG"))
    LoggerManager.reset()


@pytest.fixture
def fake_bucket() -> FakeBucket:
    return FakeBucket()


@pytest.fixture
def fake_clients(fake_bucket):
    return [FakeS3Client(fake_bucket, name=f"client-{i}") for i in range(3)]


@pytest.fixture
def make_tree(tmp_path):
    """{相対パス: 内容} からディレクトリツリーを作成"""
    def _make(files: Dict[str, str], root_name: str = "site"):
        root = tmp_path / root_name
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root
    return _make
