#!/usr/bin/env python3
"""S3クライアントプールのテスト"""
import pytest

from conftest import FakeS3Client
from r2_uploader.core.s3_client import S3ClientPool
from r2_uploader.models.config import R2Config, UploadOptions


def r2_config(**kwargs) -> R2Config:
    values = dict(account_id="abc123", access_key_id="AKIAEXAMPLE", secret_access_key="secret")
    values.update(kwargs)
    return R2Config(**values)


def test_s3_client_pool():
    """エンドポイントごとにクライアントが作成できるか確認 (通信はしない)"""
    pool = S3ClientPool.build(r2_config(), 3, UploadOptions(connect_timeout=5))

    assert len(pool) == 3
    clients = [pool.client(i) for i in range(3)]
    assert len({id(client) for client in clients}) == 3
    for client in clients:
        assert client.meta.endpoint_url == "https://abc123.r2.cloudflarestorage.com"
        assert client.meta.region_name == "auto"
        assert client.meta.config.connect_timeout == 5


def test_custom_endpoint():
    pool = S3ClientPool.build(r2_config(endpoint_url="http://localhost:9000"), 1)

    assert pool.client(0).meta.endpoint_url == "http://localhost:9000"


def test_slot_wraps_around(fake_bucket):
    clients = [FakeS3Client(fake_bucket, name=f"c{i}") for i in range(2)]
    pool = S3ClientPool(clients)

    assert pool.client(0) is clients[0]
    assert pool.client(3) is clients[1]


def test_invalid_pool_size():
    with pytest.raises(ValueError):
        S3ClientPool.build(r2_config(), 0)

    with pytest.raises(ValueError):
        S3ClientPool([])


def test_invalid_endpoint_host_raises():
    with pytest.raises(ValueError, match="Invalid endpoint"):
        S3ClientPool.build(r2_config(endpoint_url="https://bad host:99999"), 2)
