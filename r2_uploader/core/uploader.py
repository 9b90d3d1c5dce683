"""S3アップロード実行クラス"""
import hashlib
import mimetypes
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError
from ..errors import LocalReadError, PreconditionSkip, RemoteRejection, TransportError
from ..models.config import UploadOptions
from ..models.result import UploadOutcome
from ..utils.file_utils import FileRecord, KeyMapper
from ..utils.logger import LoggerManager

DEFAULT_CONTENT_TYPE = "application/octet-stream"
PRECONDITION_FAILED = 412


def content_fingerprint(body: bytes) -> str:
    """If-None-Match に渡すETag形式のダイジェスト"""
    return f'"{hashlib.md5(body).hexdigest()}"'


def guess_content_type(path: str) -> str:
    content_type, _ = mimetypes.guess_type(path)
    return content_type or DEFAULT_CONTENT_TYPE


class ConditionalUploader:
    """ETag条件付きでファイルを1つアップロード

    内容が変わっていないファイルはストア側で 412 になり、SKIPPED として扱う。
    ローカルには何も記録しない。
    """

    def __init__(self, options: UploadOptions, key_mapper: KeyMapper, bucket: str):
        self.options = options
        self.key_mapper = key_mapper
        self.bucket = bucket
        self.logger = LoggerManager.get_logger()

    def upload(self, client, record: FileRecord) -> UploadOutcome:
        """単一ファイルをアップロード

        ファイル単位の失敗は例外にせず FAILED の結果として返す。
        """
        key = self.key_mapper.object_key(record)
        if self.key_mapper.is_placeholder(key):
            self.logger.debug(f"Skipping placeholder {record.absolute_path}")
            return UploadOutcome.excluded(record.absolute_path, key)

        self.logger.info(f"R2 Uploading - {record.absolute_path}")
        try:
            with open(record.absolute_path, "rb") as file:
                body = file.read()
        except OSError as e:
            return UploadOutcome.failed(LocalReadError(key, record.absolute_path, e))

        try:
            response = self._put_object(client, key, body, record.absolute_path)
        except PreconditionSkip:
            return UploadOutcome.skipped(
                record.absolute_path, key, url=self._resolve_url(client, key)
            )
        except ClientError as e:
            error = e.response.get("Error", {})
            return UploadOutcome.failed(RemoteRejection(
                key, record.absolute_path, e,
                status_code=_status_code(e),
                code=error.get("Code"),
            ))
        except BotoCoreError as e:
            return UploadOutcome.failed(TransportError(key, record.absolute_path, e))

        return UploadOutcome.uploaded(
            record.absolute_path, key,
            etag=response.get("ETag"),
            url=self._resolve_url(client, key),
        )

    def _put_object(self, client, key: str, body: bytes, path: str) -> Dict[str, Any]:
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": body,
            "ContentLength": len(body),
            "ContentType": guess_content_type(path),
            # 同じETagのオブジェクトが既にあれば 412 で拒否される
            "IfNoneMatch": content_fingerprint(body),
        }
        if self.options.cache_control:
            params["CacheControl"] = self.options.cache_control

        try:
            return client.put_object(**params)
        except ClientError as e:
            if _is_precondition_failed(e):
                raise PreconditionSkip(key) from e
            raise

    def _resolve_url(self, client, key: str) -> Optional[str]:
        """公開URLまたは署名付きURLを作成"""
        if not self.options.output_file_url:
            return None

        if self.options.public_url_base:
            return f"{self.options.public_url_base.rstrip('/')}/{key}"

        try:
            return client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=self.options.url_expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            self.logger.warning(f"Could not create URL for {key}: {e}")
            return None


def _status_code(error: ClientError) -> Optional[int]:
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def _is_precondition_failed(error: ClientError) -> bool:
    code = error.response.get("Error", {}).get("Code")
    return _status_code(error) == PRECONDITION_FAILED or code in ("PreconditionFailed", "412")
