"""アップロード処理の例外定義"""
from typing import Optional


class UploaderError(Exception):
    """r2_uploader の基底例外"""


class FilesystemError(UploaderError):
    """ソースディレクトリやファイルが読み取れない"""


class PreconditionSkip(UploaderError):
    """If-None-Match が一致した (内容に変更なし)

    ConditionalUploader の外には出さない。
    """


class UploadError(UploaderError):
    """単一ファイルのアップロード失敗"""

    kind = "upload"

    def __init__(self, key: str, path: str, cause: Exception):
        self.key = key
        self.path = path
        self.cause = cause
        super().__init__(f"{key} ({path}): {cause}")


class TransportError(UploadError):
    """ネットワーク・接続エラー"""

    kind = "transport"


class RemoteRejection(UploadError):
    """412以外のエラーレスポンス"""

    kind = "remote"

    def __init__(self, key: str, path: str, cause: Exception,
                 status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(key, path, cause)
        self.status_code = status_code
        self.code = code


class LocalReadError(UploadError):
    """アップロード対象ファイルの読み込み失敗"""

    kind = "filesystem"


class UploadAbortedError(UploaderError):
    """fail-fast モードで実行を中断した"""

    def __init__(self, outcome, summary):
        self.outcome = outcome
        self.summary = summary
        super().__init__(str(outcome.error))
