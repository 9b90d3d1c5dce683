"""ファイル操作関連のユーティリティ"""
import os
import posixpath
from typing import List, Optional, Sequence
from dataclasses import dataclass

from ..errors import FilesystemError


@dataclass(frozen=True)
class FileRecord:
    """アップロード対象ファイル"""
    absolute_path: str
    relative_key_suffix: str  # ソースディレクトリからの相対パス ("/" 区切り)

    @property
    def name(self) -> str:
        return os.path.basename(self.absolute_path)


class FileEnumerator:
    """ディレクトリを再帰的にスキャンしてファイル一覧を作成"""

    def __init__(self, root: str):
        self.root = root

    def scan(self) -> List[FileRecord]:
        """全ての通常ファイルを決定的な順序で列挙

        各ディレクトリ内は名前順、深さ優先で辿る。ディレクトリ自体は含めない。
        """
        if not os.path.isdir(self.root):
            raise FilesystemError(f"Not a readable directory: {self.root}")

        root = os.path.abspath(self.root)
        records: List[FileRecord] = []

        def _raise(error: OSError):
            raise FilesystemError(f"Cannot read directory {error.filename}: {error.strerror}")

        for current, dirs, files in os.walk(root, onerror=_raise):
            # os.walk の走査順をソートして固定する
            dirs.sort()
            for file in sorted(files):
                file_path = os.path.join(current, file)
                if not os.path.isfile(file_path):
                    continue
                relative_path = os.path.relpath(file_path, root)
                records.append(FileRecord(
                    absolute_path=file_path,
                    relative_key_suffix=relative_path.replace(os.sep, "/"),
                ))

        return records


class KeyMapper:
    """ソースファイルからオブジェクトキーを生成"""

    def __init__(self, source_root: str, destination_prefix: str = "",
                 placeholder_markers: Optional[Sequence[str]] = None):
        self.source_root = source_root
        self.destination_prefix = destination_prefix or ""
        self.placeholder_markers = list(
            placeholder_markers if placeholder_markers is not None else [".gitkeep"]
        )

    @property
    def prefix(self) -> str:
        # 出力先が空ならソースディレクトリ名をそのまま使う
        return self.destination_prefix if self.destination_prefix else self.source_root

    def object_key(self, record: FileRecord) -> str:
        prefix = self.prefix.replace("\\", "/")
        joined = posixpath.join(prefix, record.relative_key_suffix.lstrip("/"))
        key = posixpath.normpath(joined).lstrip("/")
        return "" if key == "." else key

    def is_placeholder(self, key: str) -> bool:
        return any(marker in key for marker in self.placeholder_markers)
