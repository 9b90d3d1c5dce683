"""R2 Uploader パッケージ"""
from .models.config import Config
from .models.result import RunSummary
from .utils.logger import LoggerManager
from .utils.file_utils import FileEnumerator, KeyMapper
from .core.s3_client import S3ClientPool
from .core.uploader import ConditionalUploader
from .core.planner import BatchPlanner
from .core.coordinator import UploadCoordinator


class R2Uploader:
    """R2アップローダーのメインクラス"""

    def __init__(self, config: Config, client_pool: S3ClientPool):
        self.config = config
        self.client_pool = client_pool
        self.logger = LoggerManager.get_logger()

        target = config.target
        options = config.options
        key_mapper = KeyMapper(
            target.source_dir, target.destination_dir, options.placeholder_markers
        )
        self.enumerator = FileEnumerator(target.source_dir)
        self.coordinator = UploadCoordinator(
            client_pool,
            ConditionalUploader(options, key_mapper, target.bucket),
            BatchPlanner(options.partition, len(client_pool), options.batch_size),
            failure_mode=options.failure_mode,
            collect_urls=options.output_file_url,
            group_batches=config.logging.github_annotations,
        )
        self.logger.info("R2 Uploader initialized")

    def run(self) -> RunSummary:
        """ソースディレクトリをバケットに同期"""
        target = self.config.target
        self.logger.info(
            f"Starting R2 upload: {target.source_dir} -> {target.bucket}/{target.destination_dir}"
        )
        records = self.enumerator.scan()
        return self.coordinator.run(records)


__all__ = ['R2Uploader', 'Config', 'RunSummary']
