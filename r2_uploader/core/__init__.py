"""R2 Uploader コアモジュール"""
from .s3_client import S3ClientPool
from .uploader import ConditionalUploader
from .planner import Batch, BatchPlanner
from .aggregator import ResultAggregator
from .coordinator import UploadCoordinator

__all__ = [
    'S3ClientPool',
    'ConditionalUploader',
    'Batch',
    'BatchPlanner',
    'ResultAggregator',
    'UploadCoordinator',
]
