"""
文件服务模块
包含文件校验、存储网关、预签名URL与批量操作等业务服务
"""

from .key_generator import KeyGenerator
from .validator import FileValidator
from .gateway import StorageGateway
from .presigned import PresignedUrlManager, duration_from_minutes
from .batch import BatchCoordinator
from .stats import BucketStatsService

__all__ = [
    'KeyGenerator',
    'FileValidator',
    'StorageGateway',
    'PresignedUrlManager',
    'duration_from_minutes',
    'BatchCoordinator',
    'BucketStatsService',
]
