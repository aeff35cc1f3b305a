"""
存储桶统计服务
"""

from collections import Counter
from datetime import datetime, timezone
from typing import Optional

from filegate.core.log_utils import get_logger
from filegate.schemas.files import BucketStats
from filegate.services.files.gateway import StorageGateway
from filegate.utils.file_utils import get_file_extension, get_human_readable_size

logger = get_logger(__name__)


class BucketStatsService:
    """基于一次列举结果汇总文件数量、总大小与扩展名分布"""

    def __init__(self, gateway: StorageGateway):
        self.gateway = gateway

    async def collect(self, prefix: Optional[str] = None) -> BucketStats:
        records = await self.gateway.list(prefix)

        total_size = sum(record.size for record in records)
        by_extension = Counter(get_file_extension(record.file_name).lower() for record in records)

        stats = BucketStats(
            total_files=len(records),
            total_size=total_size,
            total_size_formatted=get_human_readable_size(total_size),
            files_by_extension=dict(by_extension),
            last_updated=datetime.now(timezone.utc),
        )
        logger.info(
            "存储桶统计完成",
            total_files=stats.total_files,
            total_size=stats.total_size_formatted,
        )
        return stats
