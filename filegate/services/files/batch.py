"""
批量操作协调
多文件上传与删除，逐项记录成功与失败
"""

import asyncio
from typing import Optional, Sequence

from filegate.core.config import settings
from filegate.core.log_utils import get_logger
from filegate.core.log_messages import log_messages
from filegate.core.storage.exceptions import StorageError
from filegate.schemas.files import (
    BatchFailure,
    BatchResult,
    DeleteSummary,
    FileRecord,
    UploadFile,
)
from filegate.services.files.gateway import StorageGateway
from filegate.services.files.validator import FileValidator

logger = get_logger(__name__)


class BatchCoordinator:
    """
    批量操作协调器

    批次结构校验失败时整体中止且不触达存储；通过后每个文件独立上传，
    单个文件失败不影响其他文件。对象存储没有多对象事务，
    部分成功是正常结果。
    """

    def __init__(
        self,
        gateway: StorageGateway,
        validator: Optional[FileValidator] = None,
        concurrency: Optional[int] = None,
    ):
        self.gateway = gateway
        self.validator = validator or gateway.validator
        self.concurrency = max(1, concurrency or settings.batch_concurrency)

    async def upload_all(self, files: Sequence[UploadFile]) -> BatchResult[UploadFile, FileRecord]:
        """
        批量上传文件

        Args:
            files: 待上传文件列表

        Returns:
            BatchResult: 成功记录与失败原因，顺序与输入一致

        Raises:
            ValidationError: 批次为空、数量或总大小超限（不做任何上传）
        """
        files = list(files)
        self.validator.validate_batch_shape(files)

        logger.info(log_messages.BATCH_UPLOAD_START, total=len(files))

        semaphore = asyncio.Semaphore(self.concurrency)

        async def upload_one(file: UploadFile):
            async with semaphore:
                try:
                    return await self.gateway.upload(file)
                except StorageError as e:
                    logger.error(log_messages.FILE_UPLOAD_FAILED, exception=e, file_name=file.filename)
                    return BatchFailure(item=file, reason=e.message)
                except Exception as e:
                    logger.error(log_messages.FILE_UPLOAD_FAILED, exception=e, file_name=file.filename)
                    return BatchFailure(item=file, reason=str(e) or type(e).__name__)

        outcomes = await asyncio.gather(*(upload_one(file) for file in files))

        result: BatchResult[UploadFile, FileRecord] = BatchResult(attempted=files)
        for outcome in outcomes:
            if isinstance(outcome, BatchFailure):
                result.failed.append(outcome)
            else:
                result.succeeded.append(outcome)

        if result.failed:
            logger.warning(
                "部分文件上传失败",
                failed_files=", ".join(failure.item.filename for failure in result.failed),
            )

        logger.info(
            log_messages.BATCH_UPLOAD_DONE,
            succeeded=result.success_count,
            failed=result.failure_count,
        )
        return result

    async def delete_all(self, keys: Sequence[str]) -> DeleteSummary:
        """
        批量删除对象

        空列表直接返回全零汇总，不调用存储。
        """
        keys = list(keys)
        if not keys:
            return DeleteSummary.empty()
        return await self.gateway.delete_many(keys)
