"""
存储网关
对象存储客户端之上的文件操作契约，是唯一直接访问存储的组件
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from filegate.core.config import settings
from filegate.core.log_utils import get_logger
from filegate.core.log_messages import log_messages
from filegate.core.storage.base_storage import BaseObjectStore
from filegate.core.storage.exceptions import (
    NotFoundError,
    StorageBackendError,
    UploadError,
    ValidationError,
)
from filegate.core.storage.models import ObjectSummary
from filegate.schemas.files import DeleteSummary, FileRecord, UploadFile
from filegate.services.files import content_types
from filegate.services.files.key_generator import KeyGenerator
from filegate.services.files.validator import FileValidator
from filegate.utils.file_utils import file_name_from_key

logger = get_logger(__name__)

# 存储在对象上的自定义元数据键
META_ORIGINAL_FILENAME = "original-filename"
META_CONTENT_TYPE = "content-type"
META_UPLOAD_TIMESTAMP = "upload-timestamp"
META_UPLOADED_BY = "uploaded-by"


class StorageGateway:
    """
    存储网关

    持有存储桶名称与公开访问基础URL，所有返回的 FileRecord
    的 url 均为 {public_base_url}/{key}。
    """

    def __init__(
        self,
        client: BaseObjectStore,
        bucket: str,
        public_base_url: str,
        validator: Optional[FileValidator] = None,
        key_generator: Optional[KeyGenerator] = None,
        uploaded_by: Optional[str] = None,
    ):
        """
        初始化存储网关

        Args:
            client: 对象存储客户端
            bucket: 存储桶名称
            public_base_url: 对象公开访问的基础URL
            validator: 单文件上传使用的校验器
            key_generator: 单文件上传使用的键生成器
            uploaded_by: 写入元数据的上传方标识
        """
        self.client = client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.validator = validator or FileValidator()
        self.key_generator = key_generator or KeyGenerator()
        self.uploaded_by = uploaded_by or settings.storage_uploaded_by
        logger.info("存储网关已初始化", bucket=bucket, base_url=self.public_base_url)

    def build_url(self, key: str) -> str:
        """构建对象直接访问URL"""
        return "{}/{}".format(self.public_base_url, key)

    def _build_metadata(self, file_name: str, content_type: str) -> Dict[str, str]:
        return {
            META_ORIGINAL_FILENAME: file_name,
            META_CONTENT_TYPE: content_type,
            META_UPLOAD_TIMESTAMP: datetime.now(timezone.utc).isoformat(),
            META_UPLOADED_BY: self.uploaded_by,
        }

    async def store(
        self,
        key: str,
        content: bytes,
        size: int,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None,
        file_name: Optional[str] = None,
    ) -> FileRecord:
        """
        写入对象

        Args:
            key: 存储键
            content: 文件内容
            size: 内容长度（字节）
            content_type: MIME类型
            metadata: 额外的自定义元数据，覆盖默认元数据中的同名键
            file_name: 展示用文件名，默认取键的最后一段

        Returns:
            FileRecord: 新写入对象的记录

        Raises:
            UploadError: 传输或服务端故障
        """
        file_name = file_name or file_name_from_key(key)
        object_metadata = self._build_metadata(file_name, content_type)
        if metadata:
            object_metadata.update(metadata)

        try:
            result = await self.client.put(
                self.bucket, key, content, size, content_type, object_metadata
            )
        except UploadError:
            raise
        except StorageBackendError as e:
            logger.error(log_messages.FILE_UPLOAD_FAILED, exception=e, key=key)
            raise UploadError(
                "存储服务写入失败: {}".format(e.message), file_name=file_name, details={'key': key}
            ) from e

        logger.info(log_messages.FILE_UPLOAD_SUCCESS, key=key, etag=result.etag, size=size)

        return FileRecord(
            file_name=file_name,
            key=key,
            size=size,
            content_type=content_type,
            etag=result.etag,
            last_modified=datetime.now(timezone.utc),
            url=self.build_url(key),
        )

    async def upload(self, file: UploadFile) -> FileRecord:
        """
        校验并上传单个文件

        Raises:
            ValidationError: 文件不合法，或读取到的内容长度与声明大小不符（不写入存储）
            UploadError: 读取内容或写入存储失败
        """
        self.validator.validate_one(file)

        key = self.key_generator.generate_key(file.filename)
        content_type = content_types.resolve(file.filename)

        try:
            content = file.read()
        except Exception as e:
            logger.error("读取上传文件内容失败", exception=e, file_name=file.filename)
            raise UploadError("读取文件内容失败: {}".format(e), file_name=file.filename) from e

        try:
            self.validator.validate_content_length(file, len(content))
        except ValidationError as e:
            logger.warning(log_messages.FILE_VALIDATION_FAILED, file_name=file.filename, reason=e.message)
            raise

        return await self.store(key, content, len(content), content_type, file_name=file.filename)

    async def retrieve(self, key: str) -> bytes:
        """
        读取对象全部内容

        Raises:
            NotFoundError: 键不存在
            StorageBackendError: 其他后端故障
        """
        try:
            data = await self.client.get(self.bucket, key)
        except NotFoundError:
            logger.warning(log_messages.FILE_NOT_FOUND, key=key)
            raise

        logger.info(log_messages.FILE_DOWNLOAD_SUCCESS, key=key, size=len(data))
        return data

    async def get_info(self, key: str) -> FileRecord:
        """
        获取对象的文件记录

        展示用文件名优先取写入时保存的 original-filename 元数据，
        缺失时退回到键的最后一段。

        Raises:
            NotFoundError: 键不存在
            StorageBackendError: 其他后端故障
        """
        try:
            head = await self.client.head(self.bucket, key)
        except NotFoundError:
            logger.warning(log_messages.FILE_NOT_FOUND, key=key)
            raise

        file_name = head.metadata.get(META_ORIGINAL_FILENAME) or file_name_from_key(key)
        logger.debug(log_messages.FILE_INFO_SUCCESS, key=key)

        return FileRecord(
            file_name=file_name,
            key=key,
            size=head.size,
            content_type=head.content_type,
            etag=head.etag,
            last_modified=head.last_modified,
            url=self.build_url(key),
        )

    async def exists(self, key: str) -> bool:
        """
        检查对象是否存在

        尽力而为：键不存在返回False；其他后端故障记录日志后同样返回False，
        调用方只能把False理解为"按不存在处理"。
        """
        try:
            await self.client.head(self.bucket, key)
            return True
        except NotFoundError:
            return False
        except StorageBackendError as e:
            logger.error("检查文件是否存在时出错", exception=e, key=key)
            return False

    async def list(self, prefix: Optional[str] = None) -> List[FileRecord]:
        """
        列举对象（单次调用，不分页，顺序由后端决定）

        Raises:
            StorageBackendError: 后端故障
        """
        summaries = await self.client.list(self.bucket, prefix)
        records = [self._summary_to_record(summary) for summary in summaries]
        logger.info(log_messages.FILE_LIST_SUCCESS, prefix=prefix or "", count=len(records))
        return records

    def _summary_to_record(self, summary: ObjectSummary) -> FileRecord:
        file_name = file_name_from_key(summary.key)
        return FileRecord(
            file_name=file_name,
            key=summary.key,
            size=summary.size,
            content_type=content_types.resolve(file_name),
            etag=summary.etag,
            last_modified=summary.last_modified,
            url=self.build_url(summary.key),
        )

    async def delete(self, key: str) -> bool:
        """
        删除对象

        先检查存在性；删除调用本身失败时记录日志并返回False。

        Raises:
            NotFoundError: 键不存在
        """
        if not await self.exists(key):
            logger.warning("尝试删除不存在的文件", key=key)
            raise NotFoundError("文件不存在: {}".format(key), key=key)

        try:
            await self.client.delete(self.bucket, key)
        except StorageBackendError as e:
            logger.error(log_messages.FILE_DELETE_FAILED, exception=e, key=key)
            return False

        logger.info(log_messages.FILE_DELETE_SUCCESS, key=key)
        return True

    async def delete_many(self, keys: List[str]) -> DeleteSummary:
        """
        批量删除对象

        单个键的失败只记录日志，不中断批次；整个调用失败时所有键计为失败。
        重复的键只删除一次，按首次出现的顺序保留。
        """
        keys = list(dict.fromkeys(keys))
        if not keys:
            return DeleteSummary.empty()

        try:
            result = await self.client.delete_batch(self.bucket, list(keys))
        except StorageBackendError as e:
            logger.error("批量删除调用失败", exception=e, total=len(keys))
            return DeleteSummary(
                total_requested=len(keys),
                deleted_count=0,
                failed_count=len(keys),
                failed_keys={key: e.message for key in keys},
            )

        for key, reason in result.errors.items():
            logger.warning("删除文件失败", key=key, reason=reason)

        logger.info(
            log_messages.BATCH_DELETE_DONE,
            deleted=len(result.deleted_keys),
            failed=len(result.errors),
        )

        return DeleteSummary(
            total_requested=len(keys),
            deleted_count=len(result.deleted_keys),
            failed_count=len(result.errors),
            failed_keys=dict(result.errors),
        )

    async def copy(self, source_key: str, destination_key: str) -> FileRecord:
        """
        复制对象，并重新读取目标对象信息作为返回值

        Raises:
            NotFoundError: 源键不存在
            StorageBackendError: 复制失败
        """
        if not await self.exists(source_key):
            raise NotFoundError("源文件不存在: {}".format(source_key), key=source_key)

        await self.client.copy(self.bucket, source_key, self.bucket, destination_key)
        logger.info(log_messages.FILE_COPY_SUCCESS, source_key=source_key, destination_key=destination_key)

        return await self.get_info(destination_key)
