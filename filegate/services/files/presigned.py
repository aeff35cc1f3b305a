"""
预签名URL管理
签发有时效的直接访问URL，并计算授权的过期信息
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from filegate.core.config import settings
from filegate.core.log_utils import get_logger
from filegate.core.log_messages import log_messages
from filegate.core.storage.base_storage import BaseObjectStore
from filegate.core.storage.exceptions import NotFoundError, ValidationError
from filegate.schemas.files import PresignedUrlGrant, UrlOperation
from filegate.services.files.gateway import StorageGateway
from filegate.services.files.key_generator import KeyGenerator
from filegate.utils.file_utils import file_name_from_key

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def duration_from_minutes(minutes: Optional[int] = None) -> timedelta:
    """
    按调用边界策略将分钟数转换为有效期

    Args:
        minutes: 有效分钟数，默认取 presign_default_minutes

    Raises:
        ValidationError: 超出 [presign_min_minutes, presign_max_minutes]
    """
    if minutes is None:
        minutes = settings.presign_default_minutes
    if not settings.presign_min_minutes <= minutes <= settings.presign_max_minutes:
        raise ValidationError(
            "有效期必须在 {} 到 {} 分钟之间".format(
                settings.presign_min_minutes, settings.presign_max_minutes
            ),
            details={'minutes': minutes},
        )
    return timedelta(minutes=minutes)


class PresignedUrlManager:
    """
    预签名URL管理器

    下载授权只对已存在的对象签发；上传授权总是指向新生成的键，
    不做存在性检查。
    """

    def __init__(
        self,
        gateway: StorageGateway,
        client: Optional[BaseObjectStore] = None,
        key_generator: Optional[KeyGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            gateway: 用于存在性检查与存储桶名称
            client: 提供签名能力的客户端，默认使用网关持有的客户端
            key_generator: 上传授权使用的键生成器
            clock: 返回当前UTC时间的函数
        """
        self.gateway = gateway
        self.client = client or gateway.client
        self.key_generator = key_generator or gateway.key_generator
        self.clock = clock or _utc_now

    @staticmethod
    def _check_duration(duration: timedelta) -> None:
        if duration.total_seconds() <= 0:
            raise ValidationError("有效期必须为正数", details={'seconds': duration.total_seconds()})

    def _grant(
        self,
        file_name: str,
        key: str,
        url: str,
        duration: timedelta,
        operation: UrlOperation,
    ) -> PresignedUrlGrant:
        expires_at = self.clock() + duration
        logger.info(
            log_messages.PRESIGNED_URL_ISSUED,
            key=key,
            operation=operation.value,
            expires_at=expires_at.isoformat(),
        )
        return PresignedUrlGrant(
            file_name=file_name,
            key=key,
            url=url,
            expires_at=expires_at,
            validity_minutes=int(duration.total_seconds() // 60),
            operation=operation,
        )

    async def issue_for_download(self, key: str, duration: timedelta) -> PresignedUrlGrant:
        """
        签发下载授权

        Raises:
            NotFoundError: 键不存在（签名前检查）
            URLError: 签名失败
        """
        self._check_duration(duration)

        if not await self.gateway.exists(key):
            raise NotFoundError("文件不存在: {}".format(key), key=key)

        url = await self.client.presign(
            self.gateway.bucket, key, UrlOperation.GET.value, int(duration.total_seconds())
        )
        return self._grant(file_name_from_key(key), key, url, duration, UrlOperation.GET)

    async def issue_for_upload(
        self,
        filename: str,
        content_type: str,
        duration: timedelta,
    ) -> PresignedUrlGrant:
        """
        签发上传授权，目标键由键生成器新生成

        Raises:
            ValidationError: 文件名为空
            URLError: 签名失败
        """
        self._check_duration(duration)

        key = self.key_generator.generate_key(filename)
        url = await self.client.presign(
            self.gateway.bucket,
            key,
            UrlOperation.PUT.value,
            int(duration.total_seconds()),
            content_type=content_type,
        )
        return self._grant(filename, key, url, duration, UrlOperation.PUT)
