"""
文件网关相关的数据模型
文件记录、预签名授权、批量操作结果等值对象
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import BinaryIO, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from filegate.utils.file_utils import get_human_readable_size

T = TypeVar('T')
ItemT = TypeVar('ItemT')


class FileRecord(BaseModel):
    """存储对象的文件记录，由网关在写入/查询/复制/列举成功后产生"""

    model_config = ConfigDict(frozen=True)

    file_name: str = Field(..., description="展示用文件名，可能重复")
    key: str = Field(..., description="存储键，命名空间内唯一")
    size: int = Field(..., ge=0, description="文件大小（字节）")
    content_type: str = Field(..., description="MIME类型")
    etag: str = Field(default="", description="对象ETag")
    last_modified: Optional[datetime] = Field(default=None, description="最后修改时间（UTC）")
    url: str = Field(..., description="对象直接访问URL")

    @property
    def formatted_size(self) -> str:
        """人类可读的文件大小，如 1.0 MB"""
        return get_human_readable_size(self.size)


class UrlOperation(str, Enum):
    """预签名URL操作类型"""
    GET = "GET"
    PUT = "PUT"


class PresignedUrlGrant(BaseModel):
    """
    预签名URL授权

    授权不持久化也不可撤销，过期由对象存储的签名校验保证；
    有效性只在读取时根据 expires_at 与当前时间计算。
    """

    model_config = ConfigDict(frozen=True)

    file_name: str
    key: str
    url: str
    expires_at: datetime
    validity_minutes: int = Field(..., ge=0)
    operation: UrlOperation

    @staticmethod
    def _normalize_now(now: Optional[datetime]) -> datetime:
        # 不带时区的时间按UTC处理
        if now is None:
            return datetime.now(timezone.utc)
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """授权在给定时间（默认当前UTC时间）是否仍有效"""
        return self._normalize_now(now) < self.expires_at

    def minutes_remaining(self, now: Optional[datetime] = None) -> int:
        """距离过期的整分钟数，已过期为0"""
        now = self._normalize_now(now)
        if not self.is_valid(now):
            return 0
        return int((self.expires_at - now).total_seconds()) // 60


@dataclass
class UploadFile:
    """
    待上传文件

    content 可以是字节串或二进制流；size 为声明大小，
    字节串未声明时取其长度，声明时必须与长度一致；流必须声明大小。
    """
    filename: str
    content: Union[bytes, BinaryIO]
    size: Optional[int] = None

    def __post_init__(self) -> None:
        if isinstance(self.content, (bytes, bytearray)):
            if self.size is None:
                self.size = len(self.content)
            elif self.size != len(self.content):
                raise ValueError(
                    "声明大小 {} 与内容长度 {} 不一致".format(self.size, len(self.content))
                )
        elif self.size is None:
            raise ValueError("流式内容必须声明 size")

    def read(self) -> bytes:
        """读取全部内容，流读取失败时抛出 OSError"""
        if isinstance(self.content, (bytes, bytearray)):
            return bytes(self.content)
        return self.content.read()


@dataclass(frozen=True)
class BatchFailure(Generic[ItemT]):
    """批量操作中失败的单项及原因"""
    item: ItemT
    reason: str


@dataclass
class BatchResult(Generic[ItemT, T]):
    """
    批量操作结果

    每个输入项恰好出现在 succeeded 或 failed 之一中：
    len(succeeded) + len(failed) == len(attempted)
    """
    attempted: List[ItemT] = field(default_factory=list)
    succeeded: List[T] = field(default_factory=list)
    failed: List[BatchFailure[ItemT]] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    @property
    def is_complete(self) -> bool:
        """分区不变量是否成立"""
        return self.success_count + self.failure_count == len(self.attempted)


class DeleteSummary(BaseModel):
    """批量删除汇总"""

    model_config = ConfigDict(frozen=True)

    total_requested: int = 0
    deleted_count: int = 0
    failed_count: int = 0
    failed_keys: Dict[str, str] = Field(default_factory=dict, description="失败的键及原因")

    @classmethod
    def empty(cls) -> "DeleteSummary":
        return cls()


class BucketStats(BaseModel):
    """存储桶统计"""

    model_config = ConfigDict(frozen=True)

    total_files: int
    total_size: int
    total_size_formatted: str
    files_by_extension: Dict[str, int]
    last_updated: datetime


__all__ = [
    'FileRecord',
    'UrlOperation',
    'PresignedUrlGrant',
    'UploadFile',
    'BatchFailure',
    'BatchResult',
    'DeleteSummary',
    'BucketStats',
]
