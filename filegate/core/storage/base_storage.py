"""
对象存储抽象基类
定义网关所依赖的对象存储客户端原语，支持多种存储后端
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from filegate.core.storage.models import (
    BatchDeleteResult,
    ObjectHead,
    ObjectSummary,
    PutResult,
)


class BaseObjectStore(ABC):
    """
    对象存储客户端抽象基类

    实现类只负责传输与认证，不做业务校验。约定：
    - 键不存在时 get/head 抛出 NotFoundError
    - 其他后端故障抛出 StorageBackendError（保留原始异常链）
    """

    @abstractmethod
    async def ensure_bucket(self, bucket: str) -> None:
        """确保存储桶存在，不存在时创建"""

    @abstractmethod
    async def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        size: int,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> PutResult:
        """
        写入对象

        Args:
            bucket: 存储桶
            key: 存储键
            data: 文件数据
            size: 内容长度（字节）
            content_type: MIME类型
            metadata: 自定义元数据

        Returns:
            PutResult: 写入结果（含ETag）
        """

    @abstractmethod
    async def get(self, bucket: str, key: str) -> bytes:
        """读取对象全部内容"""

    @abstractmethod
    async def head(self, bucket: str, key: str) -> ObjectHead:
        """读取对象头信息"""

    @abstractmethod
    async def list(self, bucket: str, prefix: Optional[str] = None) -> List[ObjectSummary]:
        """列举对象（单页，不处理续传标记）"""

    @abstractmethod
    async def delete(self, bucket: str, key: str) -> None:
        """删除单个对象"""

    @abstractmethod
    async def delete_batch(self, bucket: str, keys: List[str]) -> BatchDeleteResult:
        """批量删除对象，逐键返回成功与失败"""

    @abstractmethod
    async def copy(
        self,
        source_bucket: str,
        source_key: str,
        dest_bucket: str,
        dest_key: str
    ) -> None:
        """服务端复制对象"""

    @abstractmethod
    async def presign(
        self,
        bucket: str,
        key: str,
        method: str,
        expires_seconds: int,
        content_type: Optional[str] = None
    ) -> str:
        """
        生成预签名URL

        Args:
            bucket: 存储桶
            key: 存储键
            method: HTTP方法（GET/PUT）
            expires_seconds: 有效期（秒）
            content_type: PUT 请求的内容类型（可选）

        Returns:
            str: 预签名URL
        """


__all__ = ['BaseObjectStore']
