"""
对象存储数据模型
定义对象存储客户端原语返回的数据结构
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class PutResult:
    """
    写入结果

    Attributes:
        etag: 对象ETag（已去除引号）
    """
    etag: str


@dataclass(frozen=True)
class ObjectHead:
    """
    对象头信息

    Attributes:
        size: 内容长度（字节）
        content_type: 内容类型
        etag: 对象ETag
        last_modified: 最后修改时间
        metadata: 自定义元数据（键为小写，不含 x-cos-meta- 前缀）
    """
    size: int
    content_type: str
    etag: str
    last_modified: Optional[datetime] = None
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ObjectSummary:
    """
    列举结果中的单个对象

    Attributes:
        key: 存储键
        size: 文件大小（字节）
        etag: 对象ETag
        last_modified: 最后修改时间
    """
    key: str
    size: int
    etag: str
    last_modified: Optional[datetime] = None


@dataclass(frozen=True)
class BatchDeleteResult:
    """
    批量删除结果

    Attributes:
        deleted_keys: 删除成功的键
        errors: 删除失败的键及原因
    """
    deleted_keys: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)


__all__ = [
    'PutResult',
    'ObjectHead',
    'ObjectSummary',
    'BatchDeleteResult',
]
