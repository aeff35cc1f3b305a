"""
测试专用的 mock 工具和辅助函数
提供内存对象存储与常用的 mock 对象，供所有测试使用
"""

import hashlib
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set
from unittest.mock import MagicMock

from filegate.core.storage.base_storage import BaseObjectStore
from filegate.core.storage.exceptions import NotFoundError, StorageBackendError, URLError
from filegate.core.storage.models import (
    BatchDeleteResult,
    ObjectHead,
    ObjectSummary,
    PutResult,
)

TEST_BUCKET = "test-bucket"
TEST_BASE_URL = "https://test-bucket.cos.test-region.myqcloud.com"


class _StoredObject:
    def __init__(self, data: bytes, content_type: str, metadata: Dict[str, str]):
        self.data = data
        self.content_type = content_type
        self.metadata = dict(metadata)
        self.etag = hashlib.md5(data).hexdigest()
        self.last_modified = datetime.now(timezone.utc)


class InMemoryObjectStore(BaseObjectStore):
    """
    内存对象存储

    记录每次原语调用，并支持按原始文件名或键注入故障。
    """

    def __init__(self):
        self.buckets: Set[str] = set()
        self.objects: Dict[str, _StoredObject] = {}
        self.calls: List[str] = []

        # 故障注入
        self.fail_put_for_names: Set[str] = set()
        self.fail_head_with: Optional[Exception] = None
        self.fail_delete_with: Optional[Exception] = None
        self.fail_delete_batch_with: Optional[Exception] = None
        self.delete_batch_errors: Dict[str, str] = {}
        self.fail_presign_with: Optional[Exception] = None

    def add_object(self, key: str, data: bytes, content_type: str = "application/octet-stream",
                   metadata: Optional[Dict[str, str]] = None) -> None:
        """直接放入对象，不记录调用"""
        self.objects[key] = _StoredObject(data, content_type, metadata or {})

    async def ensure_bucket(self, bucket: str) -> None:
        self.calls.append("ensure_bucket")
        self.buckets.add(bucket)

    async def put(self, bucket, key, data, size, content_type, metadata=None) -> PutResult:
        self.calls.append("put")
        metadata = metadata or {}
        if metadata.get("original-filename") in self.fail_put_for_names:
            raise StorageBackendError("模拟写入失败", details={'key': key})
        stored = _StoredObject(data, content_type, metadata)
        self.objects[key] = stored
        return PutResult(etag=stored.etag)

    def _lookup(self, key: str) -> _StoredObject:
        stored = self.objects.get(key)
        if stored is None:
            raise NotFoundError("对象不存在: {}".format(key), key=key)
        return stored

    async def get(self, bucket, key) -> bytes:
        self.calls.append("get")
        return self._lookup(key).data

    async def head(self, bucket, key) -> ObjectHead:
        self.calls.append("head")
        if self.fail_head_with is not None:
            raise self.fail_head_with
        stored = self._lookup(key)
        return ObjectHead(
            size=len(stored.data),
            content_type=stored.content_type,
            etag=stored.etag,
            last_modified=stored.last_modified,
            metadata=dict(stored.metadata),
        )

    async def list(self, bucket, prefix=None) -> List[ObjectSummary]:
        self.calls.append("list")
        return [
            ObjectSummary(key=key, size=len(stored.data), etag=stored.etag,
                          last_modified=stored.last_modified)
            for key, stored in sorted(self.objects.items())
            if key.startswith(prefix or "")
        ]

    async def delete(self, bucket, key) -> None:
        self.calls.append("delete")
        if self.fail_delete_with is not None:
            raise self.fail_delete_with
        self.objects.pop(key, None)

    async def delete_batch(self, bucket, keys) -> BatchDeleteResult:
        self.calls.append("delete_batch")
        if self.fail_delete_batch_with is not None:
            raise self.fail_delete_batch_with
        deleted = []
        for key in keys:
            if key in self.delete_batch_errors:
                continue
            self.objects.pop(key, None)
            deleted.append(key)
        errors = {key: reason for key, reason in self.delete_batch_errors.items() if key in keys}
        return BatchDeleteResult(deleted_keys=deleted, errors=errors)

    async def copy(self, source_bucket, source_key, dest_bucket, dest_key) -> None:
        self.calls.append("copy")
        source = self._lookup(source_key)
        self.objects[dest_key] = _StoredObject(source.data, source.content_type, source.metadata)

    async def presign(self, bucket, key, method, expires_seconds, content_type=None) -> str:
        self.calls.append("presign")
        if self.fail_presign_with is not None:
            raise self.fail_presign_with
        if method not in ("GET", "PUT"):
            raise URLError("不支持的操作类型: {}".format(method))
        return "{}/{}?sign=test&method={}&expires={}".format(TEST_BASE_URL, key, method, expires_seconds)


class MockBuilder:
    """Mock对象构建器 - 用于创建常用的mock对象"""

    @staticmethod
    def create_mock_cos_client():
        """创建COS SDK客户端的mock对象"""
        mock = MagicMock()

        mock.put_object.return_value = {'ETag': '"test-etag"'}
        mock.head_object.return_value = {
            'Content-Length': '1024',
            'Content-Type': 'application/pdf',
            'ETag': '"test-etag"',
            'Last-Modified': 'Mon, 01 Jan 2024 00:00:00 GMT',
            'x-cos-meta-original-filename': 'report.pdf',
        }
        mock.list_objects.return_value = {
            'Contents': [
                {
                    'Key': 'files/2024/01/report-abcd1234.pdf',
                    'Size': '1024',
                    'ETag': '"test-etag"',
                    'LastModified': '2024-01-01T00:00:00.000Z',
                }
            ]
        }
        mock.delete_objects.return_value = {'Deleted': [], 'Error': []}
        mock.get_presigned_url.return_value = "https://presigned-url.com/test-file.pdf"
        mock.bucket_exists.return_value = True

        return mock
