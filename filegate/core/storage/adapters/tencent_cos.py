"""
腾讯云COS存储适配器
实现BaseObjectStore接口，将COS SDK的同步调用包装为异步原语
"""

import asyncio
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from functools import partial
from typing import Any, Callable, Dict, List, Optional, TypeVar

from qcloud_cos import CosConfig, CosS3Client
from qcloud_cos.cos_exception import CosClientError, CosServiceError

from filegate.core.cos import COSConfig, get_cos_config, validate_cos_config
from filegate.core.log_utils import get_logger
from filegate.core.storage.base_storage import BaseObjectStore
from filegate.core.storage.exceptions import (
    ConfigurationError,
    NotFoundError,
    StorageBackendError,
    URLError,
    UploadError,
)
from filegate.core.storage.models import (
    BatchDeleteResult,
    ObjectHead,
    ObjectSummary,
    PutResult,
)

logger = get_logger(__name__)

T = TypeVar('T')

META_PREFIX = "x-cos-meta-"
NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchResource"})


def _is_not_found(error: Exception) -> bool:
    """判断COS错误是否表示对象不存在"""
    if not isinstance(error, CosServiceError):
        return False
    return error.get_status_code() == 404 or error.get_error_code() in NOT_FOUND_CODES


def _strip_etag(value: Optional[str]) -> str:
    return (value or "").strip('"')


def _parse_http_date(value: Optional[str]) -> Optional[datetime]:
    """解析 Last-Modified 头（RFC 1123）"""
    if not value:
        return None
    try:
        return parsedate_to_datetime(value).astimezone(timezone.utc)
    except (TypeError, ValueError):
        return None


def _parse_iso_date(value: Optional[str]) -> Optional[datetime]:
    """解析列举结果中的 LastModified（ISO 8601）"""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TencentCosAdapter(BaseObjectStore):
    """
    腾讯云COS存储适配器

    使用腾讯云COS SDK提供对象存储原语，支持：
    - 对象写入/读取/头信息/列举
    - 单个与批量删除、服务端复制
    - 预签名URL生成
    """

    # 适配器名称，用于工厂模式注册
    ADAPTER_NAME: str = "tencent_cos"

    def __init__(self, config: Optional[COSConfig] = None, client: Optional[CosS3Client] = None) -> None:
        """
        初始化COS存储客户端

        Args:
            config: COS配置，不指定则从全局配置读取
            client: 预先构造的SDK客户端（可选）

        Raises:
            ConfigurationError: 配置不完整时抛出
        """
        self.config = config or get_cos_config()

        if not validate_cos_config(self.config):
            raise ConfigurationError("腾讯云COS配置不完整，请检查环境变量")

        self._client = client or self._create_client()

    def _create_client(self) -> CosS3Client:
        """创建COS客户端"""
        cos_config = CosConfig(
            Region=self.config.region,
            SecretId=self.config.secret_id,
            SecretKey=self.config.secret_key,
            Scheme=self.config.scheme,
            Timeout=self.config.timeout,
            Endpoint=self.config.endpoint,
        )
        return CosS3Client(cos_config)

    async def _run_in_executor(self, func: Callable[..., T], **kwargs: Any) -> T:
        """
        在线程池中运行同步函数

        Args:
            func: 同步函数
            **kwargs: 函数关键字参数

        Returns:
            函数执行结果
        """
        loop = asyncio.get_running_loop()
        bound_func = partial(func, **kwargs)
        return await loop.run_in_executor(None, bound_func)

    async def _call(self, operation: str, func: Callable[..., T], key: Optional[str] = None, **kwargs: Any) -> T:
        """
        调用SDK并统一转换异常

        Raises:
            NotFoundError: 对象不存在
            StorageBackendError: 其他COS服务端或客户端错误
        """
        try:
            return await self._run_in_executor(func, **kwargs)
        except CosServiceError as e:
            if key is not None and _is_not_found(e):
                raise NotFoundError("对象不存在: {}".format(key), key=key) from e
            logger.error(
                "COS服务端错误",
                operation=operation,
                key=key,
                status_code=e.get_status_code(),
                error_code=e.get_error_code(),
            )
            raise StorageBackendError(
                "{}失败: {}".format(operation, e.get_error_msg()),
                details={'key': key, 'error_code': e.get_error_code()}
            ) from e
        except CosClientError as e:
            logger.error("COS客户端错误", operation=operation, key=key, error=str(e))
            raise StorageBackendError("{}失败: {}".format(operation, str(e)), details={'key': key}) from e

    async def ensure_bucket(self, bucket: str) -> None:
        exists = await self._call("检查存储桶", self._client.bucket_exists, Bucket=bucket)
        if not exists:
            await self._call("创建存储桶", self._client.create_bucket, Bucket=bucket)
            logger.info("已创建COS存储桶", bucket=bucket)

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
        上传对象到COS，按配置的次数重试

        Raises:
            UploadError: 重试耗尽后仍失败时抛出
        """
        upload_params: Dict[str, Any] = {
            'Bucket': bucket,
            'Key': key,
            'Body': data,
            'ContentType': content_type,
            'ContentLength': str(size),
        }

        if metadata:
            upload_params['Metadata'] = {
                META_PREFIX + name: value for name, value in metadata.items()
            }

        max_retries = self.config.max_retries

        for attempt in range(max_retries + 1):
            try:
                response = await self._run_in_executor(self._client.put_object, **upload_params)
                break
            except (CosServiceError, CosClientError) as e:
                if attempt < max_retries:
                    logger.warning("COS上传失败，准备重试", key=key, attempt=attempt + 1)
                    await asyncio.sleep(self.config.retry_delay_base * (attempt + 1))
                    continue
                logger.error(
                    "COS上传失败，重试{}次后仍然失败".format(max_retries),
                    key=key, error=str(e)
                )
                raise UploadError("上传文件失败: {}".format(str(e)), details={'key': key}) from e

        return PutResult(etag=_strip_etag(response.get('ETag')))

    async def get(self, bucket: str, key: str) -> bytes:
        response = await self._call("下载文件", self._client.get_object, key=key, Bucket=bucket, Key=key)
        stream = response['Body'].get_stream(chunk_size=64 * 1024)
        return await self._read_stream(stream, key)

    async def _read_stream(self, stream, key: str) -> bytes:
        """在线程池中读取响应体"""
        try:
            return await self._run_in_executor(_join_chunks, chunks=stream)
        except (CosClientError, OSError) as e:
            logger.error("COS读取响应体失败", key=key, error=str(e))
            raise StorageBackendError("下载文件失败: {}".format(str(e)), details={'key': key}) from e

    async def head(self, bucket: str, key: str) -> ObjectHead:
        response = await self._call("获取文件元数据", self._client.head_object, key=key, Bucket=bucket, Key=key)
        metadata = {
            name[len(META_PREFIX):].lower(): value
            for name, value in response.items()
            if name.lower().startswith(META_PREFIX)
        }
        return ObjectHead(
            size=int(response.get('Content-Length', 0) or 0),
            content_type=response.get('Content-Type', 'application/octet-stream'),
            etag=_strip_etag(response.get('ETag')),
            last_modified=_parse_http_date(response.get('Last-Modified')),
            metadata=metadata,
        )

    async def list(self, bucket: str, prefix: Optional[str] = None) -> List[ObjectSummary]:
        response = await self._call(
            "列举文件", self._client.list_objects, Bucket=bucket, Prefix=prefix or ""
        )
        return [
            ObjectSummary(
                key=item['Key'],
                size=int(item.get('Size', 0) or 0),
                etag=_strip_etag(item.get('ETag')),
                last_modified=_parse_iso_date(item.get('LastModified')),
            )
            for item in response.get('Contents', [])
        ]

    async def delete(self, bucket: str, key: str) -> None:
        await self._call("删除文件", self._client.delete_object, Bucket=bucket, Key=key)
        logger.info("COS文件删除成功", key=key)

    async def delete_batch(self, bucket: str, keys: List[str]) -> BatchDeleteResult:
        response = await self._call(
            "批量删除文件",
            self._client.delete_objects,
            Bucket=bucket,
            Delete={'Object': [{'Key': key} for key in keys], 'Quiet': 'false'},
        )
        deleted = [item['Key'] for item in response.get('Deleted', [])]
        errors = {
            item['Key']: "{}: {}".format(item.get('Code', ''), item.get('Message', ''))
            for item in response.get('Error', [])
        }
        return BatchDeleteResult(deleted_keys=deleted, errors=errors)

    async def copy(self, source_bucket: str, source_key: str, dest_bucket: str, dest_key: str) -> None:
        copy_source = {
            'Bucket': source_bucket,
            'Key': source_key,
            'Region': self.config.region,
        }
        if self.config.endpoint:
            copy_source['Endpoint'] = self.config.endpoint
        await self._call(
            "复制文件",
            self._client.copy_object,
            key=source_key,
            Bucket=dest_bucket,
            Key=dest_key,
            CopySource=copy_source,
        )

    async def presign(
        self,
        bucket: str,
        key: str,
        method: str,
        expires_seconds: int,
        content_type: Optional[str] = None
    ) -> str:
        """
        生成预签名访问URL

        Raises:
            URLError: 操作类型不支持或生成失败时抛出
        """
        method = method.upper()
        if method not in ("GET", "PUT"):
            raise URLError("不支持的操作类型: {}".format(method))

        headers = {'Content-Type': content_type} if method == "PUT" and content_type else {}

        try:
            url = await self._run_in_executor(
                self._client.get_presigned_url,
                Method=method,
                Bucket=bucket,
                Key=key,
                Expired=expires_seconds,
                Params={},
                Headers=headers,
            )
        except (CosServiceError, CosClientError) as e:
            logger.error("COS生成预签名URL失败", key=key, expires=expires_seconds, error=str(e))
            raise URLError("生成预签名URL失败: {}".format(str(e))) from e

        logger.debug("成功生成COS预签名URL", key=key[:50], method=method, expires=expires_seconds)
        return url


def _join_chunks(chunks) -> bytes:
    return b"".join(chunks)


__all__ = ['TencentCosAdapter']
