"""
预签名URL传输工具
持有预签名授权的客户端无需存储凭证即可直接上传或下载
"""

from typing import Optional

import httpx

from filegate.core.log_utils import get_logger
from filegate.core.storage.exceptions import HTTPError, NetworkError, URLError
from filegate.schemas.files import PresignedUrlGrant, UrlOperation

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 60.0


def _ensure_usable(grant: PresignedUrlGrant, operation: UrlOperation) -> None:
    if grant.operation != operation:
        raise URLError(
            "授权操作类型不匹配: 需要 {}，实际为 {}".format(operation.value, grant.operation.value)
        )
    if not grant.is_valid():
        raise URLError("预签名URL已过期: {}".format(grant.key), details={'expires_at': grant.expires_at.isoformat()})


async def _send(
    grant: PresignedUrlGrant,
    client: Optional[httpx.AsyncClient],
    method: str,
    **kwargs,
) -> httpx.Response:
    try:
        if client is not None:
            response = await client.request(method, grant.url, **kwargs)
            response.raise_for_status()
            return response
        async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as own_client:
            response = await own_client.request(method, grant.url, **kwargs)
            response.raise_for_status()
            return response
    except httpx.HTTPStatusError as e:
        logger.error("预签名URL请求HTTP错误", key=grant.key, status_code=e.response.status_code)
        raise HTTPError(
            "预签名URL请求失败 (HTTP {})".format(e.response.status_code),
            status_code=e.response.status_code,
        ) from e
    except httpx.RequestError as e:
        logger.error("预签名URL请求网络错误", key=grant.key, error=str(e))
        raise NetworkError("预签名URL请求失败 (网络错误): {}".format(str(e))) from e


async def download_via_grant(
    grant: PresignedUrlGrant,
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """
    通过下载授权获取对象内容

    Args:
        grant: GET 类型的预签名授权
        client: 复用的HTTP客户端（可选）

    Returns:
        bytes: 对象内容

    Raises:
        URLError: 授权类型不符或已过期（不发请求）
        HTTPError: 服务端返回非2xx状态
        NetworkError: 网络错误
    """
    _ensure_usable(grant, UrlOperation.GET)
    response = await _send(grant, client, "GET")
    logger.info("预签名下载成功", key=grant.key, size_bytes=len(response.content))
    return response.content


async def upload_via_grant(
    grant: PresignedUrlGrant,
    data: bytes,
    content_type: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[str]:
    """
    通过上传授权写入对象

    Args:
        grant: PUT 类型的预签名授权
        data: 文件内容
        content_type: 签发授权时使用的内容类型
        client: 复用的HTTP客户端（可选）

    Returns:
        Optional[str]: 响应中的ETag（已去除引号）

    Raises:
        URLError: 授权类型不符或已过期（不发请求）
        HTTPError: 服务端返回非2xx状态
        NetworkError: 网络错误
    """
    _ensure_usable(grant, UrlOperation.PUT)
    response = await _send(
        grant, client, "PUT", content=data, headers={"Content-Type": content_type}
    )
    etag = response.headers.get("ETag")
    logger.info("预签名上传成功", key=grant.key, size_bytes=len(data))
    return etag.strip('"') if etag else None


__all__ = ['download_via_grant', 'upload_via_grant']
