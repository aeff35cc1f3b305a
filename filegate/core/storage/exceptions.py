"""
存储服务异常定义
定义网关与存储模块中使用的所有异常类型
"""

from typing import Any, Dict, Optional


class StorageError(Exception):
    """
    存储操作基础异常

    所有网关与存储相关异常的基类。

    Attributes:
        message: 错误消息
        code: 错误码
        details: 错误详情
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigurationError(StorageError):
    """存储配置错误"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="CONFIG_ERROR", details=details)


class ValidationError(StorageError):
    """
    文件名、扩展名、大小或批次结构不合法

    总是直接返回给调用方，不做重试。
    """

    def __init__(
        self,
        message: str,
        file_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.file_name = file_name


class NotFoundError(StorageError):
    """对象键不存在"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, code="NOT_FOUND", details=details)
        self.key = key


class StorageBackendError(StorageError):
    """对象存储后端错误（传输或服务端故障）"""

    def __init__(
        self,
        message: str,
        code: str = "BACKEND_ERROR",
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, code=code, details=details)


class UploadError(StorageBackendError):
    """写入对象时发生的读取或后端错误"""

    def __init__(
        self,
        message: str,
        file_name: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, code="UPLOAD_ERROR", details=details)
        self.file_name = file_name


class URLError(StorageBackendError):
    """预签名URL生成或使用错误"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="URL_ERROR", details=details)


class HTTPError(StorageBackendError):
    """通过预签名URL传输时的HTTP错误"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, code="HTTP_ERROR", details=details)
        self.status_code = status_code


class NetworkError(StorageBackendError):
    """通过预签名URL传输时的网络错误"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="NETWORK_ERROR", details=details)


__all__ = [
    'StorageError',
    'ConfigurationError',
    'ValidationError',
    'NotFoundError',
    'StorageBackendError',
    'UploadError',
    'URLError',
    'HTTPError',
    'NetworkError',
]
