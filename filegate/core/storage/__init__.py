"""
存储服务模块
提供统一的对象存储客户端访问接口，支持多种存储适配器
"""

from typing import Optional

from filegate.core.config import settings
from filegate.core.cos import get_cos_config, validate_cos_config
from filegate.core.storage.base_storage import BaseObjectStore
from filegate.core.storage.adapters.tencent_cos import TencentCosAdapter
from filegate.core.storage.exceptions import *
from filegate.core.storage.factory import (
    create_adapter,
    detect_adapter,
    list_available_adapters,
    register_adapter,
)
from filegate.core.storage.models import *


def _cos_configured() -> bool:
    return validate_cos_config(get_cos_config())


# 自动注册腾讯云COS适配器
register_adapter(TencentCosAdapter.ADAPTER_NAME, TencentCosAdapter, is_configured=_cos_configured)


def get_storage_client(adapter_name: Optional[str] = None) -> BaseObjectStore:
    """
    创建对象存储客户端实例

    每次调用返回新实例，由调用方持有并注入到 StorageGateway。

    Args:
        adapter_name: 适配器名称（如 'tencent_cos'），不指定则读取配置或自动检测

    Raises:
        ConfigurationError: 当没有可用的存储服务时抛出

    Example:
        >>> client = get_storage_client()
        >>> gateway = StorageGateway(client, settings.bucket_name, settings.public_base_url)
    """
    return create_adapter(adapter_name or settings.storage_adapter)


__all__ = [
    # 工厂函数
    'get_storage_client',
    'create_adapter',
    'detect_adapter',
    'list_available_adapters',
    'register_adapter',
    # 抽象接口
    'BaseObjectStore',
    # 适配器类
    'TencentCosAdapter',
]
