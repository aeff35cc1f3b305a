"""
对象存储客户端工厂
按名称登记客户端实现，并根据配置选择要创建的实现
"""

from typing import Any, Callable, Dict, List, Optional, Type

from filegate.core.log_utils import get_logger
from filegate.core.storage.base_storage import BaseObjectStore
from filegate.core.storage.exceptions import ConfigurationError

logger = get_logger(__name__)

# 名称 -> 客户端实现
_adapter_registry: Dict[str, Type[BaseObjectStore]] = {}

# 名称 -> 判断该实现是否已配置可用
_availability_checks: Dict[str, Callable[[], bool]] = {}


def register_adapter(
    name: str,
    adapter_class: Type[BaseObjectStore],
    is_configured: Optional[Callable[[], bool]] = None,
) -> None:
    """
    登记对象存储客户端实现

    Args:
        name: 实现名称，与配置项 storage_adapter 对应
        adapter_class: BaseObjectStore 的实现类
        is_configured: 无参检查函数，用于未指定名称时的自动选择
    """
    _adapter_registry[name] = adapter_class
    if is_configured is not None:
        _availability_checks[name] = is_configured
    logger.debug("已注册存储适配器", adapter=name)


def get_adapter_class(name: str) -> Type[BaseObjectStore]:
    """
    Raises:
        ConfigurationError: 名称未登记
    """
    try:
        return _adapter_registry[name]
    except KeyError:
        raise ConfigurationError(
            "存储适配器 '{}' 不存在，可用适配器: {}".format(name, ', '.join(_adapter_registry) or "无")
        ) from None


def detect_adapter() -> str:
    """
    按登记顺序返回第一个已配置可用的实现名称

    Raises:
        ConfigurationError: 没有任何实现可用
    """
    for name, is_configured in _availability_checks.items():
        if is_configured():
            return name
    raise ConfigurationError("没有可用的存储服务。请配置腾讯云COS存储")


def create_adapter(name: Optional[str] = None, **options: Any) -> BaseObjectStore:
    """
    创建对象存储客户端

    Args:
        name: 实现名称，为空时自动选择
        **options: 透传给实现类构造函数的参数（如 config、client）

    Raises:
        ConfigurationError: 名称未登记、没有可用实现或构造失败
    """
    name = name or detect_adapter()
    adapter_class = get_adapter_class(name)

    try:
        adapter = adapter_class(**options)
    except ConfigurationError:
        raise
    except Exception as e:
        logger.error("创建存储适配器失败", exception=e, adapter=name)
        raise ConfigurationError("创建存储适配器 '{}' 失败: {}".format(name, str(e))) from e

    logger.info("存储适配器已创建", adapter=name)
    return adapter


def list_available_adapters() -> List[str]:
    return list(_adapter_registry)


__all__ = [
    'register_adapter',
    'get_adapter_class',
    'detect_adapter',
    'create_adapter',
    'list_available_adapters',
]
