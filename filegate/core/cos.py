"""
腾讯云COS配置模块
从全局配置派生COS客户端所需的连接参数
"""

from typing import Optional
from pydantic import BaseModel, Field

from filegate.core.config import settings


class COSConfig(BaseModel):
    """COS配置数据类"""

    secret_id: str = Field(default="", description="腾讯云COS SecretId")
    secret_key: str = Field(default="", description="腾讯云COS SecretKey")
    region: str = Field(default="ap-beijing", description="COS地域")
    bucket: str = Field(default="", description="COS存储桶名称")
    scheme: str = Field(default="https", description="连接协议")
    endpoint: Optional[str] = Field(default=None, description="自定义端点（兼容S3的本地服务等）")

    timeout: int = Field(default=30, description="连接超时时间（秒）")
    max_retries: int = Field(default=3, description="上传最大重试次数")
    retry_delay_base: float = Field(default=1.0, description="重试基础延迟（秒）")


def get_cos_config() -> COSConfig:
    """从全局配置获取COS配置"""
    return COSConfig(
        secret_id=settings.cos_secret_id,
        secret_key=settings.cos_secret_key,
        region=settings.cos_region,
        bucket=settings.bucket_name,
        scheme=settings.cos_scheme,
        endpoint=settings.cos_endpoint,
        timeout=settings.cos_timeout,
        max_retries=settings.cos_max_retries,
        retry_delay_base=settings.cos_retry_delay_base,
    )


def validate_cos_config(config: Optional[COSConfig]) -> bool:
    """验证COS配置完整性"""
    if config is None:
        return False

    required_fields = ["secret_id", "secret_key", "bucket"]

    for field in required_fields:
        if not getattr(config, field):
            return False

    return True
