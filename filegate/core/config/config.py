"""
应用配置管理模块
统一管理所有配置信息，包括环境变量和文件配置
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

from filegate.utils.config_utils import (
    get_workspace_path, get_config_path, parse_list_config
)

MIB = 1024 * 1024


class Settings(BaseSettings):
    """应用配置类 - 统一管理所有配置信息"""

    # ==================== 基础配置 ====================
    app_name: str = "filegate"
    app_version: str = "1.0.0"
    app_debug: bool = False
    app_env: str = "development"

    # ==================== COS存储配置 ====================
    cos_secret_id: str = ""
    cos_secret_key: str = ""
    cos_region: str = "ap-beijing"
    cos_bucket: str = ""
    cos_scheme: str = "https"
    cos_endpoint: Optional[str] = None

    cos_timeout: int = 30
    cos_max_retries: int = 3
    cos_retry_delay_base: float = 1.0

    # ==================== 网关配置 ====================
    storage_adapter: Optional[str] = None
    # 为空时使用 cos_bucket
    storage_bucket: str = ""
    # 为空时根据COS地域推导
    storage_public_base_url: str = ""
    storage_uploaded_by: str = "filegate"

    # ==================== 上传策略配置 ====================
    max_file_size: int = 50 * MIB
    max_batch_files: int = 10
    max_batch_size: int = 100 * MIB
    batch_concurrency: int = 10

    allowed_extensions: str = (
        "jpg,jpeg,png,gif,bmp,webp,"
        "pdf,doc,docx,txt,rtf,"
        "xls,xlsx,csv,"
        "zip,rar,7z,"
        "mp3,wav,ogg,"
        "mp4,avi,mkv,webm"
    )

    # ==================== 预签名URL配置 ====================
    presign_default_minutes: int = 60
    presign_min_minutes: int = 1
    presign_max_minutes: int = 1440

    # ==================== 日志配置 ====================
    log_level: str = "INFO"
    log_file: str = "filegate.log"
    log_dir: str = "log"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ==================== 验证器 ====================
    @field_validator("allowed_extensions")
    @classmethod
    def split_allowed_extensions(cls, value: str) -> List[str]:
        """将允许的文件扩展名字符串转换为列表"""
        return parse_list_config(value)

    # ==================== 计算属性 ====================
    @property
    def bucket_name(self) -> str:
        """网关使用的存储桶名称"""
        return self.storage_bucket or self.cos_bucket

    @property
    def public_base_url(self) -> str:
        """构建对象公开访问的基础URL，对象URL为 {base}/{key}"""
        if self.storage_public_base_url:
            return self.storage_public_base_url.rstrip("/")
        if self.cos_endpoint:
            # 自定义端点使用路径风格
            endpoint = self.cos_endpoint.rstrip("/")
            return f"{self.cos_scheme}://{endpoint}/{self.bucket_name}"
        return f"{self.cos_scheme}://{self.bucket_name}.cos.{self.cos_region}.myqcloud.com"

    @property
    def absolute_log_dir(self) -> str:
        """获取绝对日志目录路径"""
        return str(get_workspace_path(self.log_dir))

    @property
    def absolute_log_file(self) -> str:
        """获取绝对日志文件路径"""
        return str(get_workspace_path(self.log_dir) / self.log_file)

    model_config = SettingsConfigDict(
        env_file=get_config_path(".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        validate_default=True
    )


def get_settings() -> Settings:
    """获取应用配置实例"""
    return Settings()


# 全局配置实例
settings = get_settings()
