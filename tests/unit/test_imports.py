"""
模块导入测试
测试所有模块的导入是否正常
"""

import pytest


@pytest.mark.unit
@pytest.mark.imports
class TestModuleImports:
    """模块导入测试类"""

    def test_config_import(self):
        """测试配置模块导入"""
        from filegate.core.config import settings
        assert settings is not None

    def test_storage_import(self):
        """测试存储模块导入"""
        from filegate.core.storage import BaseObjectStore, TencentCosAdapter, get_storage_client
        assert issubclass(TencentCosAdapter, BaseObjectStore)
        assert get_storage_client is not None

    def test_service_imports(self):
        """测试文件服务模块导入"""
        from filegate.services.files import (
            BatchCoordinator,
            BucketStatsService,
            FileValidator,
            KeyGenerator,
            PresignedUrlManager,
            StorageGateway,
        )
        assert all([
            BatchCoordinator, BucketStatsService, FileValidator,
            KeyGenerator, PresignedUrlManager, StorageGateway,
        ])

    def test_utils_imports(self):
        """测试工具模块导入"""
        from filegate.core.storage.utils import download_via_grant, upload_via_grant
        from filegate.utils import get_human_readable_size, sanitize_filename
        assert download_via_grant is not None
        assert upload_via_grant is not None
        assert get_human_readable_size(0) == "0 B"
        assert sanitize_filename("a b") == "a_b"
