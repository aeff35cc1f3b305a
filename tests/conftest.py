"""
测试配置和fixtures
为所有测试提供共享的配置和fixtures
"""

import pytest

from filegate.services.files.gateway import StorageGateway
from filegate.services.files.validator import FileValidator
from filegate.schemas.files import UploadFile
from tests.utils.mock_utils import TEST_BASE_URL, TEST_BUCKET, InMemoryObjectStore


@pytest.fixture
def object_store():
    """内存对象存储"""
    return InMemoryObjectStore()


@pytest.fixture
def validator():
    """使用默认限制的文件校验器"""
    return FileValidator(
        allowed_extensions=["jpg", "png", "pdf", "txt", "zip"],
        max_file_size=50 * 1024 * 1024,
        max_batch_files=10,
        max_batch_size=100 * 1024 * 1024,
    )


@pytest.fixture
def gateway(object_store, validator):
    """基于内存对象存储的存储网关"""
    return StorageGateway(object_store, TEST_BUCKET, TEST_BASE_URL, validator=validator)


@pytest.fixture
def make_file():
    """构造待上传文件"""
    def _make(filename: str = "report.pdf", content: bytes = b"test file content", size=None):
        return UploadFile(filename=filename, content=content, size=size)
    return _make
