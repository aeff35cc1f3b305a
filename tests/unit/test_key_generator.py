"""
存储键生成器单元测试
"""

import re
from datetime import datetime, timezone

import pytest

from filegate.core.storage.exceptions import ValidationError
from filegate.services.files.key_generator import KeyGenerator, generate_key

KEY_PATTERN = re.compile(r"^files/\d{4}/\d{2}/[A-Za-z0-9._-]+-[0-9a-z]{8}(\.[A-Za-z0-9._-]+)?$")


@pytest.mark.unit
@pytest.mark.key_generator
class TestKeyGenerator:
    """KeyGenerator 单元测试类"""

    def setup_method(self):
        self.generator = KeyGenerator()

    def test_key_format(self):
        """测试键格式与年月分区"""
        now = datetime(2024, 3, 15, tzinfo=timezone.utc)
        key = self.generator.generate_key("report.pdf", now=now)

        assert key.startswith("files/2024/03/report-")
        assert key.endswith(".pdf")
        assert KEY_PATTERN.match(key)

    def test_keeps_original_extension(self):
        """测试保留原始扩展名（含大小写）"""
        assert self.generator.generate_key("photo.JPG").endswith(".JPG")
        assert self.generator.generate_key("archive.tar.gz").endswith(".gz")

    def test_without_extension(self):
        """测试无扩展名时不追加点号"""
        key = self.generator.generate_key("README")
        name = key.rsplit("/", 1)[-1]

        assert "." not in name
        assert name.startswith("README-")

    def test_unsafe_characters_sanitized(self):
        """测试基础名中的不安全字符被替换"""
        key = self.generator.generate_key("my report (v2).pdf")
        name = key.rsplit("/", 1)[-1]

        assert " " not in name
        assert "(" not in name
        assert KEY_PATTERN.match(key)

    def test_uniqueness_over_many_generations(self):
        """测试同一文件名一万次生成不重复"""
        keys = {self.generator.generate_key("same.pdf") for _ in range(10000)}

        assert len(keys) == 10000
        assert all(key.endswith(".pdf") for key in keys)

    @pytest.mark.parametrize("filename", ["", "   ", None])
    def test_blank_filename_rejected(self, filename):
        """测试空文件名被拒绝"""
        with pytest.raises(ValidationError):
            self.generator.generate_key(filename)

    def test_period_prefix(self):
        """测试按月前缀"""
        assert self.generator.period_prefix(2024, 1) == "files/2024/01/"
        assert self.generator.period_prefix(2023, 12) == "files/2023/12/"

    def test_period_prefix_invalid_month(self):
        """测试非法月份"""
        with pytest.raises(ValidationError):
            self.generator.period_prefix(2024, 13)

    def test_custom_root(self):
        """测试自定义根前缀"""
        generator = KeyGenerator(root="/uploads/")
        now = datetime(2024, 7, 1, tzinfo=timezone.utc)

        assert generator.generate_key("a.txt", now=now).startswith("uploads/2024/07/a-")

    def test_suffix_length_lower_bound(self):
        """测试随机后缀长度下限"""
        with pytest.raises(ValueError):
            KeyGenerator(suffix_length=4)

    def test_module_level_generate_key(self):
        """测试模块级便捷函数"""
        assert KEY_PATTERN.match(generate_key("notes.txt"))
