"""
存储键生成器
根据原始文件名生成按年月分区、带随机后缀的唯一存储键
"""

from datetime import datetime, timezone
from typing import Optional

from nanoid import generate

from filegate.core.storage.exceptions import ValidationError
from filegate.utils.file_utils import (
    get_file_extension,
    get_file_name_without_extension,
    sanitize_filename,
)

KEY_ROOT = "files"


class KeyGenerator:
    """
    存储键生成器

    键格式: files/<年>/<月>/<文件名>-<随机串>.<扩展名>

    同一文件名每次生成的键都不同，重复上传同名文件不会相互覆盖；
    年月分区使列举可以按自然月限定前缀。
    """

    # 小写字母与数字，键在各类存储中都无需转义
    ALPHABET = '0123456789abcdefghijklmnopqrstuvwxyz'
    SUFFIX_LENGTH = 8

    def __init__(self, root: str = KEY_ROOT, suffix_length: int = SUFFIX_LENGTH):
        if suffix_length < 6:
            raise ValueError("suffix_length 不能小于6")
        self.root = root.strip("/")
        self.suffix_length = suffix_length

    def generate_key(self, original_filename: str, now: Optional[datetime] = None) -> str:
        """
        生成存储键

        Args:
            original_filename: 原始文件名
            now: 分区使用的时间（默认当前UTC时间）

        Returns:
            str: 唯一存储键

        Raises:
            ValidationError: 文件名为空或只含空白

        Example:
            >>> KeyGenerator().generate_key("report.pdf")
            'files/2024/01/report-k3f9x0ab.pdf'
        """
        if not original_filename or not original_filename.strip():
            raise ValidationError("文件名不能为空", file_name=original_filename)

        now = now or datetime.now(timezone.utc)
        extension = get_file_extension(original_filename)
        base = get_file_name_without_extension(original_filename)
        suffix = generate(self.ALPHABET, self.suffix_length)

        name = "{}-{}".format(sanitize_filename(base) if base else "file", suffix)
        if extension:
            name = "{}.{}".format(name, sanitize_filename(extension))

        return "{}{}".format(self.period_prefix(now.year, now.month), name)

    def period_prefix(self, year: int, month: int) -> str:
        """
        指定年月的键前缀，用于按月列举

        Example:
            >>> KeyGenerator().period_prefix(2024, 3)
            'files/2024/03/'
        """
        if not 1 <= month <= 12:
            raise ValidationError("月份必须在1到12之间: {}".format(month))
        return "{}/{:04d}/{:02d}/".format(self.root, year, month)


_default_generator = KeyGenerator()


def generate_key(original_filename: str) -> str:
    """使用默认配置生成存储键"""
    return _default_generator.generate_key(original_filename)
