"""
上传文件校验
单文件的命名、扩展名、大小校验，以及批次的数量与总大小校验
"""

import re
from typing import Iterable, Optional, Sequence

from filegate.core.config import settings
from filegate.core.log_utils import get_logger
from filegate.core.log_messages import log_messages
from filegate.core.storage.exceptions import ValidationError
from filegate.schemas.files import UploadFile
from filegate.utils.file_utils import get_file_extension

logger = get_logger(__name__)

# 只允许字母数字、点、下划线、连字符，且必须以 .扩展名 结尾
VALID_FILENAME_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+\.[a-zA-Z0-9]+$")

MIB = 1024 * 1024


class FileValidator:
    """
    上传文件校验器

    批次校验先做数量与总大小这类廉价检查，再逐个做结构检查，
    全部在任何存储I/O之前完成。
    """

    def __init__(
        self,
        allowed_extensions: Optional[Iterable[str]] = None,
        max_file_size: Optional[int] = None,
        max_batch_files: Optional[int] = None,
        max_batch_size: Optional[int] = None,
    ):
        extensions = allowed_extensions if allowed_extensions is not None else settings.allowed_extensions
        self.allowed_extensions = frozenset(ext.lower().lstrip(".") for ext in extensions)
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_file_size
        self.max_batch_files = max_batch_files if max_batch_files is not None else settings.max_batch_files
        self.max_batch_size = max_batch_size if max_batch_size is not None else settings.max_batch_size

    def validate_one(self, file: UploadFile) -> None:
        """
        校验单个文件

        Raises:
            ValidationError: 文件为空、文件名非法、扩展名不允许或超过大小上限
        """
        filename = file.filename

        if not file.size or file.size <= 0:
            raise ValidationError("文件不能为空", file_name=filename or "N/A")

        if not filename or not filename.strip():
            raise ValidationError("文件名不能为空", file_name="N/A")

        if not VALID_FILENAME_PATTERN.match(filename):
            raise ValidationError("文件名包含非法字符", file_name=filename)

        extension = get_file_extension(filename).lower()
        if extension not in self.allowed_extensions:
            raise ValidationError(
                "扩展名 '{}' 不被允许。允许的扩展名: {}".format(
                    extension, ", ".join(sorted(self.allowed_extensions))
                ),
                file_name=filename,
                details={'extension': extension},
            )

        if file.size > self.max_file_size:
            raise ValidationError(
                "文件过大 ({:.2f} MB)。最大允许: {:.0f} MB".format(
                    file.size / MIB, self.max_file_size / MIB
                ),
                file_name=filename,
                details={'size': file.size, 'max_size': self.max_file_size},
            )

    def validate_content_length(self, file: UploadFile, actual_size: int) -> None:
        """
        校验读取到的实际内容长度

        声明大小只用于读取前的廉价检查，写入存储前必须以实际长度为准。

        Raises:
            ValidationError: 内容为空、超过大小上限或与声明大小不一致
        """
        filename = file.filename
        details = {'declared_size': file.size, 'actual_size': actual_size}

        if actual_size <= 0:
            raise ValidationError("文件不能为空", file_name=filename, details=details)

        if actual_size > self.max_file_size:
            raise ValidationError(
                "文件过大 ({:.2f} MB)。最大允许: {:.0f} MB".format(
                    actual_size / MIB, self.max_file_size / MIB
                ),
                file_name=filename,
                details=dict(details, max_size=self.max_file_size),
            )

        if actual_size != file.size:
            raise ValidationError(
                "文件实际大小 {} 字节与声明大小 {} 字节不一致".format(actual_size, file.size),
                file_name=filename,
                details=details,
            )

    def validate_batch_shape(self, files: Sequence[UploadFile]) -> None:
        """
        校验批次结构（数量与声明大小之和），不读取文件内容

        Raises:
            ValidationError: 列表为空、数量超限或总大小超限
        """
        if not files:
            raise ValidationError("文件列表不能为空")

        if len(files) > self.max_batch_files:
            raise ValidationError(
                "每次最多上传 {} 个文件".format(self.max_batch_files),
                details={'count': len(files)},
            )

        total_size = sum(file.size or 0 for file in files)
        if total_size > self.max_batch_size:
            raise ValidationError(
                "文件总大小超过 {:.0f} MB".format(self.max_batch_size / MIB),
                details={'total_size': total_size},
            )

    def validate_batch(self, files: Sequence[UploadFile]) -> None:
        """
        校验整个批次，任一文件不合法即整体失败

        Raises:
            ValidationError: 批次结构或任一文件不合法
        """
        try:
            self.validate_batch_shape(files)
            for file in files:
                self.validate_one(file)
        except ValidationError as e:
            logger.warning(log_messages.FILE_VALIDATION_FAILED, file_name=e.file_name, reason=e.message)
            raise
