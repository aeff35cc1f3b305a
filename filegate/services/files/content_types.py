"""
内容类型解析
根据文件扩展名确定MIME类型
"""

from typing import Dict

from filegate.utils.file_utils import get_file_extension

DEFAULT_CONTENT_TYPE = "application/octet-stream"

CONTENT_TYPES: Dict[str, str] = {
    # 图片
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "bmp": "image/bmp",
    "webp": "image/webp",

    # 文档
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "txt": "text/plain",
    "rtf": "application/rtf",

    # 表格
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",

    # 压缩包
    "zip": "application/zip",
    "rar": "application/vnd.rar",
    "7z": "application/x-7z-compressed",

    # 音频
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",

    # 视频
    "mp4": "video/mp4",
    "avi": "video/x-msvideo",
    "mkv": "video/x-matroska",
    "webm": "video/webm",
}

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp"})
DOCUMENT_EXTENSIONS = frozenset({"pdf", "doc", "docx", "txt", "rtf", "xls", "xlsx", "csv"})


def resolve(filename: str) -> str:
    """
    根据文件名解析MIME类型（扩展名不区分大小写）

    Args:
        filename: 文件名或存储键

    Returns:
        str: MIME类型，未知或缺失扩展名时为 application/octet-stream
    """
    return CONTENT_TYPES.get(get_file_extension(filename).lower(), DEFAULT_CONTENT_TYPE)


def is_image(filename: str) -> bool:
    """是否为图片文件"""
    return get_file_extension(filename).lower() in IMAGE_EXTENSIONS


def is_document(filename: str) -> bool:
    """是否为文档或表格文件"""
    return get_file_extension(filename).lower() in DOCUMENT_EXTENSIONS
