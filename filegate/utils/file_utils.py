"""
文件工具模块
提供统一的文件名与大小处理函数
"""

import re

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def get_file_extension(filename: str) -> str:
    """
    获取文件扩展名（最后一个点之后的部分，保留原始大小写，不含点）

    Args:
        filename: 文件名

    Returns:
        str: 扩展名，没有扩展名时返回空字符串
    """
    if not filename or not filename.strip() or "." not in filename:
        return ""
    return filename[filename.rindex(".") + 1:]


def get_file_name_without_extension(filename: str) -> str:
    """
    获取去掉扩展名的文件名

    Args:
        filename: 文件名

    Returns:
        str: 最后一个点之前的部分；没有点时返回原文件名
    """
    if not filename or not filename.strip():
        return ""
    if "." not in filename:
        return filename
    return filename[:filename.rindex(".")]


def file_name_from_key(key: str) -> str:
    """
    从存储键中提取文件名（最后一个斜杠之后的部分）

    Args:
        key: 存储键

    Returns:
        str: 文件名；键为空时返回 unknown，键以斜杠结尾时返回原键
    """
    if not key:
        return "unknown"
    last_slash = key.rfind("/")
    if 0 <= last_slash < len(key) - 1:
        return key[last_slash + 1:]
    return key


def sanitize_filename(filename: str) -> str:
    """
    清洗文件名，将不安全字符替换为下划线

    Args:
        filename: 原始文件名

    Returns:
        str: 只包含 [A-Za-z0-9._-] 的文件名，空输入返回 file
    """
    if not filename or not filename.strip():
        return "file"
    cleaned = _UNSAFE_CHARS.sub("_", filename.strip())
    return _REPEATED_UNDERSCORES.sub("_", cleaned)


def get_human_readable_size(size_bytes: int) -> str:
    """
    将字节大小转换为人类可读的格式

    Args:
        size_bytes: 字节大小

    Returns:
        str: 人类可读的大小（如：1.5 MB）
    """
    if size_bytes <= 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    size = float(size_bytes)
    i = 0
    while size >= 1024 and i < len(size_names) - 1:
        size /= 1024.0
        i += 1

    return f"{size:.1f} {size_names[i]}"
