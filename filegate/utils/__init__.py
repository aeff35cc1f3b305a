"""
通用工具模块包
提供项目通用的工具函数和辅助类
"""

from .config_utils import (
    get_project_root,
    get_workspace_path,
    get_config_path,
    parse_list_config,
    ensure_directory_exists
)

from .file_utils import (
    get_file_extension,
    get_file_name_without_extension,
    file_name_from_key,
    sanitize_filename,
    get_human_readable_size
)

__all__ = [
    # config_utils
    'get_project_root', 'get_workspace_path', 'get_config_path',
    'parse_list_config', 'ensure_directory_exists',

    # file_utils
    'get_file_extension', 'get_file_name_without_extension', 'file_name_from_key',
    'sanitize_filename', 'get_human_readable_size'
]
