"""
存储工具模块
提供存储相关的工具函数
"""

from filegate.core.storage.utils.transfer import download_via_grant, upload_via_grant

__all__ = ['download_via_grant', 'upload_via_grant']
