"""
filegate - 对象存储文件网关
"""

__version__ = "1.0.0"
