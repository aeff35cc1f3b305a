"""
日志消息模板模块
统一管理所有业务日志消息模板，便于维护和国际化
"""

from typing import Dict, Any


class LogMessages:
    """日志消息模板类"""

    # ==================== 通用日志消息 ====================
    OPERATION_SUCCESS = "操作成功完成: {operation_name}"

    # ==================== 文件上传相关 ====================
    FILE_UPLOAD_SUCCESS = "文件上传成功"
    FILE_UPLOAD_FAILED = "文件上传失败"
    FILE_VALIDATION_FAILED = "文件验证失败"

    # ==================== 文件读取相关 ====================
    FILE_DOWNLOAD_SUCCESS = "文件下载成功"
    FILE_INFO_SUCCESS = "成功获取文件信息"
    FILE_NOT_FOUND = "文件不存在"
    FILE_LIST_SUCCESS = "文件列表获取完成"

    # ==================== 文件删除与复制 ====================
    FILE_DELETE_SUCCESS = "文件删除成功"
    FILE_DELETE_FAILED = "文件删除失败"
    FILE_COPY_SUCCESS = "文件复制成功"

    # ==================== 批量操作相关 ====================
    BATCH_UPLOAD_START = "开始批量上传: {total} 个文件"
    BATCH_UPLOAD_DONE = "批量上传完成: {succeeded} 个成功, {failed} 个失败"
    BATCH_DELETE_DONE = "批量删除完成: {deleted} 个成功, {failed} 个失败"

    # ==================== 预签名URL相关 ====================
    PRESIGNED_URL_ISSUED = "预签名URL已生成"

    @classmethod
    def format_message(cls, message_template: str, **kwargs: Any) -> str:
        """格式化日志消息模板"""
        return message_template.format(**kwargs)

    @classmethod
    def get_structured_data(cls, **kwargs: Any) -> Dict[str, Any]:
        """获取结构化日志数据"""
        return kwargs


# 全局实例
log_messages = LogMessages()
