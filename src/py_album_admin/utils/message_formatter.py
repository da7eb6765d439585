"""消息格式化工具模块。

提供统一的错误消息、成功消息格式化功能。
"""

from typing import Any


class MessageFormatter:
    """统一的消息格式化器"""

    @staticmethod
    def file_not_found(file_path: Any) -> str:
        """文件不存在错误消息"""
        return f"文件不存在: {file_path}"

    @staticmethod
    def not_an_image(filename: str) -> str:
        """非图片文件错误消息"""
        return f"只能上传图片文件！({filename})"

    @staticmethod
    def file_too_large(filename: str, limit_mb: float) -> str:
        """文件过大错误消息"""
        return f"图片大小不能超过 {limit_mb:g}MB！({filename})"

    @staticmethod
    def operation_failed(
        operation: str, target: Any, error: Exception | None = None
    ) -> str:
        """操作失败消息"""
        msg = f"{operation}失败: {target}"
        if error:
            msg += f" - {error}"
        return msg

    @staticmethod
    def validation_error(field: str, value: Any, reason: str | None = None) -> str:
        """参数验证错误消息"""
        msg = f"参数验证失败 - {field}: {value}"
        if reason:
            msg += f" ({reason})"
        return msg

    @staticmethod
    def format_error(operation: str, target: Any, error: Exception) -> str:
        """格式化通用错误消息"""
        return f"{operation}失败 [{target}]: {error}"

    @staticmethod
    def upload_succeeded(count: int) -> str:
        return f"成功上传 {count} 张照片"

    @staticmethod
    def photos_added(count: int) -> str:
        return f"成功添加 {count} 张照片"

    @staticmethod
    def photos_removed(count: int) -> str:
        return f"成功移除 {count} 张照片"

    @staticmethod
    def photos_deleted(count: int) -> str:
        return f"成功删除 {count} 张照片"

