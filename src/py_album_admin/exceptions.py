"""异常处理模块。

定义统一的异常类型，以及把 Pillow 异常映射为压缩错误的装饰器。
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError
from pydantic import ValidationError as PydanticValidationError

from .utils.logging_helpers import get_logger


logger = get_logger()
T = TypeVar("T")


class AlbumAdminError(Exception):
    """所有错误的基类"""

    def __init__(self, message: str, context: str | None = None):
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(AlbumAdminError):
    """参数或前置条件验证错误，发生在任何网络请求之前"""

    pass


# 单文件压缩错误，只在编排器内部被捕获并回退为原图
class CompressionError(AlbumAdminError):
    """压缩相关错误基类"""

    pass


class DecodeError(CompressionError):
    """源数据无法解析为图片"""

    pass


class CanvasUnavailableError(CompressionError):
    """无法分配光栅画布"""

    pass


class EncodeError(CompressionError):
    """重新编码没有产生输出"""

    pass


class ApiError(AlbumAdminError):
    """远程 API 错误"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: int | None = None,
        context: str | None = None,
    ):
        super().__init__(message, context)
        self.status_code = status_code
        self.code = code


class UploadError(AlbumAdminError):
    """批量上传的提交阶段失败，整个批次视为失败"""

    pass


def handle_image_errors(operation_name: str = "图像解码"):
    """把解码阶段的 Pillow 异常统一转换为 DecodeError

    Args:
        operation_name: 操作名称，用于日志记录
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return func(*args, **kwargs)
            except CompressionError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise DecodeError(f"无法识别的图片数据: {e}") from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise CanvasUnavailableError(f"图片像素过多，无法创建画布: {e}") from e
            except (OSError, SyntaxError, ValueError) as e:
                logger.debug(f"{operation_name} - 图片数据损坏: {e}")
                raise DecodeError(f"图片加载失败: {e}") from e

        return wrapper

    return decorator


def format_pydantic_error(error: PydanticValidationError) -> str:
    """格式化 pydantic 验证错误"""
    messages = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err["loc"])
        msg = err["msg"]
        if field:
            messages.append(f"{field}: {msg}")
        else:
            messages.append(msg)
    return "; ".join(messages)


def as_validation_error(error: PydanticValidationError, context: str) -> ValidationError:
    """把 pydantic 验证错误转换为统一的 ValidationError"""
    return ValidationError(format_pydantic_error(error), context)
