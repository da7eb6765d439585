"""核心压缩模块。

单文件压缩单元：解码、绘制到画布、按原类型重新编码。
"""

from .compression_engine import compress_image
from .formats import FormatProcessor, get_save_parameters


__all__ = [
    "FormatProcessor",
    "compress_image",
    "get_save_parameters",
]
