"""图像与上传相关常量定义。

MIME 类型与 Pillow 编码格式之间的映射，以及上传质量预设。
"""

from typing import Final


class ImageFormats:
    """MIME 类型与 Pillow 格式的映射管理"""

    # 可重新编码的 MIME 类型（与浏览器 canvas 编码能力对齐）
    MIME_TO_FORMAT: Final[dict[str, str]] = {
        "image/jpeg": "JPEG",
        "image/jpg": "JPEG",
        "image/pjpeg": "JPEG",
        "image/png": "PNG",
        "image/webp": "WEBP",
    }

    # 默认有损编码类型，原类型缺失或无法识别时使用
    DEFAULT_MIME_TYPE: Final[str] = "image/jpeg"

    # 扩展名到 MIME 的补充映射（mimetypes 在部分平台缺少 webp）
    EXTENSION_MIME_TYPES: Final[dict[str, str]] = {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".webp": "image/webp",
        ".gif": "image/gif",
        ".bmp": "image/bmp",
        ".tif": "image/tiff",
        ".tiff": "image/tiff",
        ".avif": "image/avif",
        ".heic": "image/heic",
    }

    @classmethod
    def get_format(cls, mime_type: str | None) -> str | None:
        """根据 MIME 类型获取 Pillow 编码格式，无法识别时返回 None"""
        if not mime_type:
            return None
        return cls.MIME_TO_FORMAT.get(mime_type.lower().split(";")[0].strip())

    @classmethod
    def get_mime_type(cls, format_name: str) -> str:
        """根据 Pillow 格式名获取标准 MIME 类型"""
        format_upper = format_name.upper()
        if format_upper == "JPG":
            format_upper = "JPEG"
        return f"image/{format_upper.lower()}"

    @classmethod
    def resolve_target(cls, mime_type: str | None) -> tuple[str, str]:
        """确定重新编码使用的 (格式, MIME)，无法识别时回退到默认有损类型"""
        format_name = cls.get_format(mime_type)
        if format_name is None:
            return cls.MIME_TO_FORMAT[cls.DEFAULT_MIME_TYPE], cls.DEFAULT_MIME_TYPE
        return format_name, cls.get_mime_type(format_name)


class QualityDefaults:
    """质量相关默认值"""

    # 100 表示原图上传，不做任何重新编码
    ORIGINAL: Final[int] = 100

    MIN_QUALITY: Final[int] = 1
    MAX_QUALITY: Final[int] = 100

    # 上传面板提供的质量预设
    PRESETS: Final[dict[int, str]] = {
        100: "原图",
        90: "高清",
        80: "均衡",
        70: "压缩",
        60: "极致压缩",
    }


class UploadLimits:
    """上传相关限制"""

    # 仅接受图片 MIME
    ACCEPTED_MIME_PREFIX: Final[str] = "image/"


def get_mime_for_extension(suffix: str) -> str | None:
    """获取扩展名对应的 MIME 类型"""
    return ImageFormats.EXTENSION_MIME_TYPES.get(suffix.lower())


def is_valid_quality(quality: int) -> bool:
    """检查质量值是否在 1-100 之间"""
    return QualityDefaults.MIN_QUALITY <= quality <= QualityDefaults.MAX_QUALITY
