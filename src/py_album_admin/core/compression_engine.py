"""压缩引擎模块。

单文件压缩：解码为光栅画布，按原 MIME 类型和质量重新编码。
不调整尺寸，质量只影响编码，不影响分辨率。
"""

from datetime import datetime
from io import BytesIO

from PIL import Image, ImageOps

from ..exceptions import CanvasUnavailableError, EncodeError, handle_image_errors
from ..models.constants import ImageFormats, QualityDefaults, is_valid_quality
from ..models.image_file import ImageFile
from ..utils.logging_helpers import get_logger
from .formats import JPEG_BACKGROUND, FormatProcessor, get_save_parameters


logger = get_logger()

_format_processor = FormatProcessor()


def compress_image(
    file: ImageFile,
    quality: int,
    max_surface_pixels: int | None = None,
) -> ImageFile:
    """压缩单个图片文件。

    Args:
        file: 待压缩文件
        quality: 质量 1-100，100 直接返回原文件
        max_surface_pixels: 画布像素上限，None 表示不限制

    Returns:
        ImageFile: 新文件，文件名不变，大小和修改时间更新

    Raises:
        ValueError: 质量值不在 1-100 之间
        DecodeError: 源数据无法解析为图片
        CanvasUnavailableError: 无法分配画布
        EncodeError: 编码没有产生输出
    """
    if not is_valid_quality(quality):
        raise ValueError(f"质量参数必须在 1-100 之间，当前值: {quality}")

    if quality == QualityDefaults.ORIGINAL:
        return file

    target_format, target_mime = ImageFormats.resolve_target(file.mime_type)

    with _decode(file) as img:
        surface = _create_surface(img, target_format, max_surface_pixels)
        try:
            content = _encode(surface, target_format, quality)
        finally:
            surface.close()

    logger.debug(
        f"{file.filename}: {file.size} → {len(content)} bytes "
        f"({target_format}, quality={quality})"
    )

    return ImageFile(
        content=content,
        filename=file.filename,
        mime_type=target_mime,
        last_modified=datetime.now(),
    )


@handle_image_errors("图片解码")
def _decode(file: ImageFile) -> Image.Image:
    """解码图片并应用 EXIF 方向，得到自然尺寸的图像"""
    img = Image.open(BytesIO(file.content))
    img.load()
    transposed = ImageOps.exif_transpose(img)
    if transposed is not img:
        img.close()
    return transposed


def _create_surface(
    img: Image.Image, target_format: str, max_surface_pixels: int | None
) -> Image.Image:
    """创建与图片自然尺寸一致的画布并绘制"""
    width, height = img.size
    if width <= 0 or height <= 0:
        raise CanvasUnavailableError(f"无效的画布尺寸: {width}x{height}")
    if max_surface_pixels is not None and width * height > max_surface_pixels:
        raise CanvasUnavailableError(
            f"画布像素 {width * height} 超过上限 {max_surface_pixels}"
        )

    mode = _format_processor.surface_mode(img, target_format)
    background = JPEG_BACKGROUND if mode == "RGB" else 0
    try:
        surface = Image.new(mode, (width, height), background)
        return _format_processor.draw(img, surface)
    except (MemoryError, ValueError) as e:
        raise CanvasUnavailableError(f"无法获取画布: {e}") from e


def _encode(surface: Image.Image, target_format: str, quality: int) -> bytes:
    """按目标格式编码画布内容"""
    buffer = BytesIO()
    try:
        surface.save(buffer, **get_save_parameters(target_format, quality))
    except (OSError, KeyError, ValueError) as e:
        raise EncodeError(f"图片压缩失败: {e}") from e

    content = buffer.getvalue()
    if not content:
        raise EncodeError("图片压缩失败: 编码结果为空")
    return content
