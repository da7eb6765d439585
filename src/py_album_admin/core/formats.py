"""格式处理器模块。

为目标编码格式准备画布色彩模式，并生成 Pillow 保存参数。
"""

import logging
from typing import Any

from PIL import Image


logger = logging.getLogger(__name__)

# JPEG 合成透明像素时使用的背景色
JPEG_BACKGROUND: tuple[int, int, int] = (255, 255, 255)


class FormatProcessor:
    """格式处理器，决定画布使用的色彩模式"""

    def surface_mode(self, img: Image.Image, target_format: str) -> str:
        """根据源图和目标格式选择画布色彩模式

        Args:
            img: 已解码的源图
            target_format: 目标格式

        Returns:
            str: Pillow 色彩模式
        """
        has_alpha = self._has_alpha(img)

        match target_format:
            case "JPEG":
                # JPEG不支持透明度
                return "RGB"
            case "PNG":
                if img.mode in ("1", "L", "I", "I;16"):
                    return img.mode
                if img.mode == "LA":
                    return "LA"
                return "RGBA" if has_alpha else "RGB"
            case "WEBP":
                return "RGBA" if has_alpha else "RGB"
            case _:
                logger.warning(f"未知的目标格式: {target_format}，使用RGB画布")
                return "RGB"

    def draw(self, img: Image.Image, surface: Image.Image) -> Image.Image:
        """把源图绘制到画布上，等价于 drawImage(img, 0, 0, w, h)"""
        source = img
        if source.mode == "P" or source.mode == "CMYK":
            source = source.convert("RGBA" if self._has_alpha(img) else "RGB")

        if surface.mode == "RGB" and self._has_alpha(source):
            # 透明像素合成到背景色上
            rgba = source.convert("RGBA")
            surface.paste(rgba, (0, 0), mask=rgba.getchannel("A"))
            return surface

        if source.mode != surface.mode:
            source = source.convert(surface.mode)
        surface.paste(source, (0, 0))
        return surface

    @staticmethod
    def _has_alpha(img: Image.Image) -> bool:
        """检测图片是否带透明信息"""
        return img.mode in ("RGBA", "LA", "PA") or (
            img.mode == "P" and "transparency" in img.info
        )


def get_save_parameters(format_name: str, quality: int) -> dict[str, Any]:
    """获取保存参数

    Args:
        format_name: 目标格式
        quality: 质量 1-99，100 不会进入编码流程

    Returns:
        dict: 传给 Image.save 的参数，包含 format
    """
    params: dict[str, Any] = {"format": format_name}

    match format_name:
        case "JPEG":
            params.update(get_jpeg_params(quality))
        case "PNG":
            params.update(get_png_params(quality))
        case "WEBP":
            params.update(get_webp_params(quality))

    return params


def get_jpeg_params(quality: int) -> dict[str, Any]:
    """获取JPEG压缩参数

    quality/100 对应 Pillow 的 1-100 质量整数，直接使用用户指定的值。
    """
    jpeg_quality = max(1, min(100, quality))
    return {
        "quality": jpeg_quality,
        "optimize": True,
        # 色度子采样：高质量时 4:2:2，其余 4:2:0
        "subsampling": 1 if jpeg_quality >= 85 else 2,
    }


def get_png_params(quality: int) -> dict[str, Any]:
    """获取PNG压缩参数

    PNG 是无损格式，编码器忽略质量值，只使用最高压缩级别。
    """
    logger.debug(f"PNG编码忽略质量参数 {quality}，使用无损压缩")
    return {
        "optimize": True,
        "compress_level": 9,
    }


def get_webp_params(quality: int) -> dict[str, Any]:
    """获取WebP压缩参数"""
    webp_quality = max(1, min(100, quality))
    return {
        "quality": webp_quality,
        "method": 6,  # 最佳压缩方法（较慢但效果好）
        "alpha_quality": 100 if webp_quality >= 85 else webp_quality,
    }
