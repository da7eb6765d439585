"""核心功能测试。

测试单文件压缩、格式处理以及图片文件模型。
"""

from io import BytesIO

import pytest
from PIL import Image

from py_album_admin.core import compression_engine
from py_album_admin.core.compression_engine import compress_image
from py_album_admin.core.formats import FormatProcessor, get_save_parameters
from py_album_admin.exceptions import (
    CanvasUnavailableError,
    CompressionError,
    DecodeError,
    EncodeError,
)
from py_album_admin.models.constants import ImageFormats, is_valid_quality
from py_album_admin.models.image_file import ImageFile, guess_mime_type
from tests.conftest import make_image_bytes, make_image_file


def _open(file: ImageFile) -> Image.Image:
    img = Image.open(BytesIO(file.content))
    img.load()
    return img


class TestCompressImage:
    """单文件压缩测试"""

    def test_original_quality_returns_same_file(self):
        """测试质量 100 直接返回原文件"""
        file = make_image_file()
        assert compress_image(file, 100) is file

    @pytest.mark.parametrize("quality", [0, 101, -5])
    def test_invalid_quality(self, quality: int):
        """测试非法质量值"""
        with pytest.raises(ValueError):
            compress_image(make_image_file(), quality)

    def test_jpeg_keeps_dimensions_and_name(self):
        """测试 JPEG 压缩保持尺寸和文件名"""
        file = make_image_file(
            "IMG_0001.jpg", size=(320, 240), format_name="JPEG", mime_type="image/jpeg"
        )

        result = compress_image(file, 60)

        assert result is not file
        assert result.filename == "IMG_0001.jpg"
        assert result.mime_type == "image/jpeg"
        assert result.size == len(result.content)
        assert result.last_modified >= file.last_modified
        with _open(result) as img:
            assert img.format == "JPEG"
            assert img.size == (320, 240)

    def test_png_keeps_format_and_transparency(self):
        """测试 PNG 保持格式和透明通道"""
        file = make_image_file("logo.png", mode="RGBA")

        result = compress_image(file, 70)

        assert result.mime_type == "image/png"
        with _open(result) as img:
            assert img.format == "PNG"
            assert img.mode == "RGBA"
            assert img.size == (120, 80)

    def test_webp_output(self):
        """测试 WebP 重新编码"""
        file = make_image_file(
            "cover.webp", format_name="WEBP", mime_type="image/webp"
        )

        result = compress_image(file, 50)

        assert result.mime_type == "image/webp"
        with _open(result) as img:
            assert img.format == "WEBP"
            assert img.size == (120, 80)

    @pytest.mark.parametrize("mime_type", ["", "image/heic", "image/gif"])
    def test_unknown_mime_falls_back_to_jpeg(self, mime_type: str):
        """测试无法识别的类型编码为 JPEG"""
        file = make_image_file("odd.bin", mode="RGBA", mime_type=mime_type)

        result = compress_image(file, 80)

        assert result.mime_type == "image/jpeg"
        with _open(result) as img:
            assert img.format == "JPEG"
            assert img.mode == "RGB"
            assert img.size == (120, 80)

    def test_exif_orientation_applied(self):
        """测试按 EXIF 方向得到自然尺寸"""
        img = Image.new("RGB", (120, 80), "red")
        exif = Image.Exif()
        exif[0x0112] = 6
        buffer = BytesIO()
        img.save(buffer, "JPEG", exif=exif)
        file = ImageFile(
            content=buffer.getvalue(), filename="rotated.jpg", mime_type="image/jpeg"
        )

        result = compress_image(file, 75)

        with _open(result) as out:
            assert out.size == (80, 120)

    def test_lower_quality_is_smaller(self):
        """测试较低质量产生较小的 JPEG"""
        file = make_image_file(
            "big.jpg", size=(400, 300), format_name="JPEG", mime_type="image/jpeg"
        )

        high = compress_image(file, 95)
        low = compress_image(file, 10)

        assert low.size < high.size

    def test_garbage_raises_decode_error(self, broken_file: ImageFile):
        """测试无法解码的数据"""
        with pytest.raises(DecodeError):
            compress_image(broken_file, 80)

    def test_surface_limit_raises_canvas_error(self):
        """测试画布像素超过上限"""
        file = make_image_file(size=(100, 100))

        with pytest.raises(CanvasUnavailableError):
            compress_image(file, 80, max_surface_pixels=100 * 100 - 1)

    def test_encoder_failure_raises_encode_error(self, monkeypatch: pytest.MonkeyPatch):
        """测试编码失败"""
        monkeypatch.setattr(
            compression_engine,
            "get_save_parameters",
            lambda format_name, quality: {"format": "NO_SUCH_FORMAT"},
        )

        with pytest.raises(EncodeError):
            compress_image(make_image_file(), 80)

    def test_errors_share_base_class(self):
        """测试压缩错误都继承自 CompressionError"""
        for error_type in (DecodeError, CanvasUnavailableError, EncodeError):
            assert issubclass(error_type, CompressionError)


class TestFormatProcessor:
    """格式处理器测试"""

    @pytest.fixture
    def processor(self):
        return FormatProcessor()

    def test_jpeg_surface_is_rgb(self, processor: FormatProcessor):
        """测试 JPEG 画布不带透明通道"""
        img = Image.new("RGBA", (10, 10))
        assert processor.surface_mode(img, "JPEG") == "RGB"

    def test_png_keeps_alpha(self, processor: FormatProcessor):
        """测试 PNG 保留透明通道"""
        assert processor.surface_mode(Image.new("RGBA", (10, 10)), "PNG") == "RGBA"
        assert processor.surface_mode(Image.new("L", (10, 10)), "PNG") == "L"
        assert processor.surface_mode(Image.new("RGB", (10, 10)), "PNG") == "RGB"

    def test_alpha_flattened_on_white(self, processor: FormatProcessor):
        """测试透明像素合成到白色背景"""
        img = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
        surface = Image.new("RGB", (4, 4), (255, 255, 255))

        drawn = processor.draw(img, surface)

        assert drawn.getpixel((0, 0)) == (255, 255, 255)

    def test_save_parameters(self):
        """测试各格式的保存参数"""
        jpeg = get_save_parameters("JPEG", 90)
        assert jpeg["format"] == "JPEG"
        assert jpeg["quality"] == 90

        png = get_save_parameters("PNG", 50)
        assert png["format"] == "PNG"
        assert "quality" not in png

        webp = get_save_parameters("WEBP", 40)
        assert webp["quality"] == 40


class TestImageModels:
    """图片文件模型与常量测试"""

    def test_size_follows_content(self):
        file = ImageFile(content=b"x" * 2048, filename="a.png", mime_type="image/png")
        assert file.size == 2048
        assert file.is_image
        assert file.get_size_human() == "2.0 KiB"

    def test_from_path(self, tmp_path):
        """测试从磁盘读取并推断类型"""
        path = tmp_path / "pic.webp"
        path.write_bytes(make_image_bytes(format_name="WEBP"))

        file = ImageFile.from_path(path)

        assert file.filename == "pic.webp"
        assert file.mime_type == "image/webp"
        assert file.size == path.stat().st_size

    def test_from_bytes_detects_type(self):
        """测试从内存数据创建时推断类型"""
        file = ImageFile.from_bytes(make_image_bytes(format_name="JPEG"), "upload")
        assert file.mime_type == "image/jpeg"
        assert file.filename == "upload"

    def test_guess_mime_from_content(self):
        """测试扩展名无法识别时根据内容推断"""
        content = make_image_bytes(format_name="PNG")
        assert guess_mime_type("no_extension", content) == "image/png"
        assert guess_mime_type("no_extension", b"junk") is None

    def test_resolve_target(self):
        assert ImageFormats.resolve_target("image/png") == ("PNG", "image/png")
        assert ImageFormats.resolve_target("image/jpg") == ("JPEG", "image/jpeg")
        assert ImageFormats.resolve_target(None) == ("JPEG", "image/jpeg")
        assert ImageFormats.resolve_target("image/bmp") == ("JPEG", "image/jpeg")

    @pytest.mark.parametrize(
        "quality, expected", [(1, True), (100, True), (0, False), (101, False)]
    )
    def test_quality_range(self, quality: int, expected: bool):
        assert is_valid_quality(quality) is expected
