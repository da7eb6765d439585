"""批量上传功能演示

展示相册管理工具的核心功能：
- 🗜️ 质量预设下的本地压缩效果（不需要服务端）
- 📤 批量上传到相册（需要配置 PAA_API_BASE_URL 和 PAA_API_TOKEN）

用法：
    python examples/upload_demo.py                 # 只演示压缩
    python examples/upload_demo.py <目录> <相册ID>  # 压缩并上传
"""

import asyncio
import sys
import tempfile
from pathlib import Path

from PIL import Image, ImageDraw

from py_album_admin import ImageFile, UploadProgress, compress_image
from py_album_admin.api.admin import AdminApi
from py_album_admin.models.constants import QualityDefaults
from py_album_admin.uploader import PhotoUploader


def create_sample_image(directory: Path) -> Path:
    """生成一张演示图片"""
    path = directory / "sample.jpg"
    img = Image.new("RGB", (1200, 800), color="white")
    draw = ImageDraw.Draw(img)
    for i in range(60):
        x, y = (i * 37) % 1200, (i * 23) % 800
        color = (i * 5 % 256, i * 7 % 256, i * 11 % 256)
        draw.ellipse([x, y, x + 120, y + 90], fill=color)
    img.save(path, "JPEG", quality=98)
    return path


def demo_quality_presets(image_path: Path):
    """演示各质量预设的压缩效果"""
    print("🗜️ 质量预设压缩演示")
    original = ImageFile.from_path(image_path)
    print(f"  原图: {original.filename} {original.get_size_human()}")

    for quality, label in QualityDefaults.PRESETS.items():
        result = compress_image(original, quality)
        ratio = (1 - result.size / original.size) * 100
        print(
            f"  Q{quality:<3} {label:<6} → {result.get_size_human():>10} "
            f"({ratio:.1f}%)"
        )


def print_progress(progress: UploadProgress):
    print(f"  ⏳ {progress.state.value}: {progress.percent}%")


async def demo_upload(directory: Path, album_id: int):
    """演示批量上传"""
    print(f"\n📤 上传 {directory} 到相册 {album_id}")
    async with AdminApi() as api:
        uploader = PhotoUploader(api, progress_listener=print_progress)
        report = await uploader.upload_paths([directory], album_id, quality=80)

    for message in report["messages"]:
        print(f"  {message}")
    if report["success"]:
        for photo in report["outcome"].photos:
            print(f"  ✅ #{photo.id} {photo.name} {photo.url}")
    else:
        print(f"  ❌ {report['error']}")


def main():
    """主函数"""
    print("🚀 相册管理工具演示")
    print("=" * 50)

    with tempfile.TemporaryDirectory() as temp_dir:
        demo_quality_presets(create_sample_image(Path(temp_dir)))

    if len(sys.argv) == 3:
        asyncio.run(demo_upload(Path(sys.argv[1]), int(sys.argv[2])))

    print("\n" + "=" * 50)
    print("✅ 演示完成！")


if __name__ == "__main__":
    main()
