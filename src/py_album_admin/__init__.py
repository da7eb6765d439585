"""相册管理工具库。

照片批量上传（可选压缩）与相册/照片管理 API 客户端。
"""

__version__ = "0.1.0"
__description__ = "相册后台管理工具：批量上传、客户端压缩与相册管理"

# 核心功能导出
from .api.admin import AdminApi
from .core.compression_engine import compress_image
from .engine.batch import BatchUploader
from .models.image_file import ImageFile
from .models.upload import UploadOutcome, UploadProgress, UploadState
from .uploader import PhotoUploader, upload_photos


__all__ = [
    "AdminApi",
    "BatchUploader",
    "ImageFile",
    "PhotoUploader",
    "UploadOutcome",
    "UploadProgress",
    "UploadState",
    "compress_image",
    "get_version",
    "upload_photos",
]


def get_version() -> str:
    """获取版本号。"""
    return __version__
