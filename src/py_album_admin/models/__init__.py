"""数据模型包。

定义图片文件、压缩结果、上传批次以及远程 API 资源的数据结构。
"""

from .api_models import (
    Album,
    CreateAlbumParams,
    CreatePhotoParams,
    LoginParams,
    LoginResponse,
    ManagePhotosParams,
    Overview,
    Paginate,
    Photo,
    QueryParams,
    UpdateAlbumParams,
    UpdatePhotoParams,
    UploadedPhoto,
    User,
)
from .compression_result import (
    BatchCompressionResult,
    CompressionOutcome,
    OutcomeKind,
)
from .constants import (
    ImageFormats,
    QualityDefaults,
    UploadLimits,
    get_mime_for_extension,
    is_valid_quality,
)
from .image_file import ImageFile, guess_mime_type
from .upload import (
    RejectedFile,
    SelectionResult,
    UploadOutcome,
    UploadProgress,
    UploadState,
)


__all__ = [
    # 资源记录
    "Album",
    "BatchCompressionResult",
    "CompressionOutcome",
    # 请求参数
    "CreateAlbumParams",
    "CreatePhotoParams",
    # 核心模型
    "ImageFile",
    # 常量和工具
    "ImageFormats",
    "LoginParams",
    "LoginResponse",
    "ManagePhotosParams",
    "OutcomeKind",
    "Overview",
    "Paginate",
    "Photo",
    "QualityDefaults",
    "QueryParams",
    "RejectedFile",
    "SelectionResult",
    "UpdateAlbumParams",
    "UpdatePhotoParams",
    "UploadLimits",
    "UploadOutcome",
    "UploadProgress",
    "UploadState",
    "UploadedPhoto",
    "User",
    "get_mime_for_extension",
    "guess_mime_type",
    "is_valid_quality",
]
