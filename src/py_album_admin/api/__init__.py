"""远程管理 API 客户端包。

封装相册、照片、用户和上传接口。
"""

from .admin import AdminApi
from .albums import AlbumsAPI
from .client import ApiClient
from .photos import PhotosAPI
from .session import SessionContext
from .upload import UploadAPI
from .users import UsersAPI


__all__ = [
    "AdminApi",
    "AlbumsAPI",
    "ApiClient",
    "PhotosAPI",
    "SessionContext",
    "UploadAPI",
    "UsersAPI",
]
