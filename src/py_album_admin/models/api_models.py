"""远程 API 数据模型。

定义相册、照片、用户等资源记录以及请求参数和分页结构。
"""

from datetime import datetime
from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


T = TypeVar("T")


class ApiModel(BaseModel):
    """API 模型基类，忽略服务端新增的未知字段"""

    model_config = ConfigDict(extra="ignore")


# ============================================================================
# 资源记录
# ============================================================================


class User(ApiModel):
    """管理员用户"""

    id: int
    name: str = ""
    username: str
    avatar: str = ""
    create_time: datetime | None = None


class LoginResponse(ApiModel):
    """登录响应"""

    token: str
    user: User


class UploadedPhoto(ApiModel):
    """上传接口返回的照片记录"""

    id: int
    name: str
    url: str
    size: int = Field(description="文件大小（字节）")
    width: int | None = None
    height: int | None = None
    type: str = Field(description="MIME 类型")
    create_time: datetime


class Photo(UploadedPhoto):
    """照片记录"""

    albums: list["Album"] | None = None


class Album(ApiModel):
    """相册记录"""

    id: int
    name: str
    description: str | None = None
    cover: str | None = None
    create_time: datetime
    photos: list[Photo] | None = None
    photo_count: int | None = None


Photo.model_rebuild()


class Paginate(ApiModel, Generic[T]):
    """统一的分页结构 {result, total, page, size}"""

    result: list[T] = Field(default_factory=list, description="当前页数据")
    total: int = Field(0, ge=0, description="总条数")
    page: int = Field(1, ge=1, description="当前页码")
    size: int = Field(10, ge=1, description="每页条数")

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.size) if self.total else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages


class Overview(ApiModel):
    """首页统计"""

    album_total: int
    photo_total: int


# ============================================================================
# 请求参数
# ============================================================================


class QueryParams(ApiModel):
    """分页查询参数"""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    keyword: str | None = None
    width: int | None = Field(None, gt=0)
    height: int | None = Field(None, gt=0)

    def to_params(self) -> dict[str, int | str]:
        """转换为查询字符串参数，去掉空值"""
        return self.model_dump(exclude_none=True)


class LoginParams(ApiModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class CreateAlbumParams(ApiModel):
    name: str = Field(min_length=1, description="相册名称")
    description: str | None = None
    cover: str | None = None


class UpdateAlbumParams(ApiModel):
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    cover: str | None = None


class ManagePhotosParams(ApiModel):
    """相册成员管理参数"""

    photo_ids: list[int] = Field(min_length=1, description="照片ID列表")

    @field_validator("photo_ids")
    @classmethod
    def dedupe_photo_ids(cls, v: list[int]) -> list[int]:
        # 保持原顺序去重
        return list(dict.fromkeys(v))


class CreatePhotoParams(ApiModel):
    name: str = Field(min_length=1)
    url: str
    size: int = Field(ge=0)
    width: int | None = None
    height: int | None = None
    type: str


class UpdatePhotoParams(ApiModel):
    name: str | None = Field(None, min_length=1)
