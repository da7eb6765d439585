"""相册接口。

相册的增删改查、成员管理以及"不在相册中的照片"分页搜索。
"""

from ..models.api_models import (
    Album,
    CreateAlbumParams,
    ManagePhotosParams,
    Paginate,
    Photo,
    QueryParams,
    UpdateAlbumParams,
)
from .client import ApiClient


class AlbumsAPI:
    """相册资源"""

    def __init__(self, client: ApiClient):
        self.client = client

    async def create(self, params: CreateAlbumParams) -> Album:
        """创建相册"""
        data = await self.client.request(
            "POST", "/album", json=params.model_dump(exclude_none=True)
        )
        return Album.model_validate(data)

    async def list(self, params: QueryParams | None = None) -> Paginate[Album]:
        """获取相册列表（分页、关键词搜索）"""
        params = params or QueryParams()
        data = await self.client.request(
            "GET", "/album/list", params=params.to_params()
        )
        return Paginate[Album].model_validate(data)

    async def detail(self, album_id: int) -> Album:
        """获取相册详情（包含照片数量）"""
        data = await self.client.request("GET", f"/album/detail/{album_id}")
        return Album.model_validate(data)

    async def update(self, album_id: int, params: UpdateAlbumParams) -> None:
        """更新相册，只提交设置过的字段"""
        await self.client.request(
            "PATCH", f"/album/{album_id}", json=params.model_dump(exclude_unset=True)
        )

    async def delete(self, album_id: int) -> None:
        """删除相册"""
        await self.client.request("DELETE", f"/album/{album_id}")

    async def add_photos(self, album_id: int, params: ManagePhotosParams) -> None:
        """添加照片到相册"""
        await self.client.request(
            "POST", f"/album/{album_id}/photos", json=params.model_dump()
        )

    async def remove_photos(self, album_id: int, params: ManagePhotosParams) -> None:
        """从相册移除照片"""
        await self.client.request(
            "DELETE", f"/album/{album_id}/photos", json=params.model_dump()
        )

    async def photos(
        self, album_id: int, params: QueryParams | None = None
    ) -> Paginate[Photo]:
        """分页查询相册中的照片"""
        params = params or QueryParams()
        data = await self.client.request(
            "GET", f"/album/{album_id}/photos", params=params.to_params()
        )
        return Paginate[Photo].model_validate(data)

    async def photos_excluding(
        self, album_id: int, params: QueryParams | None = None
    ) -> Paginate[Photo]:
        """分页查询未加入该相册的照片，支持关键词过滤"""
        params = params or QueryParams()
        data = await self.client.request(
            "GET", f"/album/{album_id}/photos/exclude", params=params.to_params()
        )
        return Paginate[Photo].model_validate(data)
