"""照片接口。"""

import asyncio
from collections.abc import Sequence

from ..models.api_models import (
    CreatePhotoParams,
    Paginate,
    Photo,
    QueryParams,
    UpdatePhotoParams,
)
from .client import ApiClient


class PhotosAPI:
    """照片资源"""

    def __init__(self, client: ApiClient):
        self.client = client

    async def create(self, params: CreatePhotoParams) -> Photo:
        """创建照片记录"""
        data = await self.client.request(
            "POST", "/photo", json=params.model_dump(exclude_none=True)
        )
        return Photo.model_validate(data)

    async def list(self, params: QueryParams | None = None) -> Paginate[Photo]:
        """获取照片列表（分页、关键词搜索）"""
        params = params or QueryParams()
        data = await self.client.request(
            "GET", "/photo/list", params=params.to_params()
        )
        return Paginate[Photo].model_validate(data)

    async def detail(self, photo_id: int) -> Photo:
        """获取照片详情"""
        data = await self.client.request("GET", f"/photo/detail/{photo_id}")
        return Photo.model_validate(data)

    async def update(self, photo_id: int, params: UpdatePhotoParams) -> None:
        """更新照片（名称）"""
        await self.client.request(
            "PATCH", f"/photo/{photo_id}", json=params.model_dump(exclude_unset=True)
        )

    async def delete(self, photo_id: int) -> None:
        """删除照片"""
        await self.client.request("DELETE", f"/photo/{photo_id}")

    async def delete_many(self, photo_ids: Sequence[int]) -> int:
        """并发删除多张照片，任一失败则抛出该错误

        Returns:
            int: 删除的照片数量
        """
        unique_ids = list(dict.fromkeys(photo_ids))
        await asyncio.gather(*(self.delete(photo_id) for photo_id in unique_ids))
        return len(unique_ids)
