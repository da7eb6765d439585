"""管理 API 聚合入口。"""

import asyncio

import httpx

from ..models.api_models import Overview, QueryParams
from .albums import AlbumsAPI
from .client import ApiClient
from .photos import PhotosAPI
from .session import SessionContext
from .upload import UploadAPI
from .users import UsersAPI


class AdminApi:
    """聚合所有资源接口，共享一个 HTTP 客户端

    使用示例：
        async with AdminApi("http://localhost:3000/api") as api:
            albums = await api.albums.list()
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: SessionContext | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: ApiClient | None = None,
    ):
        self.client = client or ApiClient(
            base_url=base_url, session=session, timeout=timeout, transport=transport
        )
        self.users = UsersAPI(self.client)
        self.albums = AlbumsAPI(self.client)
        self.photos = PhotosAPI(self.client)
        self.upload = UploadAPI(self.client)

    @property
    def session(self) -> SessionContext:
        return self.client.session

    async def overview(self) -> Overview:
        """首页统计：相册总数和照片总数"""
        probe = QueryParams(page=1, limit=1)
        albums, photos = await asyncio.gather(
            self.albums.list(probe), self.photos.list(probe)
        )
        return Overview(album_total=albums.total, photo_total=photos.total)

    async def close(self):
        await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
