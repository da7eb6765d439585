"""照片选择器模块。

基于"未加入相册的照片"分页搜索接口的增量选择器，
用于把已有照片批量加入相册。
"""

from ..api.albums import AlbumsAPI
from ..exceptions import ValidationError
from ..models.api_models import ManagePhotosParams, Photo, QueryParams
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()


class PhotoPicker:
    """单个相册的增量照片选择器

    load_more 逐页加载候选照片，search 重置分页，
    submit 把选中的照片加入相册并清空选择。
    """

    def __init__(self, albums_api: AlbumsAPI, album_id: int, page_size: int = 20):
        if album_id <= 0:
            raise ValidationError("请选择目标相册", "album_id")
        self.albums_api = albums_api
        self.album_id = album_id
        self.page_size = page_size
        self.keyword: str | None = None
        self.candidates: list[Photo] = []
        self.selected: set[int] = set()
        self.total = 0
        self._next_page = 1
        self._has_more = True

    @property
    def has_more(self) -> bool:
        return self._has_more

    def reset(self, keyword: str | None = None) -> None:
        """清空已加载的候选照片，保留选择"""
        self.keyword = keyword or None
        self.candidates = []
        self.total = 0
        self._next_page = 1
        self._has_more = True

    async def load_more(self) -> list[Photo]:
        """加载下一页候选照片

        Returns:
            list[Photo]: 本次新加载的照片，没有更多时为空
        """
        if not self._has_more:
            return []

        page = await self.albums_api.photos_excluding(
            self.album_id,
            QueryParams(page=self._next_page, limit=self.page_size, keyword=self.keyword),
        )
        known = {photo.id for photo in self.candidates}
        new_photos = [photo for photo in page.result if photo.id not in known]
        self.candidates.extend(new_photos)
        self.total = page.total
        self._next_page += 1
        self._has_more = bool(page.result) and len(self.candidates) < page.total
        return new_photos

    async def search(self, keyword: str | None) -> list[Photo]:
        """按关键词重新搜索，从第一页开始"""
        self.reset(keyword)
        return await self.load_more()

    def toggle(self, photo_id: int) -> bool:
        """切换选中状态

        Returns:
            bool: 切换后是否选中
        """
        if photo_id in self.selected:
            self.selected.discard(photo_id)
            return False
        self.selected.add(photo_id)
        return True

    def clear_selection(self) -> None:
        self.selected.clear()

    async def submit(self) -> int:
        """把选中的照片加入相册

        Returns:
            int: 加入的照片数量

        Raises:
            ValidationError: 未选择任何照片，不会发出请求
        """
        if not self.selected:
            raise ValidationError("请选择要添加的照片", "photo_ids")

        photo_ids = sorted(self.selected)
        await self.albums_api.add_photos(
            self.album_id, ManagePhotosParams(photo_ids=photo_ids)
        )
        logger.info(MessageFormatter.photos_added(len(photo_ids)))

        # 已加入的照片移出了服务端的候选集合，分页整体前移，从第一页重新加载
        self.selected.clear()
        self.reset(self.keyword)
        return len(photo_ids)
