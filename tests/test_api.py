"""远程 API 客户端测试。

使用 httpx.MockTransport 模拟服务端，测试响应解包、错误转换和各资源接口。
"""

import json

import httpx
import pytest

from py_album_admin.engine.picker import PhotoPicker
from py_album_admin.exceptions import ApiError, ValidationError
from py_album_admin.models.api_models import (
    CreateAlbumParams,
    LoginParams,
    ManagePhotosParams,
    Paginate,
    QueryParams,
    UpdateAlbumParams,
)
from tests.conftest import envelope, make_image_file, uploaded_photo


def _album(album_id: int, name: str = "旅行") -> dict:
    return {
        "id": album_id,
        "name": name,
        "description": None,
        "cover": None,
        "create_time": "2024-05-01T12:00:00",
        "photo_count": 3,
    }


def _page(items: list, total: int, page: int = 1, size: int = 10) -> dict:
    return {"result": items, "total": total, "page": page, "size": size}


class TestApiClient:
    """HTTP 客户端测试"""

    @pytest.mark.asyncio
    async def test_envelope_unwrapped(self, handler, api_factory):
        """测试成功响应返回 data"""
        handler.routes[("GET", "/api/album/detail/3")] = envelope(_album(3))

        async with api_factory() as api:
            album = await api.albums.detail(3)

        assert album.id == 3
        assert album.photo_count == 3

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", [200, 0])
    async def test_success_codes(self, handler, api_factory, code):
        handler.routes[("DELETE", "/api/album/3")] = envelope(None, code=code)

        async with api_factory() as api:
            assert await api.albums.delete(3) is None

    @pytest.mark.asyncio
    async def test_business_error_code(self, handler, api_factory):
        """测试业务错误码转换为 ApiError"""
        handler.routes[("GET", "/api/album/detail/404")] = envelope(
            None, code=40001, message="相册不存在"
        )

        async with api_factory() as api:
            with pytest.raises(ApiError) as exc_info:
                await api.albums.detail(404)

        assert exc_info.value.code == 40001
        assert exc_info.value.message == "相册不存在"

    @pytest.mark.asyncio
    async def test_http_error_status(self, handler, api_factory):
        """测试 HTTP 错误状态转换为 ApiError"""
        handler.routes[("GET", "/api/photo/detail/1")] = httpx.Response(
            500, json={"message": "Internal Server Error"}
        )

        async with api_factory() as api:
            with pytest.raises(ApiError) as exc_info:
                await api.photos.detail(1)

        assert exc_info.value.status_code == 500
        assert "Internal Server Error" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_error(self, handler, api_factory):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        handler.routes[("GET", "/api/photo/detail/1")] = fail

        async with api_factory() as api:
            with pytest.raises(ApiError, match="网络请求失败"):
                await api.photos.detail(1)

    @pytest.mark.asyncio
    async def test_auth_header(self, handler, api_factory):
        handler.routes[("GET", "/api/album/list")] = envelope(_page([], 0))

        async with api_factory(token="abc") as api:
            await api.albums.list()

        assert handler.requests[0].headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_token(self, handler, api_factory):
        handler.routes[("GET", "/api/album/list")] = envelope(_page([], 0))

        async with api_factory(token="") as api:
            await api.albums.list()

        assert "Authorization" not in handler.requests[0].headers

    @pytest.mark.asyncio
    async def test_login_stores_token(self, handler, api_factory):
        """测试登录后令牌写入会话"""
        handler.routes[("POST", "/api/web/user/login")] = envelope(
            {"token": "new-token", "user": {"id": 1, "username": "admin"}}
        )
        handler.routes[("GET", "/api/album/list")] = envelope(_page([], 0))

        async with api_factory(token="") as api:
            response = await api.users.login(
                LoginParams(username="admin", password="secret")
            )
            await api.albums.list()

            assert response.user.username == "admin"
            assert api.session.is_authenticated
            api.users.logout()
            assert not api.session.is_authenticated

        assert handler.json_body(0) == {"username": "admin", "password": "secret"}
        assert handler.requests[1].headers["Authorization"] == "Bearer new-token"


class TestAlbumsAPI:
    """相册接口测试"""

    @pytest.mark.asyncio
    async def test_list_pagination(self, handler, api_factory):
        """测试分页参数和分页结构"""
        handler.routes[("GET", "/api/album/list")] = envelope(
            _page([_album(1), _album(2)], total=12, page=1, size=2)
        )

        async with api_factory() as api:
            page = await api.albums.list(QueryParams(page=1, limit=2, keyword="旅"))

        assert isinstance(page, Paginate)
        assert [a.id for a in page.result] == [1, 2]
        assert page.total_pages == 6
        assert page.has_more
        params = handler.requests[0].url.params
        assert params["page"] == "1"
        assert params["limit"] == "2"
        assert params["keyword"] == "旅"

    @pytest.mark.asyncio
    async def test_create_and_update(self, handler, api_factory):
        handler.routes[("POST", "/api/album")] = envelope(_album(8, "新相册"))
        handler.routes[("PATCH", "/api/album/8")] = envelope(None)

        async with api_factory() as api:
            album = await api.albums.create(CreateAlbumParams(name="新相册"))
            await api.albums.update(8, UpdateAlbumParams(description="说明"))

        assert album.name == "新相册"
        assert handler.json_body(0) == {"name": "新相册"}
        assert handler.json_body(1) == {"description": "说明"}

    @pytest.mark.asyncio
    async def test_membership_payload(self, handler, api_factory):
        """测试成员管理请求体为 {photo_ids: [...]}"""
        handler.routes[("POST", "/api/album/4/photos")] = envelope(None)
        handler.routes[("DELETE", "/api/album/4/photos")] = envelope(None)

        async with api_factory() as api:
            await api.albums.add_photos(4, ManagePhotosParams(photo_ids=[3, 1, 3]))
            await api.albums.remove_photos(4, ManagePhotosParams(photo_ids=[1]))

        assert handler.json_body(0) == {"photo_ids": [3, 1]}
        assert handler.json_body(1) == {"photo_ids": [1]}

    def test_empty_membership_rejected(self):
        from pydantic import ValidationError as PydanticValidationError

        with pytest.raises(PydanticValidationError):
            ManagePhotosParams(photo_ids=[])

    @pytest.mark.asyncio
    async def test_photos_excluding(self, handler, api_factory):
        handler.routes[("GET", "/api/album/4/photos/exclude")] = envelope(
            _page([uploaded_photo(10, "sea.png")], total=1, size=20)
        )

        async with api_factory() as api:
            page = await api.albums.photos_excluding(
                4, QueryParams(page=1, limit=20, keyword="sea")
            )

        assert page.result[0].name == "sea.png"
        assert handler.requests[0].url.params["keyword"] == "sea"


class TestPhotosAPI:
    """照片接口测试"""

    @pytest.mark.asyncio
    async def test_delete_many(self, handler, api_factory):
        handler.routes[("DELETE", "/api/photo/1")] = envelope(None)
        handler.routes[("DELETE", "/api/photo/2")] = envelope(None)

        async with api_factory() as api:
            deleted = await api.photos.delete_many([1, 2, 1])

        assert deleted == 2
        assert sorted(handler.paths) == ["/api/photo/1", "/api/photo/2"]

    @pytest.mark.asyncio
    async def test_delete_many_failure(self, handler, api_factory):
        handler.routes[("DELETE", "/api/photo/1")] = envelope(None)

        async with api_factory() as api:
            with pytest.raises(ApiError):
                await api.photos.delete_many([1, 2])

    @pytest.mark.asyncio
    async def test_overview(self, handler, api_factory):
        """测试首页统计读取两个列表的总数"""
        handler.routes[("GET", "/api/album/list")] = envelope(_page([], total=4))
        handler.routes[("GET", "/api/photo/list")] = envelope(_page([], total=57))

        async with api_factory() as api:
            overview = await api.overview()

        assert overview.album_total == 4
        assert overview.photo_total == 57
        assert all(r.url.params["limit"] == "1" for r in handler.requests)


class TestUploadAPI:
    """文件上传接口测试"""

    @pytest.mark.asyncio
    async def test_multipart_payload(self, handler, api_factory):
        """测试 multipart 表单包含重复 files 字段和 albumId"""
        handler.routes[("POST", "/api/qiniu/upload")] = envelope(
            [uploaded_photo(1, "a.png"), uploaded_photo(2, "b.png")]
        )
        files = [make_image_file("a.png"), make_image_file("b.png")]

        async with api_factory() as api:
            photos = await api.upload.upload_files(files, 5)

        request = handler.requests[0]
        body = request.content
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert body.count(b'name="files"') == 2
        assert b'filename="a.png"' in body
        assert b'filename="b.png"' in body
        assert b'name="albumId"\r\n\r\n5\r\n' in body
        assert request.extensions["timeout"]["read"] is None
        assert [p.id for p in photos] == [1, 2]


class TestPhotoPicker:
    """增量照片选择器测试"""

    @pytest.fixture
    def exclude_route(self, handler):
        """三张候选照片，每页两张"""
        photos = [uploaded_photo(i, f"p{i}.png") for i in (11, 12, 13)]

        def route(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            limit = int(request.url.params["limit"])
            chunk = photos[(page - 1) * limit : page * limit]
            return httpx.Response(
                200, json=envelope(_page(chunk, total=3, page=page, size=limit))
            )

        handler.routes[("GET", "/api/album/9/photos/exclude")] = route
        handler.routes[("POST", "/api/album/9/photos")] = envelope(None)
        return route

    @pytest.mark.asyncio
    async def test_load_more_until_exhausted(self, handler, api_factory, exclude_route):
        async with api_factory() as api:
            picker = PhotoPicker(api.albums, 9, page_size=2)
            first = await picker.load_more()
            second = await picker.load_more()
            third = await picker.load_more()

        assert [p.id for p in first] == [11, 12]
        assert [p.id for p in second] == [13]
        assert third == []
        assert not picker.has_more
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_submit_selection(self, handler, api_factory, exclude_route):
        async with api_factory() as api:
            picker = PhotoPicker(api.albums, 9, page_size=2)
            await picker.search("p")
            picker.toggle(12)
            picker.toggle(11)
            assert picker.toggle(11) is False
            picker.toggle(11)

            added = await picker.submit()

        assert added == 2
        assert handler.json_body() == {"photo_ids": [11, 12]}
        assert picker.selected == set()
        assert picker.candidates == []
        assert picker.has_more
        assert handler.requests[0].url.params["keyword"] == "p"

    @pytest.mark.asyncio
    async def test_submit_without_selection(self, handler, api_factory):
        async with api_factory() as api:
            picker = PhotoPicker(api.albums, 9)
            with pytest.raises(ValidationError):
                await picker.submit()

        assert handler.requests == []

    def test_invalid_album(self, api_factory):
        with pytest.raises(ValidationError):
            PhotoPicker(api_factory().albums, 0)

    @pytest.mark.asyncio
    async def test_paging_without_page_field(self, handler, api_factory):
        """测试服务端不返回 page/size 时仍按本地页码翻页"""
        photos = [uploaded_photo(i, f"p{i}.png") for i in range(1, 7)]

        def route(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            chunk = photos[(page - 1) * 2 : page * 2]
            return httpx.Response(200, json=envelope({"result": chunk, "total": 6}))

        handler.routes[("GET", "/api/album/9/photos/exclude")] = route

        async with api_factory() as api:
            picker = PhotoPicker(api.albums, 9, page_size=2)
            for _ in range(5):
                await picker.load_more()

        assert [r.url.params["page"] for r in handler.requests] == ["1", "2", "3"]
        assert [p.id for p in picker.candidates] == [1, 2, 3, 4, 5, 6]
        assert not picker.has_more

    @pytest.mark.asyncio
    async def test_submit_reloads_shrunken_candidates(self, handler, api_factory):
        """测试加入相册后候选集合缩小，重新分页不会漏掉照片"""
        excluded = [uploaded_photo(i, f"p{i}.png") for i in range(1, 7)]

        def exclude(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            limit = int(request.url.params["limit"])
            chunk = excluded[(page - 1) * limit : page * limit]
            return httpx.Response(
                200,
                json=envelope(_page(chunk, total=len(excluded), page=page, size=limit)),
            )

        def add(request: httpx.Request) -> httpx.Response:
            added = set(json.loads(request.content)["photo_ids"])
            excluded[:] = [p for p in excluded if p["id"] not in added]
            return httpx.Response(200, json=envelope(None))

        handler.routes[("GET", "/api/album/9/photos/exclude")] = exclude
        handler.routes[("POST", "/api/album/9/photos")] = add

        async with api_factory() as api:
            picker = PhotoPicker(api.albums, 9, page_size=2)
            await picker.load_more()
            picker.toggle(1)
            picker.toggle(2)
            await picker.submit()
            while picker.has_more:
                await picker.load_more()

        assert [p.id for p in picker.candidates] == [3, 4, 5, 6]
        assert picker.total == 4
