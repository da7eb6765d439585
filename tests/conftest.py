"""测试配置文件。

提供测试所需的图片工厂、模拟 API 和配置 fixtures。
"""

import json
from collections.abc import Callable
from io import BytesIO
from pathlib import Path
from typing import Any

import httpx
import pytest
from PIL import Image, ImageDraw

from py_album_admin.api.admin import AdminApi
from py_album_admin.api.session import SessionContext
from py_album_admin.config import reset_config
from py_album_admin.models.image_file import ImageFile


BASE_URL = "http://album.test/api"


def make_image_bytes(
    size: tuple[int, int] = (120, 80),
    format_name: str = "PNG",
    mode: str = "RGB",
) -> bytes:
    """生成带简单图案的测试图片"""
    color = (0, 0, 0, 0) if mode == "RGBA" else "white"
    img = Image.new(mode, size, color=color)
    draw = ImageDraw.Draw(img)
    width, height = size
    for i in range(10):
        x, y = (i * 13) % width, (i * 7) % height
        fill = (i * 25 % 256, 100 + i * 15, i * 9 % 256)
        if mode == "RGBA":
            fill = (*fill, 80 + i * 15)
        draw.rectangle([x, y, x + width // 4, y + height // 4], fill=fill)
    buffer = BytesIO()
    img.save(buffer, format_name)
    return buffer.getvalue()


def make_image_file(
    filename: str = "photo.png",
    size: tuple[int, int] = (120, 80),
    format_name: str = "PNG",
    mime_type: str = "image/png",
    mode: str = "RGB",
) -> ImageFile:
    return ImageFile(
        content=make_image_bytes(size, format_name, mode),
        filename=filename,
        mime_type=mime_type,
    )


def envelope(data: Any = None, code: int = 200, message: str = "success") -> dict:
    """服务端统一响应包装"""
    return {"code": code, "message": message, "data": data}


def uploaded_photo(photo_id: int, name: str, mime_type: str = "image/png") -> dict:
    return {
        "id": photo_id,
        "name": name,
        "url": f"https://cdn.album.test/{name}",
        "size": 1024,
        "width": 120,
        "height": 80,
        "type": mime_type,
        "create_time": "2024-05-01T12:00:00",
    }


class RecordingHandler:
    """记录请求并按路由返回响应的模拟传输处理器"""

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"message": f"no route: {key}"})
        if isinstance(route, httpx.Response):
            return route
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch):
    """每个测试使用不受环境变量影响的配置"""
    for name in (
        "PAA_API_BASE_URL",
        "PAA_API_TOKEN",
        "PAA_API_TIMEOUT",
        "PAA_MAX_FILE_SIZE_MB",
        "PAA_DEFAULT_QUALITY",
        "PAA_MAX_WORKERS",
        "PAA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def image_factory() -> Callable[..., ImageFile]:
    """图片文件工厂fixture"""
    return make_image_file


@pytest.fixture
def broken_file() -> ImageFile:
    """声明为图片但内容无法解码的文件"""
    return ImageFile(
        content=b"definitely not an image", filename="broken.jpg", mime_type="image/jpeg"
    )


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def api_factory(handler: RecordingHandler) -> Callable[..., AdminApi]:
    """创建使用模拟传输层的管理 API"""

    def factory(token: str = "test-token") -> AdminApi:
        return AdminApi(
            base_url=BASE_URL,
            session=SessionContext(token=token),
            transport=httpx.MockTransport(handler),
        )

    return factory


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """包含两张图片和一个文本文件的目录"""
    (tmp_path / "a.png").write_bytes(make_image_bytes(format_name="PNG"))
    (tmp_path / "b.jpg").write_bytes(make_image_bytes(format_name="JPEG"))
    (tmp_path / "notes.txt").write_text("not an image")
    return tmp_path
