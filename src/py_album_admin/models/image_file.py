"""图片文件模型。

定义待上传图片在内存中的表示，对应浏览器中的 File 对象。
"""

import mimetypes
from datetime import datetime
from io import BytesIO
from pathlib import Path

from humanize import naturalsize
from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, computed_field

from .constants import ImageFormats, UploadLimits, get_mime_for_extension


class ImageFile(BaseModel):
    """待上传的单个图片文件

    由调用方创建并持有，上传编排器只在批次内借用，不会保留引用。
    """

    model_config = ConfigDict(frozen=True)

    content: bytes = Field(repr=False, description="二进制内容")
    filename: str = Field(description="原始文件名")
    mime_type: str = Field("", description="声明的 MIME 类型，可能为空")
    last_modified: datetime = Field(
        default_factory=datetime.now, description="最后修改时间"
    )

    @computed_field
    def size(self) -> int:
        """文件大小（字节）"""
        return len(self.content)

    @property
    def is_image(self) -> bool:
        """声明类型是否为图片"""
        return self.mime_type.startswith(UploadLimits.ACCEPTED_MIME_PREFIX)

    def get_size_human(self) -> str:
        """人性化显示文件大小"""
        return naturalsize(self.size, binary=True)

    def size_in_mb(self) -> float:
        """以 MB 为单位的文件大小"""
        return self.size / 1024 / 1024

    @classmethod
    def from_bytes(
        cls, content: bytes, filename: str, mime_type: str | None = None
    ) -> "ImageFile":
        """从内存数据创建文件对象"""
        return cls(
            content=content,
            filename=filename,
            mime_type=mime_type or guess_mime_type(filename, content) or "",
        )

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> "ImageFile":
        """从磁盘文件创建文件对象

        Args:
            path: 文件路径
            mime_type: 显式指定的 MIME 类型，None 时根据扩展名和内容推断
        """
        path = Path(path)
        content = path.read_bytes()
        return cls(
            content=content,
            filename=path.name,
            mime_type=mime_type or guess_mime_type(path.name, content) or "",
            last_modified=datetime.fromtimestamp(path.stat().st_mtime),
        )


def guess_mime_type(filename: str, content: bytes | None = None) -> str | None:
    """推断文件的 MIME 类型

    优先使用扩展名，扩展名无法识别时尝试用 Pillow 识别内容。
    """
    suffix = Path(filename).suffix
    if mime := get_mime_for_extension(suffix):
        return mime

    guessed, _ = mimetypes.guess_type(filename)
    if guessed:
        return guessed

    if not content:
        return None

    try:
        with Image.open(BytesIO(content)) as img:
            if img.format:
                return ImageFormats.get_mime_type(img.format)
    except Exception:
        return None
    return None
