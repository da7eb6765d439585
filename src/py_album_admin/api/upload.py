"""文件上传接口。"""

from collections.abc import Sequence

from ..models.api_models import UploadedPhoto
from ..models.constants import ImageFormats
from ..models.image_file import ImageFile
from .client import ApiClient


class UploadAPI:
    """批量文件上传"""

    def __init__(self, client: ApiClient):
        self.client = client

    async def upload_files(
        self, files: Sequence[ImageFile], album_id: int
    ) -> list[UploadedPhoto]:
        """一次 multipart 请求提交全部文件

        表单包含重复的 files 字段和一个 albumId 字段，不设超时。

        Args:
            files: 待上传文件，按顺序提交
            album_id: 目标相册ID

        Returns:
            list[UploadedPhoto]: 创建的照片记录
        """
        parts = [
            (
                "files",
                (
                    file.filename,
                    file.content,
                    file.mime_type or ImageFormats.DEFAULT_MIME_TYPE,
                ),
            )
            for file in files
        ]
        data = await self.client.request(
            "POST",
            "/qiniu/upload",
            data={"albumId": str(album_id)},
            files=parts,
            unbounded=True,
        )
        return [UploadedPhoto.model_validate(item) for item in data or []]
