"""上传批次模型。

定义上传批次的状态、进度以及最终结果。
"""

from collections import defaultdict
from enum import Enum

from pydantic import BaseModel, Field

from .api_models import UploadedPhoto
from .compression_result import BaseResult, BatchCompressionResult
from .image_file import ImageFile


class UploadState(str, Enum):
    """上传批次状态机

    idle → compressing（质量 < 100 时）→ uploading → succeeded | failed
    """

    IDLE = "idle"
    COMPRESSING = "compressing"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.SUCCEEDED, UploadState.FAILED)


class UploadProgress(BaseModel):
    """进度快照（合成进度，并非真实传输字节数）"""

    state: UploadState = Field(UploadState.IDLE, description="当前状态")
    percent: int = Field(0, ge=0, le=100, description="进度百分比")


class RejectedFile(BaseModel):
    """选择阶段被剔除的文件"""

    filename: str
    reason: str


class SelectionResult(BaseModel):
    """选择文件时的过滤结果，两个列表都保持输入顺序"""

    accepted: list[ImageFile] = Field(default_factory=list)
    rejected: list[RejectedFile] = Field(default_factory=list)

    @property
    def rejected_names(self) -> list[str]:
        return [r.filename for r in self.rejected]


class UploadOutcome(BaseResult):
    """一次批量上传的结果"""

    album_id: int = Field(description="目标相册ID")
    photos: list[UploadedPhoto] = Field(default_factory=list, description="创建的照片")
    submitted_count: int = Field(0, ge=0, description="提交的文件数")
    quality: int = Field(100, ge=1, le=100, description="使用的质量值")
    compression: BatchCompressionResult | None = Field(
        None, description="压缩结果，原图上传时为 None"
    )

    @property
    def uploaded_count(self) -> int:
        return len(self.photos)

    def match_by_filename(self) -> dict[str, list[UploadedPhoto]]:
        """按文件名分组返回的照片记录

        服务端未保证返回顺序与提交顺序一致时使用。
        """
        grouped: dict[str, list[UploadedPhoto]] = defaultdict(list)
        for photo in self.photos:
            grouped[photo.name].append(photo)
        return dict(grouped)

    def get_summary(self) -> str:
        if not self.success:
            return f"上传失败: {self.error}"
        return f"成功上传 {self.uploaded_count} 张照片"
