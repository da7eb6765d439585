"""照片上传器接口。

面向调用方的上传入口：读取文件、选择阶段过滤、批量上传，
并生成与管理后台一致的提示消息。
"""

from pathlib import Path
from typing import TypedDict

from .api.admin import AdminApi
from .api.session import SessionContext
from .engine.batch import BatchUploader
from .engine.progress import ProgressListener
from .engine.validation import UploadValidator
from .exceptions import UploadError, ValidationError
from .models.constants import QualityDefaults
from .models.upload import RejectedFile, UploadOutcome
from .utils.file_helpers import load_image_files
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()


class UploadReport(TypedDict):
    """统一的上传结果类型定义"""

    success: bool
    outcome: UploadOutcome | None
    rejected: list[RejectedFile]
    messages: list[str]
    error: str | None
    error_type: str | None


class PhotoUploader:
    """照片上传器

    组合选择过滤和批量上传，所有错误都转换为 UploadReport。
    """

    def __init__(
        self,
        api: AdminApi,
        max_file_size_mb: float | None = None,
        max_workers: int | None = None,
        progress_listener: ProgressListener | None = None,
    ):
        """初始化上传器

        Args:
            api: 管理 API
            max_file_size_mb: 单文件大小上限，None 使用配置
            max_workers: 压缩最大并发数
            progress_listener: 进度回调
        """
        self.api = api
        self.batch_uploader = BatchUploader(
            upload_api=api.upload,
            validator=UploadValidator(max_file_size_mb=max_file_size_mb),
            max_workers=max_workers,
            progress_listener=progress_listener,
        )

    async def upload_paths(
        self,
        paths: list[str | Path],
        album_id: int | None,
        quality: int = QualityDefaults.ORIGINAL,
        recursive: bool = False,
    ) -> UploadReport:
        """上传磁盘上的图片（支持目录）

        Args:
            paths: 文件或目录路径
            album_id: 目标相册ID
            quality: 质量 1-100，100 表示原图
            recursive: 目录是否递归

        Returns:
            UploadReport: 上传结果与提示消息
        """
        messages: list[str] = []
        rejected: list[RejectedFile] = []

        try:
            files = load_image_files(paths, recursive=recursive)
            selection = self.batch_uploader.select(files)
            rejected = selection.rejected
            messages.extend(r.reason for r in rejected)

            outcome = await self.batch_uploader.upload(
                selection.accepted, album_id, quality
            )
        except (ValidationError, FileNotFoundError) as e:
            message = e.message if isinstance(e, ValidationError) else str(e)
            logger.warning(message)
            messages.append(message)
            return _failed_report(message, "validation", rejected, messages)
        except OSError as e:
            message = MessageFormatter.format_error("读取文件", e.filename or "-", e)
            logger.error(message)
            messages.append(message)
            return _failed_report(message, "file", rejected, messages)
        except UploadError as e:
            messages.append("上传失败，请重试")
            return _failed_report(e.message, "upload", rejected, messages)

        if outcome.compression is not None:
            messages.append(outcome.compression.get_summary())
        messages.append(outcome.get_summary())

        return {
            "success": True,
            "outcome": outcome,
            "rejected": rejected,
            "messages": messages,
            "error": None,
            "error_type": None,
        }


def _failed_report(
    error: str,
    error_type: str,
    rejected: list[RejectedFile],
    messages: list[str],
) -> UploadReport:
    return {
        "success": False,
        "outcome": None,
        "rejected": rejected,
        "messages": messages,
        "error": error,
        "error_type": error_type,
    }


async def upload_photos(
    paths: list[str | Path],
    album_id: int,
    quality: int = QualityDefaults.ORIGINAL,
    base_url: str | None = None,
    token: str | None = None,
) -> UploadReport:
    """便捷的上传函数

    Examples:
        >>> report = await upload_photos(["a.jpg", "b.png"], album_id=5, quality=80)
        >>> print(report["messages"])
    """
    session = SessionContext(token=token) if token else None
    async with AdminApi(base_url=base_url, session=session) as api:
        return await PhotoUploader(api).upload_paths(paths, album_id, quality)
