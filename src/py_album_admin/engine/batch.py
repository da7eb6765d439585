"""批量上传编排模块。

验证 → 并发压缩（质量 < 100 时）→ 一次 multipart 提交 → 汇总结果。
单个文件压缩失败回退原图，提交失败则整个批次失败。
"""

import asyncio
from collections.abc import Callable, Sequence
from contextlib import suppress
from functools import partial

from ..api.upload import UploadAPI
from ..config import UploadDefaults, get_config
from ..core.compression_engine import compress_image
from ..exceptions import UploadError
from ..models.api_models import UploadedPhoto
from ..models.compression_result import BatchCompressionResult, CompressionOutcome
from ..models.constants import QualityDefaults
from ..models.image_file import ImageFile
from ..models.upload import SelectionResult, UploadOutcome, UploadProgress, UploadState
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter
from .concurrent_executor import ConcurrentExecutor
from .progress import ProgressListener, ProgressTracker
from .validation import UploadValidator


logger = get_logger()

Compressor = Callable[[ImageFile, int], ImageFile]


class BatchUploader:
    """批量上传编排器

    借用调用方的文件对象，批次结束后不保留引用。
    失败的批次不可恢复，需要调用方用原始文件重新发起。
    """

    def __init__(
        self,
        upload_api: UploadAPI,
        validator: UploadValidator | None = None,
        compressor: Compressor | None = None,
        max_workers: int | None = None,
        progress_listener: ProgressListener | None = None,
        settings: UploadDefaults | None = None,
    ):
        """初始化编排器

        Args:
            upload_api: 上传接口
            validator: 验证器，None 使用全局配置
            compressor: 单文件压缩函数 (file, quality) -> file
            max_workers: 压缩最大并发数
            progress_listener: 进度回调
            settings: 上传配置，None 使用全局配置
        """
        self.settings = settings or get_config().upload
        self.upload_api = upload_api
        self.validator = validator or UploadValidator(
            max_file_size_mb=self.settings.MAX_FILE_SIZE_MB,
            accepted_mime_prefix=self.settings.ACCEPTED_MIME_PREFIX,
        )
        self.compressor = compressor or partial(
            compress_image, max_surface_pixels=self.settings.MAX_SURFACE_PIXELS
        )
        self.executor = ConcurrentExecutor(max_workers or self.settings.MAX_WORKERS)
        self.progress_listener = progress_listener
        self.progress = UploadProgress()

    @property
    def state(self) -> UploadState:
        """最近一个批次的状态"""
        return self.progress.state

    def select(self, files: Sequence[ImageFile]) -> SelectionResult:
        """选择文件，剔除非图片和超过大小上限的文件"""
        return self.validator.filter_selection(files)

    async def upload(
        self,
        files: Sequence[ImageFile],
        album_id: int | None,
        quality: int = QualityDefaults.ORIGINAL,
    ) -> UploadOutcome:
        """上传一批文件到指定相册

        Args:
            files: 待上传文件（至少一个）
            album_id: 目标相册ID
            quality: 质量 1-100，100 表示原图上传

        Returns:
            UploadOutcome: 上传结果

        Raises:
            ValidationError: 前置条件不满足，不会发出任何请求
            UploadError: 提交失败，没有照片被创建
        """
        self.validator.check_preconditions(files, album_id, quality)
        files = list(files)
        self.progress = UploadProgress()
        tracker = self._create_tracker()

        compression: BatchCompressionResult | None = None
        files_to_upload = files
        if quality < QualityDefaults.ORIGINAL:
            tracker.start_compression()
            compression = await self.compress_all(files, quality, tracker)
            files_to_upload = compression.files

        photos = await self._submit(files_to_upload, album_id, tracker)

        outcome = UploadOutcome(
            success=True,
            album_id=album_id,
            photos=photos,
            submitted_count=len(files_to_upload),
            quality=quality,
            compression=compression,
        )
        if outcome.uploaded_count != outcome.submitted_count:
            logger.warning(
                f"返回的照片数 {outcome.uploaded_count} "
                f"与提交的文件数 {outcome.submitted_count} 不一致"
            )
        logger.info(MessageFormatter.upload_succeeded(outcome.uploaded_count))
        return outcome

    async def compress_all(
        self,
        files: Sequence[ImageFile],
        quality: int,
        tracker: ProgressTracker | None = None,
    ) -> BatchCompressionResult:
        """并发压缩全部文件，失败的文件以原图替代

        Returns:
            BatchCompressionResult: 与输入按下标对齐的压缩结果
        """

        def task(file: ImageFile) -> CompressionOutcome:
            return CompressionOutcome.ok(file, self.compressor(file, quality))

        def fallback(file: ImageFile, error: Exception) -> CompressionOutcome:
            logger.warning(
                MessageFormatter.format_error("压缩", file.filename, error)
            )
            return CompressionOutcome.fallback(file, str(error))

        outcomes = await self.executor.run_with_fallback(
            files,
            task,
            fallback,
            on_complete=tracker.compression_advanced if tracker else None,
        )
        result = BatchCompressionResult(
            success=True, quality=quality, results=outcomes
        )

        if result.has_fallbacks:
            logger.warning(
                f"{result.get_summary()} "
                f"({result.fallback_count}/{result.get_total_count()})"
            )
        else:
            logger.info(result.get_summary())
        return result

    async def _submit(
        self,
        files: list[ImageFile],
        album_id: int,
        tracker: ProgressTracker,
    ) -> list[UploadedPhoto]:
        """提交阶段：全部成功或整体失败"""
        tracker.start_upload()
        ticker = asyncio.create_task(tracker.simulate_network())
        try:
            photos = await self.upload_api.upload_files(files, album_id)
        except Exception as e:
            tracker.fail()
            logger.error(MessageFormatter.format_error("上传", f"相册 {album_id}", e))
            raise UploadError(f"上传失败，请重试: {e}", f"album:{album_id}") from e
        finally:
            ticker.cancel()
            with suppress(asyncio.CancelledError):
                await ticker

        tracker.complete()
        return photos

    def _create_tracker(self) -> ProgressTracker:
        def record(progress: UploadProgress) -> None:
            self.progress = progress
            if self.progress_listener is not None:
                self.progress_listener(progress)

        return ProgressTracker(
            listener=record,
            compression_share=self.settings.COMPRESSION_PROGRESS_SHARE,
            network_cap=self.settings.NETWORK_PROGRESS_CAP,
            network_step=self.settings.NETWORK_PROGRESS_STEP,
            network_interval=self.settings.NETWORK_PROGRESS_INTERVAL,
        )
