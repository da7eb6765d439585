"""上传验证模块。

选择文件时的类型/大小过滤，以及上传前的前置条件检查。
所有检查都在任何网络请求之前完成。
"""

import logging
from collections.abc import Sequence

from ..config import UploadDefaults, get_config
from ..exceptions import ValidationError
from ..models.constants import is_valid_quality
from ..models.image_file import ImageFile
from ..models.upload import RejectedFile, SelectionResult
from ..utils.message_formatter import MessageFormatter


logger = logging.getLogger(__name__)


class UploadValidator:
    """上传验证器

    大小上限和接受的 MIME 前缀来自配置，不同调用点可以使用不同的上限。
    """

    def __init__(
        self,
        max_file_size_mb: float | None = None,
        accepted_mime_prefix: str | None = None,
    ):
        """初始化验证器

        Args:
            max_file_size_mb: 单文件大小上限（MB），None 使用全局配置
            accepted_mime_prefix: 接受的 MIME 前缀，None 使用全局配置
        """
        defaults: UploadDefaults = get_config().upload
        self.max_file_size_mb = (
            max_file_size_mb
            if max_file_size_mb is not None
            else defaults.MAX_FILE_SIZE_MB
        )
        self.accepted_mime_prefix = (
            accepted_mime_prefix or defaults.ACCEPTED_MIME_PREFIX
        )

        if self.max_file_size_mb <= 0:
            raise ValidationError(
                f"文件大小上限必须大于 0，当前值: {self.max_file_size_mb}"
            )

    def check_file(self, file: ImageFile) -> None:
        """检查单个文件的类型和大小

        Raises:
            ValidationError: 非图片或超过大小上限
        """
        if not file.mime_type.startswith(self.accepted_mime_prefix):
            raise ValidationError(
                MessageFormatter.not_an_image(file.filename), file.filename
            )

        if not file.size_in_mb() < self.max_file_size_mb:
            raise ValidationError(
                MessageFormatter.file_too_large(file.filename, self.max_file_size_mb),
                file.filename,
            )

    def filter_selection(self, files: Sequence[ImageFile]) -> SelectionResult:
        """过滤用户选择的文件，不合格的文件在选择阶段被剔除"""
        selection = SelectionResult()
        for file in files:
            try:
                self.check_file(file)
            except ValidationError as e:
                logger.warning(e.message)
                selection.rejected.append(
                    RejectedFile(filename=file.filename, reason=e.message)
                )
                continue
            selection.accepted.append(file)
        return selection

    @staticmethod
    def check_quality(quality: int) -> None:
        """检查质量参数"""
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise ValidationError(
                MessageFormatter.validation_error("quality", quality, "必须是整数")
            )
        if not is_valid_quality(quality):
            raise ValidationError(
                f"质量参数必须在 1-100 之间，当前值: {quality}", "quality"
            )

    def check_preconditions(
        self,
        files: Sequence[ImageFile],
        album_id: int | None,
        quality: int,
    ) -> None:
        """上传前置条件检查

        Raises:
            ValidationError: 未选择相册、未选择文件、质量非法或文件不合格
        """
        if album_id is None or isinstance(album_id, bool) or album_id <= 0:
            raise ValidationError("请选择目标相册", "album_id")

        if not files:
            raise ValidationError("请先选择要上传的文件", "files")

        self.check_quality(quality)

        for file in files:
            self.check_file(file)
