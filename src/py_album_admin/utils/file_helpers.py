"""工具函数模块。

提供从磁盘收集待上传图片的实用工具函数。
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from ..models.constants import ImageFormats
from ..models.image_file import ImageFile
from .logging_helpers import get_logger
from .message_formatter import MessageFormatter


logger = get_logger()


def find_image_files(
    directory: str | Path,
    recursive: bool = False,
) -> Iterator[Path]:
    """查找目录中的图像文件。

    Args:
        directory: 搜索目录
        recursive: 是否递归搜索子目录

    Yields:
        Path: 图像文件路径，按文件名排序
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning(MessageFormatter.file_not_found(directory))
        return

    pattern = "**/*" if recursive else "*"
    supported_extensions = set(ImageFormats.EXTENSION_MIME_TYPES)

    for file_path in sorted(directory.glob(pattern)):
        if file_path.is_file() and file_path.suffix.lower() in supported_extensions:
            yield file_path


def expand_paths(paths: Iterable[str | Path], recursive: bool = False) -> list[Path]:
    """展开路径列表，目录替换为其中的图片文件，保持输入顺序"""
    expanded: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            expanded.extend(find_image_files(path, recursive=recursive))
        else:
            expanded.append(path)
    return expanded


def load_image_files(
    paths: Iterable[str | Path], recursive: bool = False
) -> list[ImageFile]:
    """读取磁盘文件为 ImageFile 列表

    Raises:
        FileNotFoundError: 任一路径不存在
    """
    files = []
    for path in expand_paths(paths, recursive=recursive):
        if not path.is_file():
            raise FileNotFoundError(MessageFormatter.file_not_found(path))
        files.append(ImageFile.from_path(path))
    return files
