"""上传处理引擎模块。

包含并发压缩、上传编排、验证、进度和照片选择等处理逻辑。
"""

from .batch import BatchUploader
from .concurrent_executor import ConcurrentExecutor
from .picker import PhotoPicker
from .progress import ProgressTracker
from .validation import UploadValidator


__all__ = [
    "BatchUploader",
    "ConcurrentExecutor",
    "PhotoPicker",
    "ProgressTracker",
    "UploadValidator",
]
