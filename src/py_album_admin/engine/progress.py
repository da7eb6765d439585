"""上传进度模块。

合成进度：压缩阶段按完成数计算，网络阶段定时递增到上限，
收到响应后跳到 100。进度只用于展示，不代表真实传输字节数。
"""

import asyncio
import logging
from collections.abc import Callable

from ..models.upload import UploadProgress, UploadState


logger = logging.getLogger(__name__)

ProgressListener = Callable[[UploadProgress], None]


class ProgressTracker:
    """单个上传批次的进度跟踪器"""

    def __init__(
        self,
        listener: ProgressListener | None = None,
        compression_share: int = 30,
        network_cap: int = 90,
        network_step: int = 10,
        network_interval: float = 0.2,
    ):
        """初始化进度跟踪器

        Args:
            listener: 进度变化回调
            compression_share: 压缩阶段占用的进度百分比
            network_cap: 网络阶段模拟进度的上限
            network_step: 每次递增的百分比
            network_interval: 递增间隔（秒）
        """
        if not 0 <= compression_share <= network_cap <= 100:
            raise ValueError("进度区间必须满足 0 <= 压缩占比 <= 网络上限 <= 100")

        self.listener = listener
        self.compression_share = compression_share
        self.network_cap = network_cap
        self.network_step = network_step
        self.network_interval = network_interval
        self.progress = UploadProgress()

    @property
    def state(self) -> UploadState:
        return self.progress.state

    @property
    def percent(self) -> int:
        return self.progress.percent

    def _emit(self, state: UploadState, percent: int) -> None:
        self.progress = UploadProgress(state=state, percent=percent)
        if self.listener is not None:
            try:
                self.listener(self.progress)
            except Exception as e:
                # 展示回调出错不能影响上传本身
                logger.warning(f"进度回调失败: {e}")

    def start_compression(self) -> None:
        self._emit(UploadState.COMPRESSING, 0)

    def compression_advanced(self, completed: int, total: int) -> None:
        """压缩完成一个文件"""
        if total <= 0:
            return
        percent = (completed * self.compression_share) // total
        self._emit(UploadState.COMPRESSING, max(self.percent, percent))

    def start_upload(self) -> None:
        self._emit(UploadState.UPLOADING, self.compression_share)

    async def simulate_network(self) -> None:
        """定时递增网络进度，到达上限后停止"""
        while self.state == UploadState.UPLOADING and self.percent < self.network_cap:
            await asyncio.sleep(self.network_interval)
            if self.state != UploadState.UPLOADING:
                break
            percent = min(self.network_cap, self.percent + self.network_step)
            self._emit(UploadState.UPLOADING, percent)

    def complete(self) -> None:
        self._emit(UploadState.SUCCEEDED, 100)

    def fail(self) -> None:
        self._emit(UploadState.FAILED, self.percent)
