"""并发执行器模块。

提供"全部启动、等待全部完成、逐个收集结果"的并发执行功能。
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

ProgressCallback = Callable[[int, int], None]


class ConcurrentExecutor:
    """通用并发执行器

    每个任务在线程池中执行（Pillow 编解码为 CPU 密集型），
    任务失败时调用 fallback 生成替代结果，异常不会逃出 join。
    """

    def __init__(self, max_workers: int = 4):
        """初始化并发执行器

        Args:
            max_workers: 最大并发数
        """
        if max_workers <= 0:
            raise ValueError("max_workers 必须大于 0")
        self.max_workers = max_workers

    async def run_with_fallback(
        self,
        items: Sequence[T],
        task: Callable[[T], R],
        fallback: Callable[[T, Exception], R],
        on_complete: ProgressCallback | None = None,
    ) -> list[R]:
        """并发执行任务，失败的任务由 fallback 替代

        Args:
            items: 任务输入列表
            task: 同步任务函数，在线程池中执行
            fallback: 任务失败时的替代结果构造函数
            on_complete: 每完成一个任务时回调 (已完成数, 总数)

        Returns:
            list: 与输入按下标对齐的结果列表
        """
        if not items:
            return []

        loop = asyncio.get_running_loop()
        total = len(items)
        completed = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:

            async def run_one(item: T) -> R:
                nonlocal completed
                try:
                    result = await loop.run_in_executor(pool, task, item)
                except Exception as e:
                    result = fallback(item, e)

                completed += 1
                if on_complete is not None:
                    on_complete(completed, total)
                return result

            # gather 按提交顺序返回结果，与完成顺序无关
            results = await asyncio.gather(*(run_one(item) for item in items))

        logger.debug(f"并发任务完成: {total} 个")
        return list(results)
