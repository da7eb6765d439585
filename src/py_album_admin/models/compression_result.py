"""压缩结果模型。

定义单文件压缩结果（成功或回退原图）以及批次汇总结构。
"""

from enum import Enum
from typing import Any

from humanize import naturalsize
from pydantic import BaseModel, Field

from .image_file import ImageFile


class BaseResult(BaseModel):
    """结果基类，包含通用字段和方法"""

    success: bool = Field(description="是否成功")
    error: str | None = Field(None, description="错误信息")

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """格式化文件大小为人类可读格式"""
        return naturalsize(size_bytes, binary=True)


class ResultCollection(BaseResult):
    """结果集合基类，提供通用的统计方法"""

    results: list[Any] = Field(description="结果列表")

    def get_failed_items(self) -> list[Any]:
        """获取失败的结果项"""
        return [r for r in self.results if not getattr(r, "success", False)]

    def get_total_count(self) -> int:
        """获取总数量"""
        return len(self.results)

    def get_failure_count(self) -> int:
        """获取失败数量"""
        return len(self.get_failed_items())


class OutcomeKind(str, Enum):
    """单文件压缩结果类型"""

    OK = "ok"  # 压缩成功，使用新文件
    FALLBACK = "fallback"  # 压缩失败，回退原文件


class CompressionOutcome(BaseResult):
    """单个文件的压缩结果

    无论成功与否都携带一个可上传的文件，失败只体现在 kind 和 error 上。
    """

    kind: OutcomeKind = Field(description="结果类型")
    file: ImageFile = Field(description="用于上传的文件")
    original: ImageFile = Field(description="原始文件")

    @classmethod
    def ok(cls, original: ImageFile, compressed: ImageFile) -> "CompressionOutcome":
        return cls(
            success=True, kind=OutcomeKind.OK, file=compressed, original=original
        )

    @classmethod
    def fallback(cls, original: ImageFile, error: str) -> "CompressionOutcome":
        return cls(
            success=False,
            kind=OutcomeKind.FALLBACK,
            file=original,
            original=original,
            error=error,
        )

    @property
    def is_fallback(self) -> bool:
        return self.kind == OutcomeKind.FALLBACK

    @property
    def original_size(self) -> int:
        return self.original.size

    @property
    def final_size(self) -> int:
        return self.file.size

    def get_summary(self) -> str:
        if self.is_fallback:
            return f"{self.original.filename}: 压缩失败，使用原图 ({self.error})"
        return (
            f"{self.original.filename}: {self.format_size(self.original_size)} → "
            f"{self.format_size(self.final_size)}"
        )


class BatchCompressionResult(ResultCollection):
    """批量压缩结果，results 与输入文件按下标一一对应"""

    quality: int = Field(ge=1, le=100, description="使用的质量值")
    results: list[CompressionOutcome] = Field(description="各文件压缩结果")

    @property
    def files(self) -> list[ImageFile]:
        """用于上传的文件序列，顺序与输入一致"""
        return [r.file for r in self.results]

    @property
    def fallback_count(self) -> int:
        return self.get_failure_count()

    @property
    def has_fallbacks(self) -> bool:
        return self.fallback_count > 0

    def get_total_original_size(self) -> int:
        """总原始大小"""
        return sum(r.original_size for r in self.results)

    def get_total_final_size(self) -> int:
        """上传文件总大小"""
        return sum(r.final_size for r in self.results)

    def get_overall_compression_ratio(self) -> float:
        """整体压缩率（百分比），与上传面板的计算方式一致"""
        total_original = self.get_total_original_size()
        if total_original == 0:
            return 0.0
        return (1 - self.get_total_final_size() / total_original) * 100

    def get_summary(self) -> str:
        """批量压缩摘要"""
        if self.has_fallbacks:
            return "部分图片压缩失败，将使用原图上传"
        return f"图片压缩完成，压缩率: {self.get_overall_compression_ratio():.1f}%"
