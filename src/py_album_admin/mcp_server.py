"""相册管理 MCP 服务器。

把相册/照片管理和批量上传暴露为 MCP 工具。
"""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from pydantic import ValidationError as PydanticValidationError

from .api.admin import AdminApi
from .config import get_config
from .exceptions import ApiError, ValidationError, as_validation_error
from .models.api_models import (
    CreateAlbumParams,
    ManagePhotosParams,
    QueryParams,
    UpdateAlbumParams,
    UpdatePhotoParams,
)
from .uploader import PhotoUploader
from .utils.logging_helpers import configure_logging, get_logger
from .utils.message_formatter import MessageFormatter


# MCP 服务器响应类型定义
MCPResponse = dict[str, Any]


class MCPResponseBuilder:
    """MCP 服务器响应构建器，专门用于构建符合 MCP 协议的响应格式。"""

    @staticmethod
    def success(data: Any = None, message: str | None = None) -> dict[str, Any]:
        """构建成功结果。"""
        result: dict[str, Any] = {"success": True, "data": data}
        if message:
            result["message"] = message
        return result

    @staticmethod
    def error(
        message: str,
        error_type: str = "general",
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """构建错误结果。

        Args:
            message: 错误消息
            error_type: 错误类型
            details: 额外的错误详情

        Returns:
            dict: 标准化的错误响应
        """
        result = {
            "success": False,
            "error": message,
            "error_type": error_type,
        }

        if details:
            result["details"] = details

        return result

    @staticmethod
    def validation_error(message: str, field: str | None = None) -> dict[str, Any]:
        """构建验证错误结果。"""
        details = {"field": field} if field else None
        return MCPResponseBuilder.error(
            message=message,
            error_type="validation",
            details=details,
        )

    @staticmethod
    def api_error(error: ApiError, operation: str) -> dict[str, Any]:
        """构建远程 API 错误结果。"""
        details: dict[str, Any] = {"operation": operation}
        if error.status_code is not None:
            details["status_code"] = error.status_code
        if error.code is not None:
            details["code"] = error.code
        return MCPResponseBuilder.error(
            message=MessageFormatter.operation_failed(operation, error.context or "-", error),
            error_type="api",
            details=details,
        )


logger = get_logger(__name__)

# 创建MCP应用
mcp: FastMCP[Any] = FastMCP("相册管理服务")


@asynccontextmanager
async def open_api():
    """按配置创建管理 API 客户端"""
    async with AdminApi() as api:
        yield api


async def run_operation(
    operation: str,
    action: Callable[[AdminApi], Awaitable[Any]],
    message: str | None = None,
) -> MCPResponse:
    """执行一次 API 操作并把异常转换为错误响应"""
    try:
        async with open_api() as api:
            data = await action(api)
    except PydanticValidationError as e:
        error = as_validation_error(e, operation)
        return MCPResponseBuilder.validation_error(error.message)
    except ValidationError as e:
        return MCPResponseBuilder.validation_error(e.message, e.context)
    except ApiError as e:
        logger.error(MessageFormatter.operation_failed(operation, e.context or "-", e))
        return MCPResponseBuilder.api_error(e, operation)

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")
    elif isinstance(data, list):
        data = [
            d.model_dump(mode="json") if hasattr(d, "model_dump") else d for d in data
        ]
    return MCPResponseBuilder.success(data, message)


# ============================================================================
# 上传工具
# ============================================================================


@mcp.tool()
async def upload_photos(
    paths: list[str],
    album_id: int,
    quality: int | None = None,
    recursive: bool = False,
) -> MCPResponse:
    """批量上传图片到相册

    Args:
        paths: 图片文件或目录路径
        album_id: 目标相册ID
        quality: 输出质量 1-100，100 为原图，数值越低文件越小；不传时使用配置的默认值
        recursive: 目录是否递归

    Returns:
        dict: 上传结果，包含创建的照片、被拒绝的文件和提示消息
    """
    if quality is None:
        quality = get_config().upload.DEFAULT_QUALITY

    async with open_api() as api:
        report = await PhotoUploader(api).upload_paths(
            paths, album_id, quality, recursive=recursive
        )

    if not report["success"]:
        return MCPResponseBuilder.error(
            report["error"] or "上传失败",
            error_type=report["error_type"] or "general",
            details={
                "rejected": [r.model_dump() for r in report["rejected"]],
                "messages": report["messages"],
            },
        )

    outcome = report["outcome"]
    return {
        "success": True,
        "uploaded": outcome.uploaded_count,
        "photos": [p.model_dump(mode="json") for p in outcome.photos],
        "rejected": [r.model_dump() for r in report["rejected"]],
        "compression_fallbacks": (
            outcome.compression.fallback_count if outcome.compression else 0
        ),
        "messages": report["messages"],
    }


# ============================================================================
# 相册工具
# ============================================================================


@mcp.tool()
async def list_albums(
    page: int = 1, limit: int = 10, keyword: str | None = None
) -> MCPResponse:
    """获取相册列表（分页、关键词搜索）"""
    return await run_operation(
        "加载相册列表",
        lambda api: api.albums.list(
            QueryParams(page=page, limit=limit, keyword=keyword)
        ),
    )


@mcp.tool()
async def get_album(album_id: int) -> MCPResponse:
    """获取相册详情"""
    return await run_operation("加载相册详情", lambda api: api.albums.detail(album_id))


@mcp.tool()
async def create_album(
    name: str, description: str | None = None, cover: str | None = None
) -> MCPResponse:
    """创建相册"""
    return await run_operation(
        "创建相册",
        lambda api: api.albums.create(
            CreateAlbumParams(name=name, description=description, cover=cover)
        ),
        "创建相册成功",
    )


@mcp.tool()
async def update_album(
    album_id: int,
    name: str | None = None,
    description: str | None = None,
    cover: str | None = None,
) -> MCPResponse:
    """更新相册，只修改传入的字段"""
    fields = {
        key: value
        for key, value in {
            "name": name,
            "description": description,
            "cover": cover,
        }.items()
        if value is not None
    }
    return await run_operation(
        "更新相册",
        lambda api: api.albums.update(album_id, UpdateAlbumParams(**fields)),
        "更新相册成功",
    )


@mcp.tool()
async def delete_album(album_id: int) -> MCPResponse:
    """删除相册"""
    return await run_operation(
        "删除相册", lambda api: api.albums.delete(album_id), "删除相册成功"
    )


@mcp.tool()
async def add_photos_to_album(album_id: int, photo_ids: list[int]) -> MCPResponse:
    """把照片加入相册"""
    return await run_operation(
        "添加照片",
        lambda api: api.albums.add_photos(
            album_id, ManagePhotosParams(photo_ids=photo_ids)
        ),
        MessageFormatter.photos_added(len(set(photo_ids))),
    )


@mcp.tool()
async def remove_photos_from_album(
    album_id: int, photo_ids: list[int]
) -> MCPResponse:
    """从相册移除照片"""
    return await run_operation(
        "移除照片",
        lambda api: api.albums.remove_photos(
            album_id, ManagePhotosParams(photo_ids=photo_ids)
        ),
        MessageFormatter.photos_removed(len(set(photo_ids))),
    )


@mcp.tool()
async def list_album_photos(
    album_id: int, page: int = 1, limit: int = 10
) -> MCPResponse:
    """分页查询相册中的照片"""
    return await run_operation(
        "加载照片列表",
        lambda api: api.albums.photos(album_id, QueryParams(page=page, limit=limit)),
    )


@mcp.tool()
async def search_photos_excluding_album(
    album_id: int, page: int = 1, limit: int = 20, keyword: str | None = None
) -> MCPResponse:
    """分页搜索尚未加入该相册的照片"""
    return await run_operation(
        "搜索照片",
        lambda api: api.albums.photos_excluding(
            album_id, QueryParams(page=page, limit=limit, keyword=keyword)
        ),
    )


# ============================================================================
# 照片工具
# ============================================================================


@mcp.tool()
async def list_photos(
    page: int = 1, limit: int = 10, keyword: str | None = None
) -> MCPResponse:
    """获取照片列表（分页、关键词搜索）"""
    return await run_operation(
        "加载照片列表",
        lambda api: api.photos.list(
            QueryParams(page=page, limit=limit, keyword=keyword)
        ),
    )


@mcp.tool()
async def get_photo(photo_id: int) -> MCPResponse:
    """获取照片详情"""
    return await run_operation("加载照片详情", lambda api: api.photos.detail(photo_id))


@mcp.tool()
async def update_photo(photo_id: int, name: str) -> MCPResponse:
    """修改照片名称"""
    return await run_operation(
        "更新照片",
        lambda api: api.photos.update(photo_id, UpdatePhotoParams(name=name)),
        "更新照片成功",
    )


@mcp.tool()
async def delete_photos(photo_ids: list[int]) -> MCPResponse:
    """删除一张或多张照片"""
    if not photo_ids:
        return MCPResponseBuilder.validation_error("请选择要删除的照片", "photo_ids")
    return await run_operation(
        "删除照片",
        lambda api: api.photos.delete_many(photo_ids),
        MessageFormatter.photos_deleted(len(set(photo_ids))),
    )


@mcp.tool()
async def get_overview() -> MCPResponse:
    """首页统计：相册总数和照片总数"""
    return await run_operation("加载统计", lambda api: api.overview())


# ============================================================================
# 应用入口
# ============================================================================


def main() -> None:
    """启动 MCP 服务器"""
    log_config = get_config().logging
    configure_logging(log_config.LOG_LEVEL, log_config.LOG_FORMAT)
    logger.info("启动相册管理 MCP 服务器")
    mcp.run()


if __name__ == "__main__":
    main()
