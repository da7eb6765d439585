"""HTTP 客户端模块。

封装对远程管理 API 的请求，统一处理认证头、响应包装和错误转换。
"""

import logging
from typing import Any

import httpx

from ..config import get_config
from ..exceptions import ApiError
from .session import SessionContext


logger = logging.getLogger(__name__)


class ApiClient:
    """管理 API 的 HTTP 客户端

    响应格式为 {code, message, data}，成功时返回 data。

    使用示例：
        async with ApiClient("http://localhost:3000/api") as client:
            data = await client.request("GET", "/album/list", params={"page": 1})
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: SessionContext | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        初始化 API 客户端

        Args:
            base_url: API 基础URL，None 使用配置
            session: 会话上下文，None 时创建空会话（使用配置中的令牌）
            timeout: 默认请求超时（秒），None 使用配置
            transport: 自定义传输层，主要用于测试
        """
        api_config = get_config().api
        self.base_url = (base_url or api_config.BASE_URL).rstrip("/")
        self.session = session or SessionContext(token=api_config.TOKEN)
        self.success_codes = api_config.SUCCESS_CODES

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else api_config.TIMEOUT_SECONDS,
            transport=transport,
        )

        logger.debug(f"Initialized API client: {self.base_url}")

    async def close(self):
        """关闭HTTP客户端"""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, Any] | None = None,
        files: list[tuple[str, tuple[str, bytes, str]]] | None = None,
        unbounded: bool = False,
    ) -> Any:
        """发送请求并返回响应中的 data

        Args:
            method: HTTP 方法
            path: 接口路径
            params: 查询参数
            json: JSON 请求体
            data: 表单字段
            files: multipart 文件列表
            unbounded: 为 True 时不设超时（大批量上传）

        Raises:
            ApiError: 网络错误、HTTP 错误状态或业务错误码
        """
        extra: dict[str, Any] = {}
        if unbounded:
            extra["timeout"] = None

        try:
            response = await self.client.request(
                method,
                path,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=self.session.auth_headers(),
                **extra,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.error(
                f"{method} {path} 失败: {e.response.status_code} - {message}"
            )
            raise ApiError(
                message, status_code=e.response.status_code, context=path
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} 网络请求失败: {e}")
            raise ApiError(f"网络请求失败: {e}", context=path) from e

        return self._unwrap(response, path)

    def _unwrap(self, response: httpx.Response, path: str) -> Any:
        """解析 {code, message, data} 响应包装"""
        if not response.content:
            return None

        try:
            payload = response.json()
        except ValueError as e:
            raise ApiError(
                f"无法解析响应: {e}", status_code=response.status_code, context=path
            ) from e

        if not isinstance(payload, dict) or "code" not in payload:
            return payload

        code = payload.get("code")
        if code not in self.success_codes:
            message = payload.get("message") or f"业务错误码 {code}"
            raise ApiError(
                message, status_code=response.status_code, code=code, context=path
            )
        return payload.get("data")


def _error_message(response: httpx.Response) -> str:
    """从错误响应中提取消息"""
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("detail")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return response.reason_phrase
