"""用户接口。"""

from ..models.api_models import LoginParams, LoginResponse
from .client import ApiClient


class UsersAPI:
    """管理员登录"""

    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, params: LoginParams) -> LoginResponse:
        """管理员登录，成功后令牌写入客户端的会话上下文

        Args:
            params: 用户名和密码

        Returns:
            LoginResponse: 令牌和用户信息
        """
        data = await self.client.request(
            "POST", "/web/user/login", json=params.model_dump()
        )
        response = LoginResponse.model_validate(data)
        self.client.session.set_login(response)
        return response

    def logout(self) -> None:
        """退出登录"""
        self.client.session.clear()
