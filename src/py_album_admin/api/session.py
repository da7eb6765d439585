"""会话上下文模块。

登录凭证以显式对象传递给 API 客户端，不使用全局状态。
"""

from pydantic import BaseModel, Field

from ..models.api_models import LoginResponse, User


class SessionContext(BaseModel):
    """管理员会话"""

    token: str = Field("", repr=False, description="访问令牌")
    user: User | None = Field(None, description="当前用户")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> dict[str, str]:
        """构建认证请求头，未登录时为空"""
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def set_login(self, response: LoginResponse) -> None:
        """保存登录结果"""
        self.token = response.token
        self.user = response.user

    def clear(self) -> None:
        """退出登录"""
        self.token = ""
        self.user = None
