"""统一配置管理模块。

提供应用程序的全局配置管理，包括默认值、环境变量支持等。
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ApiDefaults:
    """远程 API 相关的默认配置"""

    BASE_URL: str = "http://localhost:3000/api"
    TIMEOUT_SECONDS: float = 10.0
    TOKEN: str = ""

    # 业务成功码，兼容 200 和 0 两种约定
    SUCCESS_CODES: tuple[int, ...] = (200, 0)


@dataclass(frozen=True)
class UploadDefaults:
    """上传相关的默认配置"""

    # 单文件大小上限，不同页面曾使用 10/20/30MB，统一由配置决定
    MAX_FILE_SIZE_MB: float = 20.0
    ACCEPTED_MIME_PREFIX: str = "image/"

    # 质量设置，100 为原图上传
    DEFAULT_QUALITY: int = 100

    # 并发设置
    MAX_WORKERS: int = 4

    # 画布像素上限，超过时视为无法分配画布
    MAX_SURFACE_PIXELS: int = 16384 * 16384

    # 合成进度
    COMPRESSION_PROGRESS_SHARE: int = 30
    NETWORK_PROGRESS_CAP: int = 90
    NETWORK_PROGRESS_STEP: int = 10
    NETWORK_PROGRESS_INTERVAL: float = 0.2


@dataclass(frozen=True)
class LoggingDefaults:
    """日志相关的默认配置"""

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig:
    """应用程序配置管理器

    支持环境变量覆盖默认配置
    """

    def __init__(self):
        self.api = ApiDefaults()
        self.upload = UploadDefaults()
        self.logging = LoggingDefaults()

        # 从环境变量加载配置
        self._load_from_env()

    def _load_from_env(self):
        """从环境变量加载配置"""
        # API 配置
        if base_url := os.getenv("PAA_API_BASE_URL"):
            object.__setattr__(self.api, "BASE_URL", base_url.rstrip("/"))

        if token := os.getenv("PAA_API_TOKEN"):
            object.__setattr__(self.api, "TOKEN", token)

        if timeout := os.getenv("PAA_API_TIMEOUT"):
            object.__setattr__(self.api, "TIMEOUT_SECONDS", float(timeout))

        # 上传配置
        if max_size := os.getenv("PAA_MAX_FILE_SIZE_MB"):
            object.__setattr__(self.upload, "MAX_FILE_SIZE_MB", float(max_size))

        if quality := os.getenv("PAA_DEFAULT_QUALITY"):
            object.__setattr__(self.upload, "DEFAULT_QUALITY", int(quality))

        if max_workers := os.getenv("PAA_MAX_WORKERS"):
            object.__setattr__(self.upload, "MAX_WORKERS", int(max_workers))

        # 日志配置
        if log_level := os.getenv("PAA_LOG_LEVEL"):
            object.__setattr__(self.logging, "LOG_LEVEL", log_level.upper())


# 全局配置实例
config = AppConfig()


def get_config() -> AppConfig:
    """获取全局配置实例"""
    return config


def reset_config():
    """重置配置（主要用于测试）"""
    global config
    config = AppConfig()
