# stockmgmt/core/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    全局应用配置（环境变量 / .env）
    """

    # 运行环境
    ENV: str = Field(default="dev")
    DEBUG: bool = Field(default=True)

    # 日志
    LOG_LEVEL: str = Field(default="INFO")
    # 为空时跟随 LOG_LEVEL
    REFERENCEDATA_LOG_LEVEL: Optional[str] = Field(default=None)

    # referencedata 服务（权限 / 用户 / 设施的权威来源）
    REFERENCEDATA_URL: str = Field(
        default="http://127.0.0.1:8080",
        description="referencedata 服务根地址，例如：http://referencedata:8080",
    )
    REFERENCEDATA_TOKEN: str = Field(default="", description="服务间调用使用的 bearer token")
    # 超时完全交给 HTTP 客户端，本服务不做重试
    HTTP_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # 安全
    JWT_SECRET: str = Field(default="dev-temp-secret")
    JWT_ALG: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> AppSettings:
    """全局单例设置入口。"""
    return AppSettings()
