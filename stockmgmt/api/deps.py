# stockmgmt/api/deps.py
from __future__ import annotations

import httpx
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from stockmgmt.api.problem import raise_401
from stockmgmt.core.config import AppSettings, get_settings
from stockmgmt.core.security import username_from_token
from stockmgmt.services.authentication import AuthenticationHelper
from stockmgmt.services.permission_service import PermissionService
from stockmgmt.services.program_facility_type_permission_service import (
    ProgramFacilityTypePermissionService,
)
from stockmgmt.services.referencedata.facility_reference_data_service import (
    FacilityReferenceDataService,
)
from stockmgmt.services.referencedata.right_reference_data_service import (
    RightReferenceDataService,
)
from stockmgmt.services.referencedata.user_reference_data_service import (
    UserReferenceDataService,
)
from stockmgmt.services.stock_event_sink import LoggingStockEventSink, StockEventSink

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/oauth/token", auto_error=False)


# ---------------------------
# 当前用户名（严格版）
# ---------------------------


async def get_current_username(
    token: str | None = Depends(oauth2_scheme),
    settings: AppSettings = Depends(get_settings),
) -> str:
    """
    - 必须带 Authorization: Bearer <token>
    - token 无效 / 过期 → 401
    """
    token = (token or "").strip()
    if not token:
        raise_401("Not authenticated")

    username = username_from_token(token, settings)
    if not username:
        raise_401("Invalid or expired token")
    return username


# ---------------------------
# referencedata 客户端（进程内共享，在 lifespan 里创建）
# ---------------------------


def get_referencedata_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.referencedata_client


def get_auth_context(
    username: str = Depends(get_current_username),
    client: httpx.AsyncClient = Depends(get_referencedata_client),
) -> AuthenticationHelper:
    return AuthenticationHelper(
        username,
        UserReferenceDataService(client),
        RightReferenceDataService(client),
    )


def get_permission_service(
    auth: AuthenticationHelper = Depends(get_auth_context),
    client: httpx.AsyncClient = Depends(get_referencedata_client),
) -> PermissionService:
    return PermissionService(
        auth,
        UserReferenceDataService(client),
        ProgramFacilityTypePermissionService(auth, FacilityReferenceDataService(client)),
    )


async def get_stock_event_sink() -> StockEventSink:
    """无状态，简单返回实例。"""
    return LoggingStockEventSink()


__all__ = (
    "get_current_username",
    "get_referencedata_client",
    "get_auth_context",
    "get_permission_service",
    "get_stock_event_sink",
)
