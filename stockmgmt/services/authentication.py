# stockmgmt/services/authentication.py
from __future__ import annotations

from typing import Protocol

from stockmgmt.schemas.referencedata import RightDto, UserDto
from stockmgmt.services.permission_errors import AuthenticationError, PermissionCheckFailed
from stockmgmt.services.referencedata.base import ReferenceDataError
from stockmgmt.services.referencedata.right_reference_data_service import (
    RightReferenceDataService,
)
from stockmgmt.services.referencedata.user_reference_data_service import (
    UserReferenceDataService,
)


class AuthenticationContext(Protocol):
    async def current_user(self) -> UserDto: ...

    async def right_by_name(self, name: str) -> RightDto: ...


class AuthenticationHelper:
    """
    按请求构造的认证上下文：当前用户名显式传入，不依赖任何进程级全局状态。

    每次调用都会问一次 referencedata，不做缓存。
    - 查不到 → AuthenticationError
    - referencedata 调用失败 → PermissionCheckFailed（问不到答案，不是“没有”）
    """

    def __init__(
        self,
        username: str,
        users: UserReferenceDataService,
        rights: RightReferenceDataService,
    ) -> None:
        self.username = username
        self.users = users
        self.rights = rights

    async def current_user(self) -> UserDto:
        try:
            user = await self.users.find_user(self.username)
        except ReferenceDataError as exc:
            raise PermissionCheckFailed(exc.message) from exc
        if user is None:
            raise AuthenticationError(f"User with name {self.username!r} not found")
        return user

    async def right_by_name(self, name: str) -> RightDto:
        try:
            right = await self.rights.find_right(name)
        except ReferenceDataError as exc:
            raise PermissionCheckFailed(exc.message) from exc
        if right is None:
            raise AuthenticationError(f"Right with name {name!r} not found")
        return right
