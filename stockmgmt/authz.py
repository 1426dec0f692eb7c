# stockmgmt/authz.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import Depends, Query

from stockmgmt.api.deps import get_permission_service
from stockmgmt.services.permission_service import PermissionService, StockRight


def require_right(right: StockRight):
    """
    用法：
        @router.get("/x", dependencies=[Depends(require_right(StockRight.STOCK_ADJUST))])
        def x(): ...

    作用域参数从 query 读取（program / facility / facilityType），
    与该权限作用域无关的参数会被忽略。
    """

    async def dep(
        program: Optional[UUID] = Query(default=None),
        facility: Optional[UUID] = Query(default=None),
        facility_type: Optional[UUID] = Query(default=None, alias="facilityType"),
        permissions: PermissionService = Depends(get_permission_service),
    ) -> None:
        await permissions.check(
            right,
            program_id=program,
            facility_id=facility,
            facility_type_id=facility_type,
        )

    return dep
