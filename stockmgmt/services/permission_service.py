# stockmgmt/services/permission_service.py
"""
库存管理权限校验。

每个受保护操作 = 一个权限名 + 一种作用域：
  - UNSCOPED                 不带 program / facility
  - PROGRAM_FACILITY         按 (program, facility) 校验
  - PROGRAM_FACILITY_TYPE    先不带作用域校验；明确“没有权限”时再走 (program, facility type) 兜底

每次校验只问一次 referencedata（兜底时最多两次），不缓存、不重试。
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Optional, Protocol
from uuid import UUID

from stockmgmt.metrics import PERMISSION_CHECKS
from stockmgmt.services.authentication import AuthenticationContext
from stockmgmt.services.permission_errors import PermissionCheckFailed, RightNotHeld
from stockmgmt.services.program_facility_type_permission_service import (
    ProgramFacilityTypePermission,
)
from stockmgmt.services.referencedata.base import ReferenceDataError

logger = logging.getLogger("stockmgmt.permission")


class StockRight(str, Enum):
    STOCK_CARD_TEMPLATES_MANAGE = "STOCK_CARD_TEMPLATES_MANAGE"
    STOCK_INVENTORIES_EDIT = "STOCK_INVENTORIES_EDIT"
    STOCK_ADJUST = "STOCK_ADJUST"
    # 注：STOCK_CARDS_VIEW 是否能从 requisition 查看权限推导，目前只作为策略意图记录，不实现
    STOCK_CARDS_VIEW = "STOCK_CARDS_VIEW"
    STOCK_SOURCES_MANAGE = "STOCK_SOURCES_MANAGE"
    STOCK_DESTINATIONS_MANAGE = "STOCK_DESTINATIONS_MANAGE"
    STOCK_CARD_LINE_ITEM_REASONS_VIEW = "STOCK_CARD_LINE_ITEM_REASONS_VIEW"
    STOCK_CARD_LINE_ITEM_REASONS_MANAGE = "STOCK_CARD_LINE_ITEM_REASONS_MANAGE"
    ORGANIZATIONS_MANAGE = "ORGANIZATIONS_MANAGE"


class RightScope(str, Enum):
    UNSCOPED = "UNSCOPED"
    PROGRAM_FACILITY = "PROGRAM_FACILITY"
    PROGRAM_FACILITY_TYPE = "PROGRAM_FACILITY_TYPE"


RIGHT_SCOPES: Dict[StockRight, RightScope] = {
    StockRight.STOCK_CARD_TEMPLATES_MANAGE: RightScope.UNSCOPED,
    StockRight.STOCK_INVENTORIES_EDIT: RightScope.PROGRAM_FACILITY,
    StockRight.STOCK_ADJUST: RightScope.PROGRAM_FACILITY,
    StockRight.STOCK_CARDS_VIEW: RightScope.PROGRAM_FACILITY,
    StockRight.STOCK_SOURCES_MANAGE: RightScope.UNSCOPED,
    StockRight.STOCK_DESTINATIONS_MANAGE: RightScope.UNSCOPED,
    StockRight.STOCK_CARD_LINE_ITEM_REASONS_VIEW: RightScope.PROGRAM_FACILITY_TYPE,
    StockRight.STOCK_CARD_LINE_ITEM_REASONS_MANAGE: RightScope.UNSCOPED,
    StockRight.ORGANIZATIONS_MANAGE: RightScope.UNSCOPED,
}


class RightsAuthority(Protocol):
    async def has_right(
        self,
        user_id: UUID,
        right_id: UUID,
        program_id: Optional[UUID] = None,
        facility_id: Optional[UUID] = None,
        warehouse_id: Optional[UUID] = None,
    ) -> Optional[bool]: ...


class PermissionService:
    def __init__(
        self,
        auth: AuthenticationContext,
        rights: RightsAuthority,
        program_facility_permission: ProgramFacilityTypePermission,
    ) -> None:
        self.auth = auth
        self.rights = rights
        self.program_facility_permission = program_facility_permission

    # ---------- 统一入口 ----------

    async def check(
        self,
        right: StockRight,
        *,
        program_id: Optional[UUID] = None,
        facility_id: Optional[UUID] = None,
        facility_type_id: Optional[UUID] = None,
    ) -> None:
        """
        按 RIGHT_SCOPES 分派；与该权限作用域无关的参数直接忽略。
        """
        scope = RIGHT_SCOPES[right]
        if scope is RightScope.UNSCOPED:
            await self.check_right(right.value)
        elif scope is RightScope.PROGRAM_FACILITY:
            await self.check_right(right.value, program_id, facility_id)
        else:
            await self._check_with_facility_type_fallback(right.value, program_id, facility_type_id)

    # ---------- 具名操作 ----------

    async def can_create_stock_card_template(self) -> None:
        await self.check(StockRight.STOCK_CARD_TEMPLATES_MANAGE)

    async def can_edit_physical_inventory(self, program_id: UUID, facility_id: UUID) -> None:
        await self.check(StockRight.STOCK_INVENTORIES_EDIT, program_id=program_id, facility_id=facility_id)

    async def can_make_adjustment(self, program_id: UUID, facility_id: UUID) -> None:
        await self.check(StockRight.STOCK_ADJUST, program_id=program_id, facility_id=facility_id)

    async def can_view_stock_card(self, program_id: UUID, facility_id: UUID) -> None:
        await self.check(StockRight.STOCK_CARDS_VIEW, program_id=program_id, facility_id=facility_id)

    async def can_manage_stock_sources(self) -> None:
        await self.check(StockRight.STOCK_SOURCES_MANAGE)

    async def can_manage_stock_destinations(self) -> None:
        await self.check(StockRight.STOCK_DESTINATIONS_MANAGE)

    async def can_view_reasons(self, program_id: UUID, facility_type_id: UUID) -> None:
        await self.check(
            StockRight.STOCK_CARD_LINE_ITEM_REASONS_VIEW,
            program_id=program_id,
            facility_type_id=facility_type_id,
        )

    async def can_manage_reasons(self) -> None:
        await self.check(StockRight.STOCK_CARD_LINE_ITEM_REASONS_MANAGE)

    async def can_manage_organizations(self) -> None:
        await self.check(StockRight.ORGANIZATIONS_MANAGE)

    # ---------- 核心 ----------

    async def check_right(
        self,
        right_name: str,
        program_id: Optional[UUID] = None,
        facility_id: Optional[UUID] = None,
        warehouse_id: Optional[UUID] = None,
    ) -> None:
        """
        result 为 True → 放行；False / None → RightNotHeld；上游调用失败 → PermissionCheckFailed。
        """
        result = await self._get_right_result(right_name, program_id, facility_id, warehouse_id)
        if not result:
            PERMISSION_CHECKS.labels(right_name, "denied").inc()
            raise RightNotHeld(right_name)
        PERMISSION_CHECKS.labels(right_name, "granted").inc()

    async def _check_with_facility_type_fallback(
        self,
        right_name: str,
        program_id: Optional[UUID],
        facility_type_id: Optional[UUID],
    ) -> None:
        # 只有“明确没有权限”才兜底；PermissionCheckFailed 原样上抛。
        # 兜底路径只记 fallback，不再额外记 denied
        result = await self._get_right_result(right_name, None, None, None)
        if result:
            PERMISSION_CHECKS.labels(right_name, "granted").inc()
            return

        logger.info(
            "right %s not held, fallback to program=%s facility_type=%s",
            right_name,
            program_id,
            facility_type_id,
        )
        PERMISSION_CHECKS.labels(right_name, "fallback").inc()
        await self.program_facility_permission.check_program_facility(program_id, facility_type_id)

    async def _get_right_result(
        self,
        right_name: str,
        program_id: Optional[UUID],
        facility_id: Optional[UUID],
        warehouse_id: Optional[UUID],
    ) -> Optional[bool]:
        user = await self.auth.current_user()
        right = await self.auth.right_by_name(right_name)

        try:
            return await self.rights.has_right(user.id, right.id, program_id, facility_id, warehouse_id)
        except ReferenceDataError as exc:
            logger.warning("permission check for %s failed: %s", right_name, exc.message)
            PERMISSION_CHECKS.labels(right_name, "failed").inc()
            raise PermissionCheckFailed(exc.message) from exc
