# stockmgmt/api/routers/physical_inventories.py
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from stockmgmt.api.deps import get_permission_service, get_stock_event_sink
from stockmgmt.schemas._base import WireModel
from stockmgmt.schemas.physical_inventory import PhysicalInventory
from stockmgmt.schemas.stock_event import StockEvent
from stockmgmt.services.permission_service import PermissionService
from stockmgmt.services.physical_inventory_mapper import to_stock_events
from stockmgmt.services.stock_event_sink import StockEventSink

logger = logging.getLogger("stockmgmt.physical_inventory")

router = APIRouter(prefix="/api/physicalInventories", tags=["physical-inventories"])


class PhysicalInventorySubmitResponse(WireModel):
    draft: bool
    events: List[StockEvent]


@router.post("", response_model=PhysicalInventorySubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_physical_inventory(
    inventory: PhysicalInventory,
    permissions: PermissionService = Depends(get_permission_service),
    sink: StockEventSink = Depends(get_stock_event_sink),
) -> PhysicalInventorySubmitResponse:
    """
    提交盘点：

      1) 校验 STOCK_INVENTORIES_EDIT（按 program + facility）；
      2) 草稿（isDraft=true）只做权限校验，不派生事件；
      3) 非草稿 → 每行派生一条库存事件，交给下游事件落点。
    """
    await permissions.can_edit_physical_inventory(inventory.program_id, inventory.facility_id)

    if inventory.is_draft:
        logger.info(
            "draft physical inventory accepted: program=%s facility=%s",
            inventory.program_id,
            inventory.facility_id,
        )
        return PhysicalInventorySubmitResponse(draft=True, events=[])

    events = to_stock_events(inventory)
    await sink.publish(events)
    return PhysicalInventorySubmitResponse(draft=False, events=events)
