# stockmgmt/api/routers/valid_reasons.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from stockmgmt.authz import require_right
from stockmgmt.services.permission_service import StockRight

router = APIRouter(prefix="/api/validReasons", tags=["valid-reasons"])


@router.get(
    "/permission",
    dependencies=[Depends(require_right(StockRight.STOCK_CARD_LINE_ITEM_REASONS_VIEW))],
)
async def can_view_valid_reasons() -> dict:
    """
    权限探针：?program=..&facilityType=..

    没有 STOCK_CARD_LINE_ITEM_REASONS_VIEW 时按 (program, facility type) 兜底。
    """
    return {"ok": True}
