# stockmgmt/schemas/stock_event.py
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from stockmgmt.schemas._base import FrozenWireModel


class StockEvent(FrozenWireModel):
    """
    单条库存变动事件（由一条盘点行派生）。

    表头字段是拷贝而不是引用，不回指来源盘点。
    """

    facility_id: UUID
    program_id: UUID
    occurred_date: datetime
    signature: Optional[str] = None
    document_number: Optional[str] = None
    orderable_id: UUID
    quantity: int


__all__ = ["StockEvent"]
