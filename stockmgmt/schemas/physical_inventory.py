# stockmgmt/schemas/physical_inventory.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Tuple
from uuid import UUID

from pydantic import Field, field_validator

from stockmgmt.schemas._base import FrozenWireModel


class OrderableRef(FrozenWireModel):
    """
    行上挂的 orderable 引用；映射只关心 id，其余展示字段原样忽略。
    """

    id: Optional[UUID] = None
    product_code: Optional[str] = None
    full_product_name: Optional[str] = None


class PhysicalInventoryLineItem(FrozenWireModel):
    orderable: Optional[OrderableRef] = None
    quantity: int = Field(..., description="盘点数量")

    @property
    def orderable_id(self) -> Optional[UUID]:
        return self.orderable.id if self.orderable is not None else None


class PhysicalInventory(FrozenWireModel):
    """
    一次盘点提交（表头 + 行）：
      - 表头字段会被原样广播到每条库存事件上
      - occurred_date 必须带时区；naive 时间统一按 UTC 处理
      - line_items 允许缺省为 None，由映射层判定为调用方契约错误
    """

    program_id: UUID
    facility_id: UUID
    is_draft: bool = False
    occurred_date: datetime
    signature: Optional[str] = None
    document_number: Optional[str] = None
    # tuple：冻结模型里的行本身也不可变
    line_items: Optional[Tuple[PhysicalInventoryLineItem, ...]] = None

    @field_validator("occurred_date")
    @classmethod
    def _ensure_tz(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


__all__ = ["OrderableRef", "PhysicalInventoryLineItem", "PhysicalInventory"]
