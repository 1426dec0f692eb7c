# stockmgmt/services/physical_inventory_mapper.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from stockmgmt.schemas.physical_inventory import PhysicalInventory
from stockmgmt.schemas.stock_event import StockEvent
from stockmgmt.services.physical_inventory_errors import PhysicalInventoryBadInput

logger = logging.getLogger("stockmgmt.physical_inventory")


def to_stock_events(inventory: PhysicalInventory) -> List[StockEvent]:
    """
    盘点提交 → 库存事件（一行一条，顺序与行顺序一致）。

    - 表头（facility / program / occurred_date / signature / document_number）原样拷贝到每条事件
    - orderable_id / quantity 只取自对应行，不做任何默认
    - 任一行缺 orderable id 直接整单拒绝，不返回部分结果
    """
    if inventory.line_items is None:
        raise PhysicalInventoryBadInput(
            [{"type": "validation", "path": "line_items", "reason": "line_items is required"}]
        )

    problems: List[Dict[str, Any]] = []
    for idx, line in enumerate(inventory.line_items):
        if line.orderable is None:
            problems.append(
                {"type": "validation", "path": f"line_items[{idx}]", "reason": "orderable is missing"}
            )
        elif line.orderable.id is None:
            problems.append(
                {"type": "validation", "path": f"line_items[{idx}]", "reason": "orderable id is missing"}
            )
    if problems:
        raise PhysicalInventoryBadInput(problems)

    events = [
        StockEvent(
            facility_id=inventory.facility_id,
            program_id=inventory.program_id,
            occurred_date=inventory.occurred_date,
            signature=inventory.signature,
            document_number=inventory.document_number,
            orderable_id=line.orderable_id,
            quantity=line.quantity,
        )
        for line in inventory.line_items
    ]
    logger.debug("physical inventory mapped to %d stock events", len(events))
    return events
