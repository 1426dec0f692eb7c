# stockmgmt/services/physical_inventory_errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class PhysicalInventoryBadInput(Exception):
    """
    盘点提交不满足映射契约（缺 line_items / 行缺 orderable id）。

    属于调用方编程错误：不兜底、不默认，原样向上抛。
    details 形如 [{"type": "validation", "path": "line_items[2]", "reason": "..."}]
    """

    details: list[dict[str, Any]]

    def __str__(self) -> str:
        return "; ".join(f"{d.get('path')}: {d.get('reason')}" for d in self.details)
