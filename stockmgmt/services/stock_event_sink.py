# stockmgmt/services/stock_event_sink.py
from __future__ import annotations

import logging
from typing import List, Protocol

from stockmgmt.metrics import STOCK_EVENTS
from stockmgmt.schemas.stock_event import StockEvent

logger = logging.getLogger("stockmgmt.events")


class StockEventSink(Protocol):
    async def publish(self, events: List[StockEvent]) -> None: ...


class LoggingStockEventSink:
    """
    默认落点：只记日志 + 计数。

    真正的事件处理管线在下游服务，这里不落库。
    """

    async def publish(self, events: List[StockEvent]) -> None:
        for ev in events:
            logger.info(
                "stock event: facility=%s program=%s orderable=%s qty=%s doc=%s",
                ev.facility_id,
                ev.program_id,
                ev.orderable_id,
                ev.quantity,
                ev.document_number,
            )
        STOCK_EVENTS.inc(len(events))
