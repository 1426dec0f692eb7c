# stockmgmt/metrics.py
from __future__ import annotations

import os

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    generate_latest,
    multiprocess,
)

# 权限校验结果：granted / denied / failed / fallback
PERMISSION_CHECKS = Counter(
    "stock_permission_checks_total", "Permission checks by right and outcome", ["right", "outcome"]
)
# 盘点派生出来的库存事件条数
STOCK_EVENTS = Counter("stock_events_derived_total", "Stock events derived from physical inventories")

router = APIRouter()


@router.get("/metrics")
def metrics() -> Response:
    """
    单进程直接导出默认 REGISTRY；
    多进程模式（设置了 PROMETHEUS_MULTIPROC_DIR）下用 MultiProcessCollector 合并各分片。
    """
    if os.environ.get("PROMETHEUS_MULTIPROC_DIR"):
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        payload = generate_latest(registry)
    else:
        payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
