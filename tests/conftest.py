# tests/conftest.py
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import AsyncGenerator
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

# 测试环境固定为 dev + 已知 secret，需在 import app 之前设置
os.environ.setdefault("ENV", "dev")
os.environ.setdefault("JWT_SECRET", "test-secret")

from stockmgmt.main import app  # noqa: E402


@pytest.fixture
def inventory_payload() -> dict:
    """一份合法的盘点提交（wire 形态：camelCase）。"""
    return {
        "programId": str(uuid4()),
        "facilityId": str(uuid4()),
        "isDraft": False,
        "occurredDate": datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc).isoformat(),
        "signature": "keeper",
        "documentNumber": "PI-0001",
        "lineItems": [
            {"orderable": {"id": str(uuid4())}, "quantity": 10},
            {"orderable": {"id": str(uuid4())}, "quantity": 0},
            {"orderable": {"id": str(uuid4())}, "quantity": 7},
        ],
    }


# =========================================
# FastAPI / httpx AsyncClient（不触发 lifespan，依赖靠 overrides 注入）
# =========================================
@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://testserver",
        timeout=httpx.Timeout(10.0, connect=5.0, read=10.0, write=5.0, pool=5.0),
    ) as c:
        yield c
    app.dependency_overrides.clear()
