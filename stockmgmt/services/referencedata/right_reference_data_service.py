# stockmgmt/services/referencedata/right_reference_data_service.py
from __future__ import annotations

from typing import Any, Optional

from stockmgmt.schemas.referencedata import RightDto
from stockmgmt.services.referencedata.base import BaseReferenceDataService


def _first_right(rows: Any) -> Optional[RightDto]:
    if not rows:
        return None
    return RightDto.model_validate(rows[0])


class RightReferenceDataService(BaseReferenceDataService):
    resource_url = "/api/rights"

    async def find_right(self, name: str) -> Optional[RightDto]:
        resp = await self._request("GET", "search", params={"name": name})
        return self._decode(resp, "right search", _first_right)
