# stockmgmt/services/referencedata/user_reference_data_service.py
from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from stockmgmt.schemas.referencedata import ResultDto, UserDto
from stockmgmt.services.referencedata.base import BaseReferenceDataService


def _first_user(data: Any) -> Optional[UserDto]:
    content = data.get("content", []) if isinstance(data, dict) else data
    if not content:
        return None
    return UserDto.model_validate(content[0])


def _right_result(data: Any) -> Optional[bool]:
    return ResultDto.model_validate(data).result


class UserReferenceDataService(BaseReferenceDataService):
    resource_url = "/api/users"

    async def find_user(self, username: str) -> Optional[UserDto]:
        """
        POST /api/users/search {"username": ...} → 分页结果，取第一条。
        """
        resp = await self._request("POST", "search", json={"username": username})
        return self._decode(resp, "user search", _first_user)

    async def has_right(
        self,
        user_id: UUID,
        right_id: UUID,
        program_id: Optional[UUID] = None,
        facility_id: Optional[UUID] = None,
        warehouse_id: Optional[UUID] = None,
    ) -> Optional[bool]:
        """
        GET /api/users/{userId}/hasRight?rightId=..[&programId][&facilityId][&warehouseId]

        返回 None 表示上游没给出结果（按“没有权限”处理由调用方决定）；
        响应体形状不对（非 JSON / null / 非对象）→ ReferenceDataError。
        """
        resp = await self._request(
            "GET",
            f"{user_id}/hasRight",
            params={
                "rightId": right_id,
                "programId": program_id,
                "facilityId": facility_id,
                "warehouseId": warehouse_id,
            },
        )
        if not resp.content:
            return None
        return self._decode(resp, "hasRight", _right_result)
