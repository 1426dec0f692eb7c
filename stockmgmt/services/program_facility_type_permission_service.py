# stockmgmt/services/program_facility_type_permission_service.py
from __future__ import annotations

import logging
from typing import Optional, Protocol
from uuid import UUID

from stockmgmt.services.authentication import AuthenticationContext
from stockmgmt.services.permission_errors import (
    PermissionCheckFailed,
    ProgramFacilityTypeDenied,
)
from stockmgmt.services.referencedata.base import ReferenceDataError
from stockmgmt.services.referencedata.facility_reference_data_service import (
    FacilityReferenceDataService,
)

logger = logging.getLogger("stockmgmt.permission")


class ProgramFacilityTypePermission(Protocol):
    async def check_program_facility(
        self, program_id: Optional[UUID], facility_type_id: Optional[UUID]
    ) -> None: ...


class ProgramFacilityTypePermissionService:
    """
    兜底校验：当前用户的 home facility 类型 == facility_type_id，且该设施支持 program_id。

    - 没有 home facility / 设施查不到 / 不匹配 → ProgramFacilityTypeDenied
    - referencedata 调用失败 → PermissionCheckFailed
    """

    def __init__(
        self,
        auth: AuthenticationContext,
        facilities: FacilityReferenceDataService,
    ) -> None:
        self.auth = auth
        self.facilities = facilities

    async def check_program_facility(
        self, program_id: Optional[UUID], facility_type_id: Optional[UUID]
    ) -> None:
        user = await self.auth.current_user()
        if user.home_facility_id is None or program_id is None or facility_type_id is None:
            raise ProgramFacilityTypeDenied(program_id, facility_type_id)

        try:
            facility = await self.facilities.find_facility(user.home_facility_id)
        except ReferenceDataError as exc:
            raise PermissionCheckFailed(exc.message) from exc

        if (
            facility is None
            or facility.type is None
            or facility.type.id != facility_type_id
            or not facility.supports_program(program_id)
        ):
            logger.info(
                "program/facility type denied: user=%s program=%s facility_type=%s",
                user.username,
                program_id,
                facility_type_id,
            )
            raise ProgramFacilityTypeDenied(program_id, facility_type_id)
