# stockmgmt/services/referencedata/facility_reference_data_service.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from stockmgmt.schemas.referencedata import FacilityDto
from stockmgmt.services.referencedata.base import BaseReferenceDataService


class FacilityReferenceDataService(BaseReferenceDataService):
    resource_url = "/api/facilities"

    async def find_facility(self, facility_id: UUID) -> Optional[FacilityDto]:
        return await self.find_one(facility_id, FacilityDto.model_validate)
