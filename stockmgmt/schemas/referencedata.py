# stockmgmt/schemas/referencedata.py
from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import Field

from stockmgmt.schemas._base import WireModel


class UserDto(WireModel):
    id: UUID
    username: str
    home_facility_id: Optional[UUID] = None
    active: bool = True


class RightDto(WireModel):
    id: UUID
    name: str
    type: Optional[str] = None


class ResultDto(WireModel):
    """referencedata hasRight 的返回体：{"result": true|false}"""

    result: Optional[bool] = None


class FacilityTypeDto(WireModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None


class SupportedProgramDto(WireModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None
    # referencedata 里的字段名就是 supportActive / programActive
    support_active: bool = True
    program_active: bool = True


class FacilityDto(WireModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None
    type: Optional[FacilityTypeDto] = None
    supported_programs: List[SupportedProgramDto] = Field(default_factory=list)

    def supports_program(self, program_id: UUID) -> bool:
        return any(
            p.id == program_id and p.support_active and p.program_active
            for p in self.supported_programs
        )


__all__ = [
    "UserDto",
    "RightDto",
    "ResultDto",
    "FacilityTypeDto",
    "SupportedProgramDto",
    "FacilityDto",
]
