# stockmgmt/services/permission_errors.py
"""
权限相关异常（按类型捕获，不要匹配 message）：

    AuthenticationError            当前用户 / 权限名无法解析（401）
    PermissionMessageError         授权失败基类（403）
      ├─ RightNotHeld              明确被拒：没有该权限
      ├─ PermissionCheckFailed     问不到答案：上游 referencedata 调用失败
      └─ ProgramFacilityTypeDenied 兜底（项目 + 设施类型）校验被拒
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID


class PermissionErrorKind(str, Enum):
    RIGHT_NOT_HELD = "RIGHT_NOT_HELD"
    CHECK_FAILED = "CHECK_FAILED"
    SECONDARY_DENIED = "SECONDARY_DENIED"


class AuthenticationError(Exception):
    """无法解析当前用户或权限定义"""


class PermissionMessageError(Exception):
    kind: PermissionErrorKind
    error_code: str = "permission_denied"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class RightNotHeld(PermissionMessageError):
    kind = PermissionErrorKind.RIGHT_NOT_HELD
    error_code = "no_following_permission"

    def __init__(self, right_name: str):
        super().__init__(
            f"You do not have the following permission: {right_name}",
            {"right": right_name},
        )
        self.right_name = right_name


class PermissionCheckFailed(PermissionMessageError):
    kind = PermissionErrorKind.CHECK_FAILED
    error_code = "permission_check_failed"

    def __init__(self, detail: str):
        super().__init__(f"Permission check failed: {detail}", {"detail": detail})
        self.detail = detail


class ProgramFacilityTypeDenied(PermissionMessageError):
    kind = PermissionErrorKind.SECONDARY_DENIED
    error_code = "program_facility_type_denied"

    def __init__(self, program_id: Optional[UUID], facility_type_id: Optional[UUID]):
        super().__init__(
            "Program and facility type combination is not permitted for current user",
            {
                "program_id": str(program_id) if program_id else None,
                "facility_type_id": str(facility_type_id) if facility_type_id else None,
            },
        )
        self.program_id = program_id
        self.facility_type_id = facility_type_id
