from uuid import uuid4

import httpx
import pytest
from prometheus_client import REGISTRY

from stockmgmt.services.permission_errors import (
    AuthenticationError,
    PermissionCheckFailed,
    PermissionErrorKind,
    PermissionMessageError,
    ProgramFacilityTypeDenied,
    RightNotHeld,
)
from stockmgmt.services.permission_service import (
    RIGHT_SCOPES,
    PermissionService,
    RightScope,
    StockRight,
)
from stockmgmt.services.referencedata.base import ReferenceDataError
from stockmgmt.services.referencedata.user_reference_data_service import (
    UserReferenceDataService,
)
from tests.helpers.permission_fakes import (
    FakeAuth,
    FakeProgramFacilityPermission,
    FakeRights,
    right_id_for,
)

pytestmark = pytest.mark.asyncio


def _svc(rights: FakeRights, fallback=None, auth=None):
    auth = auth or FakeAuth()
    fallback = fallback or FakeProgramFacilityPermission()
    return PermissionService(auth, rights, fallback), auth, fallback


async def test_check_right_passes_exact_tuple_to_authority():
    rights = FakeRights(default=True)
    svc, auth, _ = _svc(rights)
    program, facility, warehouse = uuid4(), uuid4(), uuid4()

    await svc.check_right("STOCK_ADJUST", program, facility, warehouse)

    assert rights.calls == [
        (auth.user.id, right_id_for("STOCK_ADJUST"), program, facility, warehouse)
    ]


@pytest.mark.parametrize("answer", [False, None])
async def test_check_right_denied_raises_right_not_held(answer):
    svc, _, _ = _svc(FakeRights(default=answer))

    with pytest.raises(RightNotHeld) as ei:
        await svc.check_right("STOCK_INVENTORIES_EDIT", uuid4(), uuid4())

    assert ei.value.right_name == "STOCK_INVENTORIES_EDIT"
    assert ei.value.kind is PermissionErrorKind.RIGHT_NOT_HELD
    assert "STOCK_INVENTORIES_EDIT" in ei.value.message


async def test_transport_error_is_check_failed_not_denial():
    err = ReferenceDataError(400, "400 Bad Request: broken")
    svc, _, fallback = _svc(FakeRights(error=err))

    with pytest.raises(PermissionCheckFailed) as ei:
        await svc.check_right("STOCK_ADJUST")

    assert not isinstance(ei.value, RightNotHeld)
    assert ei.value.kind is PermissionErrorKind.CHECK_FAILED
    assert ei.value.detail == "400 Bad Request: broken"
    assert fallback.calls == []


async def test_unknown_right_is_authentication_error():
    rights = FakeRights(default=True)
    svc, _, _ = _svc(rights, auth=FakeAuth(known_rights={"STOCK_ADJUST"}))

    with pytest.raises(AuthenticationError):
        await svc.can_manage_reasons()
    assert rights.calls == []


async def test_every_right_has_a_scope():
    assert set(RIGHT_SCOPES) == set(StockRight)


@pytest.mark.parametrize(
    "method, right",
    [
        ("can_create_stock_card_template", "STOCK_CARD_TEMPLATES_MANAGE"),
        ("can_manage_stock_sources", "STOCK_SOURCES_MANAGE"),
        ("can_manage_stock_destinations", "STOCK_DESTINATIONS_MANAGE"),
        ("can_manage_reasons", "STOCK_CARD_LINE_ITEM_REASONS_MANAGE"),
        ("can_manage_organizations", "ORGANIZATIONS_MANAGE"),
    ],
)
async def test_unscoped_operations(method, right):
    rights = FakeRights(default=True)
    svc, auth, _ = _svc(rights)

    await getattr(svc, method)()

    assert rights.calls == [(auth.user.id, right_id_for(right), None, None, None)]


@pytest.mark.parametrize(
    "method, right",
    [
        ("can_edit_physical_inventory", "STOCK_INVENTORIES_EDIT"),
        ("can_make_adjustment", "STOCK_ADJUST"),
        ("can_view_stock_card", "STOCK_CARDS_VIEW"),
    ],
)
async def test_program_facility_operations(method, right):
    rights = FakeRights(default=True)
    svc, auth, _ = _svc(rights)
    program, facility = uuid4(), uuid4()

    await getattr(svc, method)(program, facility)

    assert rights.calls == [(auth.user.id, right_id_for(right), program, facility, None)]


async def test_check_ignores_scope_not_used_by_right():
    rights = FakeRights(default=True)
    svc, _, _ = _svc(rights)

    await svc.check(StockRight.ORGANIZATIONS_MANAGE, program_id=uuid4(), facility_id=uuid4())

    assert rights.calls[0][2:] == (None, None, None)


async def test_scoped_denial_names_the_right():
    svc, _, _ = _svc(FakeRights(results={"STOCK_ADJUST": False}, default=True))

    await svc.can_edit_physical_inventory(uuid4(), uuid4())
    with pytest.raises(RightNotHeld) as ei:
        await svc.can_make_adjustment(uuid4(), uuid4())
    assert ei.value.right_name == "STOCK_ADJUST"


# ---------- view reasons：兜底 ----------


async def test_view_reasons_primary_granted_skips_fallback():
    rights = FakeRights(default=True)
    svc, auth, fallback = _svc(rights)

    await svc.can_view_reasons(uuid4(), uuid4())

    assert fallback.calls == []
    # 主校验不带作用域
    assert rights.calls == [
        (auth.user.id, right_id_for("STOCK_CARD_LINE_ITEM_REASONS_VIEW"), None, None, None)
    ]


async def test_view_reasons_denied_falls_back_once():
    rights = FakeRights(default=False)
    svc, _, fallback = _svc(rights)
    program, facility_type = uuid4(), uuid4()

    await svc.can_view_reasons(program, facility_type)

    assert len(rights.calls) == 1
    assert fallback.calls == [(program, facility_type)]


async def test_view_reasons_fallback_denial_propagates():
    svc, _, fallback = _svc(FakeRights(default=None), FakeProgramFacilityPermission(allow=False))

    with pytest.raises(ProgramFacilityTypeDenied) as ei:
        await svc.can_view_reasons(uuid4(), uuid4())

    assert ei.value.kind is PermissionErrorKind.SECONDARY_DENIED
    assert isinstance(ei.value, PermissionMessageError)
    assert len(fallback.calls) == 1


async def test_view_reasons_check_failed_does_not_fall_back():
    svc, _, fallback = _svc(FakeRights(error=ReferenceDataError(None, "connect timeout")))

    with pytest.raises(PermissionCheckFailed):
        await svc.can_view_reasons(uuid4(), uuid4())

    assert fallback.calls == []


async def test_view_reasons_fallback_failure_is_check_failed():
    svc, _, _ = _svc(
        FakeRights(default=False),
        FakeProgramFacilityPermission(error=PermissionCheckFailed("503 Service Unavailable")),
    )

    with pytest.raises(PermissionCheckFailed) as ei:
        await svc.can_view_reasons(uuid4(), uuid4())
    assert ei.value.detail == "503 Service Unavailable"


async def test_user_without_reasons_view_but_program_facility_type_permitted():
    """两次协作调用：hasRight 被拒一次 + 兜底放行一次。"""
    rights = FakeRights(results={"STOCK_CARD_LINE_ITEM_REASONS_VIEW": False})
    fallback = FakeProgramFacilityPermission(allow=True)
    svc, _, _ = _svc(rights, fallback)
    program, facility_type = uuid4(), uuid4()

    await svc.can_view_reasons(program, facility_type)

    assert len(rights.calls) + len(fallback.calls) == 2
    assert fallback.calls == [(program, facility_type)]


async def test_error_kinds_are_distinct():
    kinds = {RightNotHeld.kind, PermissionCheckFailed.kind, ProgramFacilityTypeDenied.kind}
    assert len(kinds) == 3
    assert RIGHT_SCOPES[StockRight.STOCK_CARD_LINE_ITEM_REASONS_VIEW] is RightScope.PROGRAM_FACILITY_TYPE


@pytest.mark.parametrize("body", ["<html>gateway</html>", "null", '["x"]'])
async def test_malformed_authority_reply_is_check_failed(body):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text=body)),
        base_url="http://refdata",
    )
    svc, _, fallback = _svc(UserReferenceDataService(client))

    async with client:
        with pytest.raises(PermissionCheckFailed) as ei:
            await svc.can_make_adjustment(uuid4(), uuid4())

    assert ei.value.kind is PermissionErrorKind.CHECK_FAILED
    assert "malformed hasRight response" in ei.value.detail
    assert fallback.calls == []


def _checks(right: str, outcome: str) -> float:
    value = REGISTRY.get_sample_value(
        "stock_permission_checks_total", {"right": right, "outcome": outcome}
    )
    return value or 0.0


async def test_reasons_fallback_records_fallback_not_denied():
    right = "STOCK_CARD_LINE_ITEM_REASONS_VIEW"
    before = {o: _checks(right, o) for o in ("denied", "fallback", "granted")}
    svc, _, _ = _svc(FakeRights(default=False), FakeProgramFacilityPermission(allow=True))

    await svc.can_view_reasons(uuid4(), uuid4())

    assert _checks(right, "fallback") == before["fallback"] + 1
    assert _checks(right, "denied") == before["denied"]
    assert _checks(right, "granted") == before["granted"]


async def test_plain_denial_records_denied():
    before = _checks("STOCK_ADJUST", "denied")
    svc, _, _ = _svc(FakeRights(default=False))

    with pytest.raises(RightNotHeld):
        await svc.can_make_adjustment(uuid4(), uuid4())

    assert _checks("STOCK_ADJUST", "denied") == before + 1
