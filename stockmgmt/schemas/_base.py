# stockmgmt/schemas/_base.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """
    与上下游对接的统一基类：
    - 线上字段为 camelCase（programId / lineItems ...），Python 侧用 snake_case
    - populate_by_name: 字段名/别名都能填
    - extra="ignore": 对上游多出来的字段保持宽容
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class FrozenWireModel(WireModel):
    """构造后不可变（盘点提交 / 库存事件）。"""

    model_config = WireModel.model_config | {"frozen": True}
