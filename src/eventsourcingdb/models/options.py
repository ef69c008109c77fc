"""read_events / observe_events 选项

序列化为 camelCase，None 字段省略，recursive 始终出现。
from_latest_event 的 subject 与读取的 subject 相互独立，不隐含递归。
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import BoundType, ObserveIfEventIsMissing, Order, ReadIfEventIsMissing


class _WireOptions(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Bound(_WireOptions):
    """按事件 id 限定的读取边界"""

    id: str
    type: BoundType


class ReadFromLatestEvent(_WireOptions):
    """从 subject 上最新的某类型事件开始读取"""

    subject: str
    type: str
    if_event_is_missing: ReadIfEventIsMissing = Field(
        default=ReadIfEventIsMissing.READ_EVERYTHING,
        alias="ifEventIsMissing",
    )


class ObserveFromLatestEvent(_WireOptions):
    """从 subject 上最新的某类型事件开始订阅"""

    subject: str
    type: str
    if_event_is_missing: ObserveIfEventIsMissing = Field(
        default=ObserveIfEventIsMissing.OBSERVE_EVERYTHING,
        alias="ifEventIsMissing",
    )


class ReadEventsOptions(_WireOptions):
    """read_events 选项"""

    recursive: bool = Field(default=False, description="是否包含子 subject 的事件")
    order: Order | None = Field(default=None, description="读取顺序，None 由服务端决定")
    lower_bound: Bound | None = Field(default=None, alias="lowerBound")
    upper_bound: Bound | None = Field(default=None, alias="upperBound")
    from_latest_event: ReadFromLatestEvent | None = Field(default=None, alias="fromLatestEvent")


class ObserveEventsOptions(_WireOptions):
    """observe_events 选项（没有顺序和上界）"""

    recursive: bool = Field(default=False, description="是否包含子 subject 的事件")
    lower_bound: Bound | None = Field(default=None, alias="lowerBound")
    from_latest_event: ObserveFromLatestEvent | None = Field(default=None, alias="fromLatestEvent")
