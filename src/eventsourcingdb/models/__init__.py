"""EventSourcingDB 数据模型 -- 公共类型导出"""

from .enums import (
    BoundType,
    LineType,
    ManagementEventType,
    ObserveIfEventIsMissing,
    Order,
    ReadIfEventIsMissing,
)
from .event import SIGNATURE_PREFIX, ZERO_HASH, Event, EventCandidate, TraceInfo
from .event_type import EventType
from .management_event import ManagementEvent
from .options import (
    Bound,
    ObserveEventsOptions,
    ObserveFromLatestEvent,
    ReadEventsOptions,
    ReadFromLatestEvent,
)
from .precondition import IsEventQlTrue, IsSubjectOnEventId, IsSubjectPristine, Precondition

__all__ = [
    # 枚举
    "Order",
    "BoundType",
    "ReadIfEventIsMissing",
    "ObserveIfEventIsMissing",
    "ManagementEventType",
    "LineType",
    # 事件
    "Event",
    "EventCandidate",
    "TraceInfo",
    "ManagementEvent",
    "EventType",
    "SIGNATURE_PREFIX",
    "ZERO_HASH",
    # 选项
    "Bound",
    "ReadEventsOptions",
    "ObserveEventsOptions",
    "ReadFromLatestEvent",
    "ObserveFromLatestEvent",
    # 前置条件
    "Precondition",
    "IsSubjectPristine",
    "IsSubjectOnEventId",
    "IsEventQlTrue",
]
