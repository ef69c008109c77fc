"""枚举与协议常量

读取顺序、边界类型、缺失事件策略，以及管理事件类型和流行类型常量。
"""

from enum import StrEnum


class Order(StrEnum):
    """读取顺序"""

    CHRONOLOGICAL = "chronological"
    ANTICHRONOLOGICAL = "antichronological"


class BoundType(StrEnum):
    """边界是否包含边界事件本身"""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class ReadIfEventIsMissing(StrEnum):
    """read_events: from_latest_event 找不到参照事件时的策略"""

    READ_EVERYTHING = "read-everything"
    READ_NOTHING = "read-nothing"


class ObserveIfEventIsMissing(StrEnum):
    """observe_events: from_latest_event 找不到参照事件时的策略"""

    OBSERVE_EVERYTHING = "observe-everything"
    WAIT_FOR_EVENT = "wait-for-event"


class ManagementEventType(StrEnum):
    """管理端点返回的确认事件类型"""

    PING_RECEIVED = "io.eventsourcingdb.api.ping-received"
    API_TOKEN_VERIFIED = "io.eventsourcingdb.api.api-token-verified"
    EVENT_SCHEMA_REGISTERED = "io.eventsourcingdb.api.event-schema-registered"


class LineType(StrEnum):
    """NDJSON 流中每一行的 type 标签"""

    EVENT = "event"
    EVENT_TYPE = "eventType"
    SUBJECT = "subject"
    ROW = "row"
    ERROR = "error"
    HEARTBEAT = "heartbeat"
