"""请求描述 -- 每个 API 操作对应一个类型"""

from .base import ClientRequest, ManagementRequest, OneShotRequest, StreamingRequest
from .discovery import ListEventTypesRequest, ListSubjectsRequest, ReadEventTypeRequest
from .events import ObserveEventsRequest, ReadEventsRequest, WriteEventsRequest
from .management import (
    PingRequest,
    RegisterEventSchemaRequest,
    VerifyApiTokenRequest,
    validate_event_schema,
)
from .query import RunEventQlQueryRequest

__all__ = [
    # 基类
    "ClientRequest",
    "OneShotRequest",
    "ManagementRequest",
    "StreamingRequest",
    # 管理
    "PingRequest",
    "VerifyApiTokenRequest",
    "RegisterEventSchemaRequest",
    "validate_event_schema",
    # 事件
    "WriteEventsRequest",
    "ReadEventsRequest",
    "ObserveEventsRequest",
    # 发现
    "ListSubjectsRequest",
    "ListEventTypesRequest",
    "ReadEventTypeRequest",
    # 查询
    "RunEventQlQueryRequest",
]
