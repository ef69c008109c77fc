"""EventSourcingDB -- 异步 HTTP API 客户端

公开接口导出。
"""

# 核心组件
from .client import Client

# 配置
from .config import ClientConfig, load_client_config

# 异常
from .exceptions import (
    ApiTokenInvalidError,
    DecodeError,
    EventSourcingDBError,
    HashVerificationError,
    IntegrityError,
    InvalidCloudEventError,
    InvalidEventTypeError,
    InvalidSchemaError,
    InvalidServerHeaderError,
    MalformedSignatureError,
    MissingSignatureError,
    PingFailedError,
    ProtocolError,
    SerializationError,
    ServerError,
    ServerSideError,
    SignatureVerificationError,
    StreamIOError,
    TransportError,
    UnexpectedItemTypeError,
)
from .logging_config import setup_logging

# 数据模型
from .models import (
    Bound,
    BoundType,
    Event,
    EventCandidate,
    EventType,
    IsEventQlTrue,
    IsSubjectOnEventId,
    IsSubjectPristine,
    ManagementEvent,
    ObserveEventsOptions,
    ObserveFromLatestEvent,
    ObserveIfEventIsMissing,
    Order,
    Precondition,
    ReadEventsOptions,
    ReadFromLatestEvent,
    ReadIfEventIsMissing,
    TraceInfo,
)
from .transport import ResultStream

__version__ = "0.1.0"

__all__ = [
    "Client",
    "ResultStream",
    "ClientConfig",
    "load_client_config",
    "setup_logging",
    "Event",
    "EventCandidate",
    "EventType",
    "ManagementEvent",
    "TraceInfo",
    "Bound",
    "BoundType",
    "Order",
    "ReadEventsOptions",
    "ObserveEventsOptions",
    "ReadFromLatestEvent",
    "ObserveFromLatestEvent",
    "ReadIfEventIsMissing",
    "ObserveIfEventIsMissing",
    "Precondition",
    "IsSubjectPristine",
    "IsSubjectOnEventId",
    "IsEventQlTrue",
    "EventSourcingDBError",
    "TransportError",
    "SerializationError",
    "ServerError",
    "DecodeError",
    "ProtocolError",
    "PingFailedError",
    "ApiTokenInvalidError",
    "InvalidEventTypeError",
    "InvalidCloudEventError",
    "UnexpectedItemTypeError",
    "InvalidServerHeaderError",
    "ServerSideError",
    "StreamIOError",
    "IntegrityError",
    "HashVerificationError",
    "MissingSignatureError",
    "MalformedSignatureError",
    "SignatureVerificationError",
    "InvalidSchemaError",
]
