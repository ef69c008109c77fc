"""管理类请求 -- ping / verify-api-token / register-event-schema"""

from typing import Any, ClassVar

from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from pydantic import Field

from ..exceptions import (
    ApiTokenInvalidError,
    InvalidEventTypeError,
    InvalidSchemaError,
    PingFailedError,
    ProtocolError,
)
from ..models.enums import ManagementEventType
from ..models.management_event import ManagementEvent
from .base import ManagementRequest


class PingRequest(ManagementRequest):
    """GET /api/v1/ping"""

    URL_PATH: ClassVar[str] = "/api/v1/ping"
    METHOD: ClassVar[str] = "GET"
    HAS_BODY: ClassVar[bool] = False
    EXPECTED_EVENT_TYPE: ClassVar[str] = ManagementEventType.PING_RECEIVED

    def rejection(self, response: ManagementEvent) -> ProtocolError:
        return PingFailedError(response.type)


class VerifyApiTokenRequest(ManagementRequest):
    """POST /api/v1/verify-api-token"""

    URL_PATH: ClassVar[str] = "/api/v1/verify-api-token"
    HAS_BODY: ClassVar[bool] = False
    EXPECTED_EVENT_TYPE: ClassVar[str] = ManagementEventType.API_TOKEN_VERIFIED

    def rejection(self, response: ManagementEvent) -> ProtocolError:
        return ApiTokenInvalidError(response.type)


def validate_event_schema(schema: Any) -> None:
    """校验 schema 本身是结构合法的 JSON Schema（按其声明的 $schema 元模式）

    Raises:
        InvalidSchemaError: schema 不是对象/布尔值，或不符合元模式
    """
    if not isinstance(schema, (dict, bool)):
        raise InvalidSchemaError(
            f"JSON Schema 必须是对象或布尔值，实际为 {type(schema).__name__}"
        )
    validator_cls = validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as e:
        raise InvalidSchemaError(f"JSON Schema 非法: {e.message}", errors=[e.message]) from e


class RegisterEventSchemaRequest(ManagementRequest):
    """POST /api/v1/register-event-schema

    请使用 create() 构造：事件类型和 schema 在发出请求前完成校验。
    """

    URL_PATH: ClassVar[str] = "/api/v1/register-event-schema"
    EXPECTED_EVENT_TYPE: ClassVar[str] = ManagementEventType.EVENT_SCHEMA_REGISTERED

    event_type: str = Field(alias="eventType")
    event_schema: dict[str, Any] | bool = Field(alias="schema")

    @classmethod
    def create(cls, event_type: str, schema: Any) -> "RegisterEventSchemaRequest":
        """校验后构造请求

        Raises:
            InvalidEventTypeError: 事件类型为空
            InvalidSchemaError: schema 结构非法
        """
        if not event_type:
            raise InvalidEventTypeError(event_type, reason="事件类型不能为空")
        validate_event_schema(schema)
        return cls(event_type=event_type, event_schema=schema)

    def body(self) -> dict[str, Any]:
        # schema 原样发送，内部的 null 值同样保留
        return {"eventType": self.event_type, "schema": self.event_schema}

    def rejection(self, response: ManagementEvent) -> ProtocolError:
        return InvalidEventTypeError(
            self.event_type,
            reason=f"注册 schema 未得到确认，收到 {response.type}",
        )
