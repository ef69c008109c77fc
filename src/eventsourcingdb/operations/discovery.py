"""元数据与发现请求 -- read-subjects / read-event-types / read-event-type"""

from typing import ClassVar

from pydantic import BaseModel, Field

from ..models.enums import LineType
from ..models.event_type import EventType
from .base import OneShotRequest, StreamingRequest


class _SubjectPayload(BaseModel):
    subject: str


class ListSubjectsRequest(StreamingRequest):
    """POST /api/v1/read-subjects，逐行返回 base_subject 之下的 subject"""

    URL_PATH: ClassVar[str] = "/api/v1/read-subjects"
    ITEM_TYPE: ClassVar[LineType] = LineType.SUBJECT

    base_subject: str = Field(default="/", alias="baseSubject")

    def parse_item(self, payload: str) -> str:
        return _SubjectPayload.model_validate_json(payload).subject


class ListEventTypesRequest(StreamingRequest):
    """POST /api/v1/read-event-types，请求体为空对象"""

    URL_PATH: ClassVar[str] = "/api/v1/read-event-types"
    ITEM_TYPE: ClassVar[LineType] = LineType.EVENT_TYPE

    def parse_item(self, payload: str) -> EventType:
        return EventType.model_validate_json(payload)


class ReadEventTypeRequest(OneShotRequest):
    """POST /api/v1/read-event-type，读取单个事件类型"""

    URL_PATH: ClassVar[str] = "/api/v1/read-event-type"

    event_type: str = Field(alias="eventType")

    def parse_response(self, text: str) -> EventType:
        return EventType.model_validate_json(text)
