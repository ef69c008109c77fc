"""事件读写请求 -- write-events / read-events（read 与 observe 共用）"""

from typing import Any, ClassVar

from pydantic import Field

from ..models.enums import LineType
from ..models.event import Event, EventCandidate
from ..models.options import ObserveEventsOptions, ReadEventsOptions
from ..models.precondition import Precondition
from ..raw_json import array_element_spans
from .base import OneShotRequest, StreamingRequest


class WriteEventsRequest(OneShotRequest):
    """POST /api/v1/write-events

    响应为持久化后的事件列表，顺序与提交的候选事件一致。
    """

    URL_PATH: ClassVar[str] = "/api/v1/write-events"

    events: list[EventCandidate] = Field(default_factory=list)
    preconditions: list[Precondition] = Field(default_factory=list)

    def body(self) -> dict[str, Any]:
        return {
            "events": [candidate.to_wire() for candidate in self.events],
            "preconditions": [precondition.to_wire() for precondition in self.preconditions],
        }

    def parse_response(self, text: str) -> list[Event]:
        return [Event.from_json(element) for element in array_element_spans(text)]


class ReadEventsRequest(StreamingRequest):
    """POST /api/v1/read-events，有限流，服务端发送完最后一个事件后关闭"""

    URL_PATH: ClassVar[str] = "/api/v1/read-events"
    ITEM_TYPE: ClassVar[LineType] = LineType.EVENT

    subject: str
    options: ReadEventsOptions = Field(default_factory=ReadEventsOptions)

    def body(self) -> dict[str, Any]:
        return {"subject": self.subject, "options": self.options.to_wire()}

    def parse_item(self, payload: str) -> Event:
        return Event.from_json(payload)


class ObserveEventsRequest(StreamingRequest):
    """POST /api/v1/read-events，无限流，服务端保持连接并推送后续写入的事件

    与 read_events 共用端点，客户端对它不设读超时。
    """

    URL_PATH: ClassVar[str] = "/api/v1/read-events"
    ITEM_TYPE: ClassVar[LineType] = LineType.EVENT
    OPEN_ENDED: ClassVar[bool] = True

    subject: str
    options: ObserveEventsOptions = Field(default_factory=ObserveEventsOptions)

    def body(self) -> dict[str, Any]:
        return {"subject": self.subject, "options": self.options.to_wire()}

    def parse_item(self, payload: str) -> Event:
        return Event.from_json(payload)
