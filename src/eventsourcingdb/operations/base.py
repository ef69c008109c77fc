"""请求描述 -- 每个操作一个类型

ClientRequest 描述 URL 路径、HTTP 方法和请求体；
OneShotRequest 额外描述单个响应的解析与校验；
StreamingRequest 额外描述 NDJSON 流中条目的标签与解析。
"""

import json
from abc import abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from ..exceptions import ProtocolError, SerializationError
from ..models.enums import LineType
from ..models.management_event import ManagementEvent


class ClientRequest(BaseModel):
    """请求描述基类，一次调用一个实例"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    URL_PATH: ClassVar[str]
    METHOD: ClassVar[str] = "POST"
    HAS_BODY: ClassVar[bool] = True

    def url_path(self) -> str:
        return self.URL_PATH

    def method(self) -> str:
        return self.METHOD

    def body(self) -> Any | None:
        """请求体（JSON 值），无请求体时为 None"""
        if not self.HAS_BODY:
            return None
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def encode_body(self) -> bytes | None:
        """编码为 UTF-8 JSON 字节

        Raises:
            SerializationError: 请求体无法序列化（在任何网络调用之前）
        """
        try:
            body = self.body()
            if body is None:
                return None
            return json.dumps(body, ensure_ascii=False, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"{self.URL_PATH} 请求体序列化失败: {e}") from e


class OneShotRequest(ClientRequest):
    """单个 JSON 响应的请求"""

    @abstractmethod
    def parse_response(self, text: str) -> Any:
        """解析响应体

        Raises:
            ValueError: 不是合法 JSON 或结构不符
        """

    def validate_response(self, response: Any) -> None:
        """响应的语义校验，默认总是通过"""
        return None


class ManagementRequest(OneShotRequest):
    """返回 ManagementEvent 的请求：校验确认事件类型"""

    EXPECTED_EVENT_TYPE: ClassVar[str]

    def parse_response(self, text: str) -> ManagementEvent:
        return ManagementEvent.model_validate(json.loads(text))

    def validate_response(self, response: ManagementEvent) -> None:
        if response.type != self.EXPECTED_EVENT_TYPE:
            raise self.rejection(response)

    @abstractmethod
    def rejection(self, response: ManagementEvent) -> ProtocolError:
        """确认事件类型不符时由 validate_response 抛出的异常（返回，不直接抛出）"""


class StreamingRequest(ClientRequest):
    """NDJSON 流式响应的请求"""

    ITEM_TYPE: ClassVar[LineType]
    # 服务端保持连接并持续推送（observe），不设读超时
    OPEN_ENDED: ClassVar[bool] = False

    @abstractmethod
    def parse_item(self, payload: str) -> Any:
        """解析一行中 payload 的原文

        Raises:
            ValueError: payload 结构不符
        """
