"""EventType -- 已注册事件类型的元数据"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventType(BaseModel):
    """事件类型元数据

    is_phantom=True 表示该类型只通过 schema 注册为服务端所知，
    还没有任何真实事件使用过它。
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="eventType", description="事件类型名称")
    is_phantom: bool = Field(alias="isPhantom", description="是否为 phantom 类型")
    json_schema: dict[str, Any] | bool | None = Field(
        default=None,
        alias="schema",
        description="已注册的 JSON Schema",
    )
