"""ManagementEvent -- 管理端点返回的确认事件

ping / verify-api-token / register-event-schema 返回的轻量事件，
没有 hash / predecessorhash / trace 信息 / 签名，只用于确认收到的事件类型。
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from .event import EventCandidate
from .timestamps import coerce_timestamp


class ManagementEvent(BaseModel):
    """管理确认事件"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    data: Any = Field(default=None)
    data_content_type: str = Field(
        validation_alias=AliasChoices("datacontenttype", "dataContentType", "data_content_type"),
        serialization_alias="datacontenttype",
    )
    id: str
    source: str
    spec_version: str = Field(
        validation_alias=AliasChoices("specversion", "specVersion", "spec_version"),
        serialization_alias="specversion",
    )
    subject: str
    time: Annotated[datetime, BeforeValidator(coerce_timestamp)]
    type: str

    def to_candidate(self) -> EventCandidate:
        """转换为 EventCandidate（管理事件没有 trace 信息）"""
        return EventCandidate(
            source=self.source,
            subject=self.subject,
            type=self.type,
            data=self.data,
        )
