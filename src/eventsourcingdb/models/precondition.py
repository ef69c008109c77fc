"""写入前置条件

由服务端与写入原子地一起求值，任一条件不满足则整批写入失败、没有任何部分效果。
报文形状: {"type": "<tag>", "payload": {...}}
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class Precondition(BaseModel):
    """前置条件基类"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    TYPE: ClassVar[str]

    def to_wire(self) -> dict[str, Any]:
        return {
            "type": self.TYPE,
            "payload": self.model_dump(mode="json", by_alias=True),
        }


class IsSubjectPristine(Precondition):
    """subject 上还没有任何事件"""

    TYPE: ClassVar[str] = "isSubjectPristine"

    subject: str


class IsSubjectOnEventId(Precondition):
    """subject 上最新事件的 id 等于 event_id"""

    TYPE: ClassVar[str] = "isSubjectOnEventId"

    subject: str
    event_id: str = Field(alias="eventId")


class IsEventQlTrue(Precondition):
    """EventQL 查询结果为真（仅由服务端校验）"""

    TYPE: ClassVar[str] = "isEventQlTrue"

    query: str
