"""EventQL 查询请求"""

import json
from typing import Any, ClassVar

from ..models.enums import LineType
from .base import StreamingRequest


class RunEventQlQueryRequest(StreamingRequest):
    """POST /api/v1/run-eventql-query，逐行返回任意结构的 JSON 结果行"""

    URL_PATH: ClassVar[str] = "/api/v1/run-eventql-query"
    ITEM_TYPE: ClassVar[LineType] = LineType.ROW

    query: str

    def parse_item(self, payload: str) -> Any:
        return json.loads(payload)
