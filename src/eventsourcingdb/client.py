"""Client -- EventSourcingDB HTTP API 客户端

每个操作构造一个请求描述，交给 transport 发送。
Client 除连接池外不持有可变状态，可以被多个协程并发使用。
"""

from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from .config import DEFAULT_TIMEOUT_S, ClientConfig
from .models.event import Event, EventCandidate
from .models.event_type import EventType
from .models.management_event import ManagementEvent
from .models.options import ObserveEventsOptions, ReadEventsOptions
from .models.precondition import Precondition
from .operations import (
    ListEventTypesRequest,
    ListSubjectsRequest,
    ObserveEventsRequest,
    OneShotRequest,
    PingRequest,
    ReadEventsRequest,
    ReadEventTypeRequest,
    RegisterEventSchemaRequest,
    RunEventQlQueryRequest,
    StreamingRequest,
    VerifyApiTokenRequest,
    WriteEventsRequest,
)
from .transport import ResultStream, open_stream, send_one_shot

log = structlog.get_logger()


class Client:
    """EventSourcingDB 客户端

    用法:
        async with Client("http://localhost:3000", token) as client:
            await client.ping()
            async with await client.read_events("/books", ReadEventsOptions(recursive=True)) as events:
                async for event in events:
                    ...
    """

    def __init__(
        self,
        base_url: str,
        api_token: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        validate_server_header: bool = False,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """初始化客户端

        Args:
            base_url: 服务端 base URL，端点路径以绝对路径拼接
            api_token: API token，以 Bearer 方式发送
            timeout_s: 单次请求超时（秒）；observe 流只作用于连接阶段
            validate_server_header: 是否要求 Server 头以 EventSourcingDB/ 开头
            http_client: 外部注入的 httpx.AsyncClient（测试或共享连接池），
                由调用方负责关闭
        """
        self._base_url = base_url
        self._api_token = api_token
        self._timeout_s = timeout_s
        self._validate_server_header = validate_server_header
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient()

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> "Client":
        """从 ClientConfig 构造客户端"""
        return cls(
            config.base_url,
            config.api_token.get_secret_value(),
            timeout_s=config.timeout_s,
            validate_server_header=config.validate_server_header,
            http_client=http_client,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def api_token(self) -> str:
        return self._api_token

    async def aclose(self) -> None:
        """关闭自有的连接池；注入的 http_client 不会被关闭"""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _send(self, request: OneShotRequest) -> Any:
        return await send_one_shot(
            self._http,
            self._base_url,
            self._api_token,
            request,
            timeout_s=self._timeout_s,
            validate_server_header=self._validate_server_header,
        )

    async def _stream(self, request: StreamingRequest) -> ResultStream:
        return await open_stream(
            self._http,
            self._base_url,
            self._api_token,
            request,
            timeout_s=self._timeout_s,
            validate_server_header=self._validate_server_header,
        )

    # ---- 管理 ----

    async def ping(self) -> None:
        """检查服务端可达

        Raises:
            PingFailedError: 响应的事件类型不是 ping-received
        """
        await self._send(PingRequest())

    async def verify_api_token(self) -> None:
        """校验当前 API token

        Raises:
            ApiTokenInvalidError: 响应的事件类型不是 api-token-verified
        """
        await self._send(VerifyApiTokenRequest())

    async def register_event_schema(self, event_type: str, schema: Any) -> ManagementEvent:
        """为事件类型注册 JSON Schema

        Raises:
            InvalidEventTypeError: 事件类型为空，或服务端未返回注册确认
            InvalidSchemaError: schema 结构非法（请求不会发出）
        """
        request = RegisterEventSchemaRequest.create(event_type, schema)
        response = await self._send(request)
        log.info("esdb_event_schema_registered", event_type=event_type)
        return response

    # ---- 事件 ----

    async def write_events(
        self,
        candidates: Sequence[EventCandidate],
        preconditions: Sequence[Precondition] | None = None,
    ) -> list[Event]:
        """原子写入一批事件

        任一前置条件不满足时整批拒绝（服务端返回 409，抛出 ServerError）。

        Args:
            candidates: 待写入事件，按顺序写入
            preconditions: 前置条件，全部满足才写入

        Returns:
            服务端分配 id / time / hash 后的事件，顺序与 candidates 一致
        """
        request = WriteEventsRequest(
            events=list(candidates),
            preconditions=list(preconditions or []),
        )
        events = await self._send(request)
        log.debug("esdb_events_written", event_count=len(events))
        return events

    async def read_events(
        self,
        subject: str,
        options: ReadEventsOptions | None = None,
    ) -> ResultStream:
        """读取 subject（可递归）下已存在的事件，流在最后一个事件后结束"""
        return await self._stream(
            ReadEventsRequest(subject=subject, options=options or ReadEventsOptions())
        )

    async def observe_events(
        self,
        subject: str,
        options: ObserveEventsOptions | None = None,
    ) -> ResultStream:
        """先产出已有事件，然后持续推送新事件，直到调用方关闭流"""
        return await self._stream(
            ObserveEventsRequest(subject=subject, options=options or ObserveEventsOptions())
        )

    # ---- 发现 ----

    async def list_subjects(self, base_subject: str = "/") -> ResultStream:
        """列出 base_subject 及其下所有出现过事件的 subject"""
        return await self._stream(ListSubjectsRequest(base_subject=base_subject))

    async def list_event_types(self) -> ResultStream:
        return await self._stream(ListEventTypesRequest())

    async def read_event_type(self, name: str) -> EventType:
        return await self._send(ReadEventTypeRequest(event_type=name))

    # ---- 查询 ----

    async def run_query(self, query: str) -> ResultStream:
        """执行 EventQL 查询，逐行产出结果（任意 JSON 值）"""
        return await self._stream(RunEventQlQueryRequest(query=query))
