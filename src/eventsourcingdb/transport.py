"""HTTP 传输 -- 单响应请求与 NDJSON 流式请求

所有请求携带 Authorization: Bearer <token>，有请求体时携带
Content-Type: application/json。客户端不做任何自动重试。
"""

import contextlib
import json
import time
from collections.abc import AsyncIterator
from typing import Any

import httpx
import structlog

from .exceptions import (
    DecodeError,
    InvalidServerHeaderError,
    ServerError,
    ServerSideError,
    StreamIOError,
    TransportError,
    UnexpectedItemTypeError,
)
from .models.enums import LineType
from .operations.base import ClientRequest, OneShotRequest, StreamingRequest
from .raw_json import object_member_spans

log = structlog.get_logger()

SERVER_HEADER_PREFIX = "EventSourcingDB/"

# 错误响应体在异常中最多保留的字符数
_MAX_ERROR_BODY_CHARS = 2000


def build_url(base_url: str, path: str) -> httpx.URL:
    """base URL 与端点路径拼接

    Raises:
        TransportError: base URL 非法或不是 http(s) 绝对地址
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise TransportError(url=f"{base_url}{path}", original_error=e) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise TransportError(
            url=f"{base_url}{path}",
            original_error=ValueError(f"base URL 必须是 http(s) 绝对地址: {base_url!r}"),
        )
    return url.join(path)


def build_headers(api_token: str, has_body: bool) -> dict[str, str]:
    headers = {"Authorization": f"Bearer {api_token}"}
    if has_body:
        headers["Content-Type"] = "application/json"
    return headers


def check_server_header(response: httpx.Response) -> None:
    """校验响应来自 EventSourcingDB

    Raises:
        InvalidServerHeaderError: 缺少 Server 头或前缀不是 EventSourcingDB/
    """
    server = response.headers.get("server")
    if server is None or not server.startswith(SERVER_HEADER_PREFIX):
        raise InvalidServerHeaderError(server)


def _error_body(response: httpx.Response) -> str:
    try:
        return response.text[:_MAX_ERROR_BODY_CHARS]
    except (httpx.ResponseNotRead, UnicodeDecodeError, LookupError):
        return ""


def _build_request(
    http: httpx.AsyncClient,
    base_url: str,
    api_token: str,
    request: ClientRequest,
    timeout: httpx.Timeout,
) -> httpx.Request:
    # 序列化先于 URL 与网络，失败时不会发出任何请求
    content = request.encode_body()
    url = build_url(base_url, request.url_path())
    return http.build_request(
        request.method(),
        url,
        content=content,
        headers=build_headers(api_token, has_body=content is not None),
        timeout=timeout,
    )


async def send_one_shot(
    http: httpx.AsyncClient,
    base_url: str,
    api_token: str,
    request: OneShotRequest,
    *,
    timeout_s: float,
    validate_server_header: bool = False,
) -> Any:
    """发送单响应请求并解析响应

    Args:
        http: 共享的 httpx.AsyncClient
        base_url: 服务端 base URL
        api_token: API token（不会写入日志）
        request: 请求描述
        timeout_s: 整体超时（秒）
        validate_server_header: 是否校验 Server 头

    Returns:
        request.parse_response() 的结果（已通过 validate_response）

    Raises:
        SerializationError: 请求体无法序列化
        TransportError: 连接失败、超时或 base URL 非法
        ServerError: 非 2xx 状态码
        DecodeError: 响应体不是合法 JSON 或结构不符
        ProtocolError: 响应语义不符合约定
    """
    path = request.url_path()
    http_request = _build_request(http, base_url, api_token, request, httpx.Timeout(timeout_s))
    start_time = time.monotonic()

    log.debug("esdb_request_started", method=request.method(), path=path)

    try:
        response = await http.send(http_request)
    except (httpx.TransportError, httpx.InvalidURL) as e:
        log.warning(
            "esdb_request_failed",
            path=path,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise TransportError(url=str(http_request.url), original_error=e) from e

    duration_ms = int((time.monotonic() - start_time) * 1000)

    if validate_server_header:
        check_server_header(response)

    if not response.is_success:
        body = _error_body(response)
        log.warning(
            "esdb_request_failed",
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        raise ServerError(status_code=response.status_code, body=body)

    try:
        parsed = request.parse_response(response.content.decode("utf-8"))
    except ValueError as e:
        # pydantic.ValidationError / json.JSONDecodeError / UnicodeDecodeError 都是 ValueError
        raise DecodeError(f"{path} 响应解析失败: {e}") from e

    request.validate_response(parsed)

    log.debug(
        "esdb_request_completed",
        path=path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return parsed


class ResultStream:
    """流式请求的结果序列

    异步迭代逐个产出已解析的条目；出错时抛出异常并结束迭代，
    此前产出的条目仍然有效。提前退出时调用 aclose()（或使用 async with）
    释放底层连接。
    """

    def __init__(self, request: StreamingRequest, response: httpx.Response) -> None:
        self._request = request
        self._response = response
        self._items = self._iterate()

    def __aiter__(self) -> AsyncIterator[Any]:
        return self._items

    async def __anext__(self) -> Any:
        return await self._items.__anext__()

    async def __aenter__(self) -> "ResultStream":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """停止读取并关闭连接，可重复调用"""
        await self._items.aclose()
        await self._response.aclose()

    async def _lines(self) -> AsyncIterator[bytes]:
        buffer = b""
        try:
            async for chunk in self._response.aiter_bytes():
                buffer += chunk
                *lines, buffer = buffer.split(b"\n")
                for line in lines:
                    yield line
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise StreamIOError(e) from e
        # 服务端关闭连接时最后一行可能没有换行符
        yield buffer

    async def _iterate(self) -> AsyncIterator[Any]:
        path = self._request.url_path()
        count = 0
        try:
            async for raw_line in self._lines():
                if not raw_line.strip():
                    continue
                try:
                    item = self._parse_line(raw_line.decode("utf-8"))
                except ValueError as e:
                    raise DecodeError(f"{path} 流中的行无法解析: {e}") from e
                if item is _HEARTBEAT:
                    continue
                count += 1
                yield item
        except ServerSideError as e:
            log.warning("esdb_stream_server_error", path=path, error=e.server_message)
            raise
        finally:
            await self._response.aclose()
            log.debug("esdb_stream_closed", path=path, item_count=count)

    def _parse_line(self, line: str) -> Any:
        members = object_member_spans(line)
        if "type" not in members:
            raise ValueError("缺少 type 字段")
        line_type = json.loads(members["type"])
        payload = members.get("payload", "null")

        if line_type == LineType.HEARTBEAT:
            return _HEARTBEAT
        if line_type == LineType.ERROR:
            raise ServerSideError(_error_message(payload))
        if line_type != self._request.ITEM_TYPE:
            raise UnexpectedItemTypeError(str(line_type), str(self._request.ITEM_TYPE))
        return self._request.parse_item(payload)


_HEARTBEAT = object()


def _error_message(payload: str) -> str:
    value = json.loads(payload)
    if isinstance(value, dict) and isinstance(value.get("error"), str):
        return value["error"]
    return payload


async def open_stream(
    http: httpx.AsyncClient,
    base_url: str,
    api_token: str,
    request: StreamingRequest,
    *,
    timeout_s: float,
    validate_server_header: bool = False,
) -> ResultStream:
    """发送流式请求，状态码校验通过后返回结果序列

    observe 这类无限流不设读超时，只保留连接超时。

    Raises:
        SerializationError: 请求体无法序列化
        TransportError: 连接失败、超时或 base URL 非法
        ServerError: 非 2xx 状态码（连接已关闭）
        InvalidServerHeaderError: 开启校验且 Server 头非法
    """
    path = request.url_path()
    if request.OPEN_ENDED:
        timeout = httpx.Timeout(timeout_s, read=None)
    else:
        timeout = httpx.Timeout(timeout_s)
    http_request = _build_request(http, base_url, api_token, request, timeout)

    log.debug("esdb_request_started", method=request.method(), path=path)

    try:
        response = await http.send(http_request, stream=True)
    except (httpx.TransportError, httpx.InvalidURL) as e:
        log.warning(
            "esdb_request_failed",
            path=path,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise TransportError(url=str(http_request.url), original_error=e) from e

    try:
        if validate_server_header:
            check_server_header(response)
        if not response.is_success:
            with contextlib.suppress(httpx.HTTPError):
                await response.aread()
            log.warning("esdb_request_failed", path=path, status_code=response.status_code)
            raise ServerError(status_code=response.status_code, body=_error_body(response))
    except BaseException:
        await response.aclose()
        raise

    log.debug("esdb_stream_opened", path=path, open_ended=request.OPEN_ENDED)
    return ResultStream(request, response)
