"""EventSourcingDB 客户端异常体系

所有异常继承 EventSourcingDBError，调用方可以统一捕获。
分类：传输 / 服务端 / 解码 / 协议语义 / 流内错误 / 完整性 / 输入校验。
客户端不做任何自动重试，重试由调用方决定。
"""


class EventSourcingDBError(Exception):
    """客户端基础异常"""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(EventSourcingDBError):
    """传输层失败（连接失败、DNS、TLS、超时、base URL 非法等）"""

    def __init__(self, url: str, original_error: Exception) -> None:
        """
        Args:
            url: 尝试访问的 URL
            original_error: 原始异常
        """
        super().__init__(f"无法访问 EventSourcingDB: {url} -- {original_error}")
        self.url = url
        self.original_error = original_error


class SerializationError(EventSourcingDBError):
    """请求体无法序列化为 UTF-8 JSON，请求未发出"""


class ServerError(EventSourcingDBError):
    """服务端返回非 2xx 状态码"""

    def __init__(self, status_code: int, body: str) -> None:
        """
        Args:
            status_code: HTTP 状态码
            body: 响应体原文（读取失败时为空字符串）
        """
        super().__init__(f"服务端返回 HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(EventSourcingDBError):
    """响应不是合法 JSON，或结构与预期不符"""


class ProtocolError(EventSourcingDBError):
    """协议语义错误：响应结构合法但内容不符合约定"""


class PingFailedError(ProtocolError):
    """ping 未收到 ping-received 确认"""

    def __init__(self, received_type: str) -> None:
        super().__init__(f"ping 失败，收到的事件类型: {received_type}")
        self.received_type = received_type


class ApiTokenInvalidError(ProtocolError):
    """API token 校验未通过"""

    def __init__(self, received_type: str) -> None:
        super().__init__(f"API token 无效，收到的事件类型: {received_type}")
        self.received_type = received_type


class InvalidEventTypeError(ProtocolError):
    """事件类型非法（为空，或注册 schema 未收到预期确认）"""

    def __init__(self, event_type: str, reason: str = "") -> None:
        message = f"事件类型非法: {event_type!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.event_type = event_type
        self.reason = reason


class UnexpectedItemTypeError(ProtocolError):
    """流中出现了非预期的行类型"""

    def __init__(self, item_type: str, expected_type: str) -> None:
        super().__init__(f"流中出现非预期的行类型 {item_type!r}（预期 {expected_type!r}）")
        self.item_type = item_type
        self.expected_type = expected_type


class InvalidServerHeaderError(ProtocolError):
    """响应的 Server 头不是 EventSourcingDB"""

    def __init__(self, server_header: str | None) -> None:
        super().__init__(f"Server 头非法: {server_header!r}")
        self.server_header = server_header


class ServerSideError(EventSourcingDBError):
    """服务端在流中报告的错误行

    已经产出的条目仍然有效，此后的内容不再保证。
    """

    def __init__(self, server_message: str) -> None:
        super().__init__(f"服务端在流中报告错误: {server_message}")
        self.server_message = server_message


class StreamIOError(EventSourcingDBError):
    """读取流式响应体失败"""

    def __init__(self, original_error: Exception) -> None:
        super().__init__(f"读取流式响应失败: {original_error}")
        self.original_error = original_error


class IntegrityError(EventSourcingDBError):
    """事件完整性校验失败（纯本地，不涉及网络）"""


class HashVerificationError(IntegrityError):
    """重新计算的 hash 与事件携带的 hash 不一致"""

    def __init__(self, expected: str, actual: str) -> None:
        """
        Args:
            expected: 事件携带的 hash
            actual: 本地重新计算的 hash
        """
        super().__init__(f"hash 校验失败: 预期 {expected}，实际 {actual}")
        self.expected = expected
        self.actual = actual


class MissingSignatureError(IntegrityError):
    """事件没有签名（服务端未启用签名）"""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"事件 {event_id} 没有签名")
        self.event_id = event_id


class MalformedSignatureError(IntegrityError):
    """签名格式非法：前缀错误、hex 解码失败或长度不是 64 字节"""


class SignatureVerificationError(IntegrityError):
    """Ed25519 签名校验失败"""


class InvalidSchemaError(EventSourcingDBError):
    """JSON Schema 文档本身结构非法，请求未发出"""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class InvalidCloudEventError(EventSourcingDBError):
    """CloudEvent 无法转换为 EventCandidate（缺 subject、data 不是 JSON、追踪上下文不完整）"""
