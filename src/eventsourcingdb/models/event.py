"""Event / EventCandidate 数据模型 + 完整性校验

Event 由服务端签发，收到后不可变。
hash 是 (specversion, id, predecessorhash, time, source, subject, type,
datacontenttype, data) 的纯函数，校验无需网络。
data 的 hash 基于报文中的原始字节，因此 Event 保留 data 原文。
"""

import binascii
import hashlib
import json
from datetime import datetime
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from ..exceptions import (
    HashVerificationError,
    InvalidCloudEventError,
    MalformedSignatureError,
    MissingSignatureError,
    SignatureVerificationError,
)
from ..raw_json import object_member_spans
from .timestamps import format_timestamp, parse_timestamp

SIGNATURE_PREFIX = "esdb:signature:v1:"
SIGNATURE_LENGTH = 64

# 数据库中第一个事件的 predecessorhash
ZERO_HASH = "0" * 64


def _is_json_media_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class TraceInfo(BaseModel):
    """W3C Trace Context

    报文中 traceparent / tracestate 平铺在事件顶层。
    tracestate 只有和 traceparent 一起出现才有意义。
    """

    model_config = ConfigDict(frozen=True)

    traceparent: str = Field(description="W3C traceparent")
    tracestate: str | None = Field(default=None, description="W3C tracestate")

    def to_wire(self) -> dict[str, str]:
        """平铺到事件顶层的字段"""
        wire = {"traceparent": self.traceparent}
        if self.tracestate is not None:
            wire["tracestate"] = self.tracestate
        return wire

    @classmethod
    def from_wire(cls, values: dict[str, Any]) -> "TraceInfo | None":
        """从事件顶层字段提取；没有 traceparent 时忽略 tracestate"""
        traceparent = values.get("traceparent")
        if traceparent is None:
            return None
        return cls(traceparent=traceparent, tracestate=values.get("tracestate"))

    @classmethod
    def from_cloudevent(cls, event: Any) -> "TraceInfo | None":
        """从 CloudEvent 的 traceparent / tracestate 扩展属性提取

        Raises:
            InvalidCloudEventError: 有 tracestate 但没有 traceparent
        """
        traceparent = event.get("traceparent")
        tracestate = event.get("tracestate")
        if traceparent is None:
            if tracestate is not None:
                raise InvalidCloudEventError("CloudEvent 含 tracestate 但缺少 traceparent")
            return None
        return cls(traceparent=traceparent, tracestate=tracestate)


class EventCandidate(BaseModel):
    """待写入的事件

    id / hash / time 由服务端分配；写入后以服务端返回的 Event 为准。
    """

    source: str = Field(description="事件来源 URI")
    subject: str = Field(description="层级路径，以 / 开头")
    type: str = Field(description="反向域名风格的事件类型")
    data: Any = Field(description="任意 JSON 负载")
    trace_info: TraceInfo | None = Field(default=None, description="可选的追踪上下文")

    def to_wire(self) -> dict[str, Any]:
        """write-events 请求中的单个事件"""
        wire: dict[str, Any] = {
            "source": self.source,
            "subject": self.subject,
            "type": self.type,
            "data": self.data,
        }
        if self.trace_info is not None:
            wire.update(self.trace_info.to_wire())
        return wire

    @classmethod
    def from_cloudevent(cls, event: Any) -> "EventCandidate":
        """从 cloudevents SDK 的 CloudEvent 构造待写入事件

        Args:
            event: cloudevents.http.CloudEvent（或同样提供 get / [] / data 的对象）

        Raises:
            InvalidCloudEventError: 缺少 subject、data 不是 JSON，或 tracestate 缺少 traceparent
        """
        subject = event.get("subject")
        if not subject:
            raise InvalidCloudEventError("CloudEvent 缺少 subject")

        content_type = event.get("datacontenttype")
        if content_type is not None and not _is_json_media_type(content_type):
            raise InvalidCloudEventError(f"CloudEvent 的 data 不是 JSON: {content_type}")

        data = event.data
        if isinstance(data, (bytes, bytearray)):
            try:
                data = json.loads(data)
            except ValueError as e:
                raise InvalidCloudEventError(f"CloudEvent 的 data 无法解析为 JSON: {e}") from e

        return cls(
            source=event["source"],
            subject=subject,
            type=event["type"],
            data=data,
            trace_info=TraceInfo.from_cloudevent(event),
        )


class Event(BaseModel):
    """服务端持久化后的事件

    字段名与报文保持 CloudEvents 小写风格（specversion / datacontenttype /
    predecessorhash），解码时同时接受 camelCase 写法。
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="单调递增的序号（十进制字符串）")
    source: str = Field(description="事件来源 URI")
    subject: str = Field(description="层级路径")
    type: str = Field(description="事件类型")
    data: Any = Field(description="解析后的 JSON 负载")
    data_content_type: str = Field(
        validation_alias=AliasChoices("datacontenttype", "dataContentType", "data_content_type"),
        serialization_alias="datacontenttype",
    )
    spec_version: str = Field(
        validation_alias=AliasChoices("specversion", "specVersion", "spec_version"),
        serialization_alias="specversion",
    )
    time: datetime = Field(description="服务端分配的 UTC 时间")
    hash: str = Field(description="规范化 hash（小写 hex）")
    predecessor_hash: str = Field(
        validation_alias=AliasChoices("predecessorhash", "predecessorHash", "predecessor_hash"),
        serialization_alias="predecessorhash",
    )
    trace_info: TraceInfo | None = Field(default=None)
    signature: str | None = Field(default=None, description="esdb:signature:v1: 前缀的 Ed25519 签名")

    _raw_data: str | None = PrivateAttr(default=None)
    _nanosecond: int | None = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def _from_wire(cls, value: Any, handler: Any) -> "Event":
        nanosecond = None
        if isinstance(value, dict):
            value = dict(value)
            raw_time = value.get("time")
            if isinstance(raw_time, str):
                value["time"], nanosecond = parse_timestamp(raw_time)
            if "trace_info" not in value:
                value["trace_info"] = TraceInfo.from_wire(value)
            value.pop("traceparent", None)
            value.pop("tracestate", None)
        event = handler(value)
        if nanosecond is not None:
            event._nanosecond = nanosecond
        return event

    @classmethod
    def from_json(cls, text: str) -> "Event":
        """从报文解析单个事件，并保留 data 原文

        Raises:
            ValueError: 不是合法 JSON 对象或字段不符合（含 pydantic ValidationError）
        """
        members = object_member_spans(text)
        event = cls.model_validate(json.loads(text))
        event._raw_data = members.get("data")
        return event

    def to_json(self) -> str:
        """序列化为报文格式，data 原文原样拼回"""
        envelope = self.model_dump(
            mode="json",
            by_alias=True,
            exclude={"data", "time", "trace_info"},
            exclude_none=True,
        )
        envelope["time"] = self.time_rfc3339
        if self.trace_info is not None:
            envelope.update(self.trace_info.to_wire())

        members = [f'"data":{self.raw_data}']
        members.extend(
            f"{json.dumps(key)}:{json.dumps(value, ensure_ascii=False)}"
            for key, value in envelope.items()
        )
        return "{" + ",".join(members) + "}"

    @property
    def raw_data(self) -> str:
        """data 在报文中的原文

        原文只在与 data 一致时使用（model_copy(update=...) 会原样复制私有属性）；
        非报文构造或 data 被替换的事件退化为紧凑序列化。
        """
        if self._raw_data is not None and json.loads(self._raw_data) == self.data:
            return self._raw_data
        return json.dumps(self.data, ensure_ascii=False, separators=(",", ":"))

    @property
    def time_rfc3339(self) -> str:
        """纳秒精度、Z 结尾的时间字符串（参与 hash 计算）

        保留的纳秒数只在与 time 的微秒一致时使用。
        """
        nanosecond = self._nanosecond
        if nanosecond is not None and nanosecond // 1000 != self.time.microsecond:
            nanosecond = None
        return format_timestamp(self.time, nanosecond)

    @property
    def traceparent(self) -> str | None:
        return self.trace_info.traceparent if self.trace_info else None

    @property
    def tracestate(self) -> str | None:
        return self.trace_info.tracestate if self.trace_info else None

    def compute_hash(self) -> str:
        """按规范化规则重新计算 hash

        1. metadata = specversion|id|predecessorhash|time|source|subject|type|datacontenttype
        2. sha256(metadata) 与 sha256(data 原文) 的 hex 拼接后再 sha256
        """
        metadata = "|".join(
            [
                self.spec_version,
                self.id,
                self.predecessor_hash,
                self.time_rfc3339,
                self.source,
                self.subject,
                self.type,
                self.data_content_type,
            ]
        )
        metadata_hash = hashlib.sha256(metadata.encode("utf-8")).hexdigest()
        data_hash = hashlib.sha256(self.raw_data.encode("utf-8")).hexdigest()
        return hashlib.sha256(f"{metadata_hash}{data_hash}".encode()).hexdigest()

    def verify_hash(self) -> None:
        """校验 hash

        Raises:
            HashVerificationError: 重新计算的 hash 与 event.hash 不一致
        """
        actual = self.compute_hash()
        if actual != self.hash:
            raise HashVerificationError(expected=self.hash, actual=actual)

    def verify_signature(self, public_key: Ed25519PublicKey) -> None:
        """校验签名：先校验 hash，再用公钥校验对 hash 字符串的 Ed25519 签名

        Raises:
            MissingSignatureError: 事件没有签名
            MalformedSignatureError: 前缀错误、hex 非法或长度不是 64 字节
            HashVerificationError: hash 校验失败
            SignatureVerificationError: 签名不匹配
        """
        if self.signature is None:
            raise MissingSignatureError(self.id)
        if not self.signature.startswith(SIGNATURE_PREFIX):
            raise MalformedSignatureError(f"签名缺少 {SIGNATURE_PREFIX} 前缀")

        self.verify_hash()

        try:
            signature_bytes = binascii.unhexlify(self.signature[len(SIGNATURE_PREFIX) :])
        except (binascii.Error, ValueError) as e:
            raise MalformedSignatureError(f"签名 hex 解码失败: {e}") from e
        if len(signature_bytes) != SIGNATURE_LENGTH:
            raise MalformedSignatureError(
                f"签名长度应为 {SIGNATURE_LENGTH} 字节，实际 {len(signature_bytes)}"
            )

        try:
            public_key.verify(signature_bytes, self.hash.encode("utf-8"))
        except InvalidSignature as e:
            raise SignatureVerificationError(f"事件 {self.id} 签名校验失败") from e

    def to_cloudevent(self) -> Any:
        """转换为 cloudevents SDK 的 CloudEvent（需要安装 cloudevents extra）

        time 使用纳秒精度字符串；traceparent / tracestate 作为扩展属性。
        hash / predecessorhash / signature 不属于 CloudEvents 属性，不会带上。
        """
        from cloudevents.http import CloudEvent

        attributes = {
            "specversion": self.spec_version,
            "id": self.id,
            "source": self.source,
            "subject": self.subject,
            "type": self.type,
            "time": self.time_rfc3339,
            "datacontenttype": self.data_content_type,
        }
        if self.trace_info is not None:
            attributes.update(self.trace_info.to_wire())
        return CloudEvent(attributes, self.data)

    def to_candidate(self) -> EventCandidate:
        """转换为 EventCandidate（丢弃 id / hash / time / signature）"""
        return EventCandidate(
            source=self.source,
            subject=self.subject,
            type=self.type,
            data=self.data,
            trace_info=self.trace_info,
        )
