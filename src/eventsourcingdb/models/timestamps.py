"""RFC 3339 时间戳 -- 纳秒精度解析与格式化

服务端时间戳精确到纳秒，datetime 只到微秒，
因此解析时把秒内纳秒数单独保留，供 hash 计算使用。
"""

import re
from datetime import UTC, datetime

_RFC3339 = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<clock>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_timestamp(text: str) -> tuple[datetime, int]:
    """解析 RFC 3339 时间戳

    Returns:
        (UTC datetime（截断到微秒）, 秒内纳秒数)

    Raises:
        ValueError: 格式非法
    """
    match = _RFC3339.match(text)
    if match is None:
        raise ValueError(f"非法的 RFC 3339 时间戳: {text!r}")

    fraction = (match["fraction"] or "").ljust(9, "0")
    nanosecond = int(fraction)
    offset = "+00:00" if match["offset"] in ("Z", "z") else match["offset"]
    parsed = datetime.fromisoformat(f"{match['date']}T{match['clock']}{offset}")
    parsed = parsed.replace(microsecond=nanosecond // 1000).astimezone(UTC)
    return parsed, nanosecond


def format_timestamp(value: datetime, nanosecond: int | None = None) -> str:
    """格式化为 UTC、9 位小数、Z 结尾的 RFC 3339 字符串

    Args:
        value: 时间（naive 视为 UTC）
        nanosecond: 秒内纳秒数，None 时由 microsecond 推出
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    if nanosecond is None:
        nanosecond = value.microsecond * 1000
    return f"{value:%Y-%m-%dT%H:%M:%S}.{nanosecond:09d}Z"


def coerce_timestamp(value: object) -> object:
    """pydantic before 校验器：字符串按纳秒精度解析，其余原样交给 pydantic"""
    if isinstance(value, str):
        return parse_timestamp(value)[0]
    return value
