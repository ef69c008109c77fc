"""原始 JSON 切片 -- 保留成员值在报文中的原文

事件 hash 基于 data 字段在报文中的原始字节计算，
重新序列化会改变空白和 key 顺序，因此需要直接从原文中切出成员值。
"""

import json
import re
from json.decoder import scanstring

_decoder = json.JSONDecoder()
_WHITESPACE = re.compile(r"[ \t\n\r]*")


def _skip_whitespace(text: str, idx: int) -> int:
    return _WHITESPACE.match(text, idx).end()


def _value_end(text: str, start: int) -> int:
    _, end = _decoder.raw_decode(text, start)
    return end


def _expect_end(text: str, idx: int) -> None:
    idx = _skip_whitespace(text, idx)
    if idx != len(text):
        raise ValueError(f"多余的内容，位置 {idx}")


def object_member_spans(text: str) -> dict[str, str]:
    """切出 JSON 对象每个顶层成员值的原文

    Args:
        text: 一个完整的 JSON 对象文本

    Returns:
        成员名 -> 成员值原文（不含两侧空白）

    Raises:
        ValueError: 文本不是合法的 JSON 对象
    """
    idx = _skip_whitespace(text, 0)
    if text[idx : idx + 1] != "{":
        raise ValueError("预期 JSON 对象")
    idx = _skip_whitespace(text, idx + 1)

    members: dict[str, str] = {}
    if text[idx : idx + 1] == "}":
        _expect_end(text, idx + 1)
        return members

    while True:
        if text[idx : idx + 1] != '"':
            raise ValueError(f"预期成员名，位置 {idx}")
        key, idx = scanstring(text, idx + 1)
        idx = _skip_whitespace(text, idx)
        if text[idx : idx + 1] != ":":
            raise ValueError(f"预期 ':'，位置 {idx}")
        start = _skip_whitespace(text, idx + 1)
        end = _value_end(text, start)
        members[key] = text[start:end]

        idx = _skip_whitespace(text, end)
        separator = text[idx : idx + 1]
        if separator == ",":
            idx = _skip_whitespace(text, idx + 1)
        elif separator == "}":
            _expect_end(text, idx + 1)
            return members
        else:
            raise ValueError(f"预期 ',' 或 '}}'，位置 {idx}")


def array_element_spans(text: str) -> list[str]:
    """切出 JSON 数组每个元素的原文

    Raises:
        ValueError: 文本不是合法的 JSON 数组
    """
    idx = _skip_whitespace(text, 0)
    if text[idx : idx + 1] != "[":
        raise ValueError("预期 JSON 数组")
    idx = _skip_whitespace(text, idx + 1)

    elements: list[str] = []
    if text[idx : idx + 1] == "]":
        _expect_end(text, idx + 1)
        return elements

    while True:
        end = _value_end(text, idx)
        elements.append(text[idx:end])

        idx = _skip_whitespace(text, end)
        separator = text[idx : idx + 1]
        if separator == ",":
            idx = _skip_whitespace(text, idx + 1)
        elif separator == "]":
            _expect_end(text, idx + 1)
            return elements
        else:
            raise ValueError(f"预期 ',' 或 ']'，位置 {idx}")
