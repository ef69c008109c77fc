"""数据模型单元测试 -- 报文编解码、选项与前置条件序列化、时间戳"""

import json
from datetime import UTC, datetime

import pytest
from eventsourcingdb import (
    Bound,
    BoundType,
    Event,
    EventCandidate,
    EventType,
    IsEventQlTrue,
    IsSubjectOnEventId,
    IsSubjectPristine,
    ManagementEvent,
    ObserveEventsOptions,
    ObserveFromLatestEvent,
    Order,
    ReadEventsOptions,
    ReadFromLatestEvent,
    ReadIfEventIsMissing,
    TraceInfo,
)
from eventsourcingdb.models.timestamps import format_timestamp, parse_timestamp
from pydantic import ValidationError

EVENT_JSON = (
    '{"specversion":"1.0","id":"7","time":"2026-03-01T12:00:07.123456789Z",'
    '"source":"https://library.example","subject":"/books/42",'
    '"type":"io.example.book-acquired","datacontenttype":"application/json",'
    '"data":{ "title" : "Neuromancer",  "year":1984 },'
    '"hash":"' + "a" * 64 + '","predecessorhash":"' + "b" * 64 + '",'
    '"traceparent":"00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01",'
    '"tracestate":"vendor=1"}'
)


class TestTimestamps:
    """RFC 3339 纳秒时间戳"""

    def test_parse_keeps_nanoseconds(self):
        value, nanosecond = parse_timestamp("2026-03-01T12:00:07.123456789Z")
        assert value == datetime(2026, 3, 1, 12, 0, 7, 123456, tzinfo=UTC)
        assert nanosecond == 123456789

    def test_parse_short_fraction(self):
        _, nanosecond = parse_timestamp("2026-03-01T12:00:07.5Z")
        assert nanosecond == 500000000

    def test_parse_without_fraction(self):
        value, nanosecond = parse_timestamp("2026-03-01T12:00:07Z")
        assert nanosecond == 0
        assert value.second == 7

    def test_parse_offset_normalized_to_utc(self):
        value, _ = parse_timestamp("2026-03-01T14:00:07.000000001+02:00")
        assert value == datetime(2026, 3, 1, 12, 0, 7, tzinfo=UTC)

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")

    def test_format_nine_digits(self):
        value = datetime(2026, 3, 1, 12, 0, 7, 123456, tzinfo=UTC)
        assert format_timestamp(value) == "2026-03-01T12:00:07.123456000Z"
        assert format_timestamp(value, 123456789) == "2026-03-01T12:00:07.123456789Z"

    def test_format_naive_as_utc(self):
        assert format_timestamp(datetime(2026, 1, 1)) == "2026-01-01T00:00:00.000000000Z"


class TestEventDecoding:
    """Event 报文解码"""

    def test_fields(self):
        event = Event.from_json(EVENT_JSON)

        assert event.id == "7"
        assert event.spec_version == "1.0"
        assert event.data_content_type == "application/json"
        assert event.predecessor_hash == "b" * 64
        assert event.data == {"title": "Neuromancer", "year": 1984}
        assert event.time_rfc3339 == "2026-03-01T12:00:07.123456789Z"
        assert event.signature is None

    def test_raw_data_preserved(self):
        """data 原文（含空白和 key 顺序）被保留"""
        event = Event.from_json(EVENT_JSON)
        assert event.raw_data == '{ "title" : "Neuromancer",  "year":1984 }'

    def test_trace_info_flattened(self):
        event = Event.from_json(EVENT_JSON)
        assert event.trace_info == TraceInfo(
            traceparent="00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01",
            tracestate="vendor=1",
        )
        assert event.traceparent.startswith("00-")
        assert event.tracestate == "vendor=1"

    def test_camel_case_field_names_accepted(self):
        wire = json.loads(EVENT_JSON)
        wire["specVersion"] = wire.pop("specversion")
        wire["dataContentType"] = wire.pop("datacontenttype")
        wire["predecessorHash"] = wire.pop("predecessorhash")

        event = Event.model_validate(wire)
        assert event.spec_version == "1.0"
        assert event.predecessor_hash == "b" * 64

    def test_tracestate_without_traceparent_dropped(self):
        wire = json.loads(EVENT_JSON)
        del wire["traceparent"]

        event = Event.model_validate(wire)
        assert event.trace_info is None
        assert event.tracestate is None

    def test_missing_field_rejected(self):
        wire = json.loads(EVENT_JSON)
        del wire["hash"]
        with pytest.raises(ValidationError):
            Event.model_validate(wire)

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            Event.from_json("[1, 2, 3]")

    def test_immutable(self):
        event = Event.from_json(EVENT_JSON)
        with pytest.raises(ValidationError):
            event.subject = "/other"


class TestEventRoundTrip:
    """Event 序列化后重新解析"""

    def test_round_trip_equal(self):
        event = Event.from_json(EVENT_JSON)
        parsed = Event.from_json(event.to_json())

        assert parsed == event
        assert parsed.raw_data == event.raw_data
        assert parsed.time_rfc3339 == event.time_rfc3339
        assert parsed.compute_hash() == event.compute_hash()

    def test_wire_names_are_lowercase(self):
        wire = json.loads(Event.from_json(EVENT_JSON).to_json())
        assert {"specversion", "datacontenttype", "predecessorhash"} <= set(wire)
        assert "trace_info" not in wire
        assert wire["traceparent"].startswith("00-")

    def test_to_candidate(self):
        candidate = Event.from_json(EVENT_JSON).to_candidate()
        assert candidate == EventCandidate(
            source="https://library.example",
            subject="/books/42",
            type="io.example.book-acquired",
            data={"title": "Neuromancer", "year": 1984},
            trace_info=TraceInfo(
                traceparent="00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01",
                tracestate="vendor=1",
            ),
        )


class TestEventCandidate:
    """EventCandidate 报文"""

    def test_to_wire_without_trace(self):
        candidate = EventCandidate(source="s", subject="/a", type="t", data=[1, None])
        assert candidate.to_wire() == {
            "source": "s",
            "subject": "/a",
            "type": "t",
            "data": [1, None],
        }

    def test_to_wire_with_traceparent_only(self):
        candidate = EventCandidate(
            source="s",
            subject="/a",
            type="t",
            data={},
            trace_info=TraceInfo(traceparent="00-abc-def-01"),
        )
        wire = candidate.to_wire()
        assert wire["traceparent"] == "00-abc-def-01"
        assert "tracestate" not in wire


class TestManagementEvent:
    def test_decode_and_to_candidate(self):
        event = ManagementEvent.model_validate(
            {
                "specversion": "1.0",
                "id": "0",
                "time": "2026-01-01T00:00:00.000000001Z",
                "source": "https://www.eventsourcingdb.io",
                "subject": "/api",
                "type": "io.eventsourcingdb.api.ping-received",
                "datacontenttype": "application/json",
                "data": {"ok": True},
            }
        )
        assert event.time == datetime(2026, 1, 1, tzinfo=UTC)
        candidate = event.to_candidate()
        assert candidate.type == "io.eventsourcingdb.api.ping-received"
        assert candidate.trace_info is None


class TestEventType:
    def test_decode(self):
        event_type = EventType.model_validate_json(
            '{"eventType": "io.example.x", "isPhantom": true, "schema": {"type": "object"}}'
        )
        assert event_type.name == "io.example.x"
        assert event_type.is_phantom is True
        assert event_type.json_schema == {"type": "object"}

    def test_schema_optional(self):
        event_type = EventType.model_validate_json('{"eventType": "x", "isPhantom": false}')
        assert event_type.json_schema is None


class TestOptions:
    """读取 / 订阅选项序列化"""

    def test_read_defaults(self):
        assert ReadEventsOptions().to_wire() == {"recursive": False}

    def test_read_full(self):
        options = ReadEventsOptions(
            recursive=True,
            order=Order.ANTICHRONOLOGICAL,
            lower_bound=Bound(id="1", type=BoundType.INCLUSIVE),
            upper_bound=Bound(id="9", type=BoundType.EXCLUSIVE),
            from_latest_event=ReadFromLatestEvent(
                subject="/books",
                type="io.example.snapshot",
                if_event_is_missing=ReadIfEventIsMissing.READ_NOTHING,
            ),
        )
        assert options.to_wire() == {
            "recursive": True,
            "order": "antichronological",
            "lowerBound": {"id": "1", "type": "inclusive"},
            "upperBound": {"id": "9", "type": "exclusive"},
            "fromLatestEvent": {
                "subject": "/books",
                "type": "io.example.snapshot",
                "ifEventIsMissing": "read-nothing",
            },
        }

    def test_observe_default_missing_strategy(self):
        options = ObserveEventsOptions(
            from_latest_event=ObserveFromLatestEvent(subject="/books", type="t")
        )
        assert options.to_wire()["fromLatestEvent"]["ifEventIsMissing"] == "observe-everything"

    def test_bound_type_required(self):
        with pytest.raises(ValidationError):
            Bound(id="1")


class TestPreconditions:
    def test_pristine(self):
        assert IsSubjectPristine(subject="/a").to_wire() == {
            "type": "isSubjectPristine",
            "payload": {"subject": "/a"},
        }

    def test_on_event_id(self):
        assert IsSubjectOnEventId(subject="/a", event_id="3").to_wire() == {
            "type": "isSubjectOnEventId",
            "payload": {"subject": "/a", "eventId": "3"},
        }

    def test_eventql(self):
        assert IsEventQlTrue(query="FROM e IN events").to_wire() == {
            "type": "isEventQlTrue",
            "payload": {"query": "FROM e IN events"},
        }
