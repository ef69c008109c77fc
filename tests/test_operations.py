"""请求描述单元测试 -- URL、方法、请求体与响应解析"""

import json
from typing import ClassVar

import pytest
from eventsourcingdb import (
    ApiTokenInvalidError,
    EventCandidate,
    InvalidEventTypeError,
    InvalidSchemaError,
    IsSubjectPristine,
    ManagementEvent,
    PingFailedError,
    ReadEventsOptions,
)
from eventsourcingdb.models import LineType
from eventsourcingdb.operations import (
    ListEventTypesRequest,
    ListSubjectsRequest,
    ManagementRequest,
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
    validate_event_schema,
)


def _management_event(event_type: str) -> ManagementEvent:
    return ManagementEvent.model_validate(
        {
            "specversion": "1.0",
            "id": "0",
            "time": "2026-01-01T00:00:00Z",
            "source": "https://www.eventsourcingdb.io",
            "subject": "/api",
            "type": event_type,
            "datacontenttype": "application/json",
            "data": {},
        }
    )


class TestEndpoints:
    """URL 路径与 HTTP 方法"""

    @pytest.mark.parametrize(
        ("request_obj", "method", "path"),
        [
            (PingRequest(), "GET", "/api/v1/ping"),
            (VerifyApiTokenRequest(), "POST", "/api/v1/verify-api-token"),
            (WriteEventsRequest(), "POST", "/api/v1/write-events"),
            (ReadEventsRequest(subject="/"), "POST", "/api/v1/read-events"),
            (ObserveEventsRequest(subject="/"), "POST", "/api/v1/read-events"),
            (ListSubjectsRequest(), "POST", "/api/v1/read-subjects"),
            (ListEventTypesRequest(), "POST", "/api/v1/read-event-types"),
            (ReadEventTypeRequest(event_type="t"), "POST", "/api/v1/read-event-type"),
            (RunEventQlQueryRequest(query="q"), "POST", "/api/v1/run-eventql-query"),
        ],
    )
    def test_method_and_path(self, request_obj, method, path):
        assert request_obj.method() == method
        assert request_obj.url_path() == path

    def test_no_body_requests(self):
        assert PingRequest().encode_body() is None
        assert VerifyApiTokenRequest().encode_body() is None

    def test_line_types(self):
        assert ReadEventsRequest.ITEM_TYPE == LineType.EVENT
        assert ObserveEventsRequest.ITEM_TYPE == LineType.EVENT
        assert ListSubjectsRequest.ITEM_TYPE == LineType.SUBJECT
        assert ListEventTypesRequest.ITEM_TYPE == LineType.EVENT_TYPE
        assert RunEventQlQueryRequest.ITEM_TYPE == LineType.ROW

    def test_only_observe_is_open_ended(self):
        assert ObserveEventsRequest.OPEN_ENDED is True
        assert ReadEventsRequest.OPEN_ENDED is False


class TestBodies:
    """请求体编码"""

    def test_write_events(self):
        request = WriteEventsRequest(
            events=[EventCandidate(source="s", subject="/a", type="t", data={"ü": 1})],
            preconditions=[IsSubjectPristine(subject="/a")],
        )
        encoded = request.encode_body()

        assert "ü".encode() in encoded
        assert json.loads(encoded) == {
            "events": [{"source": "s", "subject": "/a", "type": "t", "data": {"ü": 1}}],
            "preconditions": [{"type": "isSubjectPristine", "payload": {"subject": "/a"}}],
        }

    def test_read_events(self):
        request = ReadEventsRequest(subject="/a", options=ReadEventsOptions(recursive=True))
        assert json.loads(request.encode_body()) == {
            "subject": "/a",
            "options": {"recursive": True},
        }

    def test_list_event_types_empty_object(self):
        assert json.loads(ListEventTypesRequest().encode_body()) == {}

    def test_read_event_type(self):
        assert json.loads(ReadEventTypeRequest(event_type="t").encode_body()) == {
            "eventType": "t"
        }

    def test_run_query(self):
        assert json.loads(RunEventQlQueryRequest(query="FROM e").encode_body()) == {
            "query": "FROM e"
        }

    def test_register_schema_keeps_nulls(self):
        schema = {"type": "object", "default": None}
        request = RegisterEventSchemaRequest.create("io.example.x", schema)
        assert json.loads(request.encode_body()) == {"eventType": "io.example.x", "schema": schema}


class TestResponses:
    """响应解析与语义校验"""

    def test_ping_accepts_ping_received(self):
        request = PingRequest()
        request.validate_response(_management_event("io.eventsourcingdb.api.ping-received"))

    def test_ping_rejects_other_type(self):
        with pytest.raises(PingFailedError):
            PingRequest().validate_response(_management_event("io.example.other"))

    def test_register_rejects_other_type(self):
        request = RegisterEventSchemaRequest.create("io.example.x", {"type": "object"})
        with pytest.raises(InvalidEventTypeError):
            request.validate_response(_management_event("io.eventsourcingdb.api.ping-received"))

    def test_subject_item(self):
        assert ListSubjectsRequest().parse_item('{"subject": "/books"}') == "/books"

    def test_row_item(self):
        assert RunEventQlQueryRequest(query="q").parse_item('[1, {"a": null}]') == [1, {"a": None}]

    def test_write_events_response(self):
        assert WriteEventsRequest().parse_response("[]") == []


class TestRequestContracts:
    """请求基类要求子类提供解析与拒绝逻辑"""

    def test_one_shot_without_parser_cannot_be_created(self):
        class NoParser(OneShotRequest):
            URL_PATH: ClassVar[str] = "/api/v1/nothing"

        with pytest.raises(TypeError):
            NoParser()

    def test_streaming_without_item_parser_cannot_be_created(self):
        class NoItemParser(StreamingRequest):
            URL_PATH: ClassVar[str] = "/api/v1/nothing"
            ITEM_TYPE: ClassVar[LineType] = LineType.EVENT

        with pytest.raises(TypeError):
            NoItemParser()

    def test_management_without_rejection_cannot_be_created(self):
        class NoRejection(ManagementRequest):
            URL_PATH: ClassVar[str] = "/api/v1/nothing"
            EXPECTED_EVENT_TYPE: ClassVar[str] = "io.example.ok"

        with pytest.raises(TypeError):
            NoRejection()

    def test_rejection_is_returned_then_raised(self):
        """rejection 返回异常对象，由 validate_response 抛出"""
        request = VerifyApiTokenRequest()
        event = _management_event("io.example.other")

        error = request.rejection(event)
        assert isinstance(error, ApiTokenInvalidError)
        assert error.received_type == "io.example.other"
        with pytest.raises(ApiTokenInvalidError):
            request.validate_response(event)


class TestSchemaValidation:
    """JSON Schema 结构校验"""

    @pytest.mark.parametrize(
        "schema",
        [
            {"type": "object", "properties": {"title": {"type": "string"}}},
            {"$schema": "http://json-schema.org/draft-07/schema#", "type": "array"},
            True,
            {},
        ],
    )
    def test_valid(self, schema):
        validate_event_schema(schema)

    @pytest.mark.parametrize(
        "schema",
        [
            {"type": 42},
            {"properties": []},
            {"required": "title"},
            "object",
            None,
            ["type"],
        ],
    )
    def test_invalid(self, schema):
        with pytest.raises(InvalidSchemaError):
            validate_event_schema(schema)

    def test_empty_event_type(self):
        with pytest.raises(InvalidEventTypeError):
            RegisterEventSchemaRequest.create("", {"type": "object"})
