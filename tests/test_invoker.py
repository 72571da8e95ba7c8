import asyncio
import json

import pytest

from vidyasagar.core.errors import InvocationError, TransportError
from vidyasagar.core.invoker import Ok, SchemaMismatch, parse_reply, response_schema_for
from vidyasagar.flows.mock_test import MockTestResponse
from vidyasagar.flows.notes import NotesResponse
from vidyasagar.flows.planner import PlannerResponse


def test_schema_uses_wire_names() -> None:
    schema = response_schema_for(MockTestResponse)
    assert schema["type"] == "OBJECT"
    assert schema["propertyOrdering"] == ["questionPaper", "answerKey", "detailedSolutions"]
    assert set(schema["required"]) == {"questionPaper", "answerKey", "detailedSolutions"}
    assert all(p["type"] == "STRING" for p in schema["properties"].values())


def test_nested_schema_is_inlined() -> None:
    schema = response_schema_for(PlannerResponse)
    assert "$ref" not in json.dumps(schema)
    timetable = schema["properties"]["timetable"]
    assert timetable["type"] == "ARRAY"
    day = timetable["items"]
    assert day["type"] == "OBJECT"
    assert day["properties"]["activities"] == {
        "type": "ARRAY",
        "description": "List of activities for the day (e.g., study Math, revision, mock test).",
        "items": {"type": "STRING"},
    }


def test_parse_reply_accepts_fenced_json() -> None:
    result = parse_reply('```json\n{"notes": "# Optics"}\n```', NotesResponse)
    assert isinstance(result, Ok)
    assert result.value.notes == "# Optics"


def test_parse_reply_accepts_mapping(mock_test_reply) -> None:
    result = parse_reply(mock_test_reply, MockTestResponse)
    assert isinstance(result, Ok)
    assert result.value.answer_key == "Q1. (b)"


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "[1, 2, 3]",
        '{"questionPaper": "Q", "detailedSolutions": "S"}',
        '{"questionPaper": "Q", "answerKey": "", "detailedSolutions": "S"}',
        '{"questionPaper": ["Q"], "answerKey": "A", "detailedSolutions": "S"}',
    ],
)
def test_parse_reply_mismatches(raw: str) -> None:
    assert isinstance(parse_reply(raw, MockTestResponse), SchemaMismatch)


def test_missing_field_named_in_reason() -> None:
    result = parse_reply('{"questionPaper": "Q", "detailedSolutions": "S"}', MockTestResponse)
    assert isinstance(result, SchemaMismatch)
    assert "answerKey" in result.reason


def test_invoker_sends_prompt_and_schema_once(make_invoker) -> None:
    invoker, client = make_invoker(reply={"notes": "Structured notes"})
    result = asyncio.run(invoker.invoke("PROMPT", NotesResponse, flow="notes"))
    assert result.notes == "Structured notes"
    assert len(client.calls) == 1
    prompt, schema = client.calls[0]
    assert prompt == "PROMPT"
    assert schema == response_schema_for(NotesResponse)


def test_transport_failure_is_invocation_error(make_invoker) -> None:
    invoker, client = make_invoker(error=TransportError("503 from upstream"))
    with pytest.raises(InvocationError) as info:
        asyncio.run(invoker.invoke("PROMPT", NotesResponse))
    assert info.value.kind == InvocationError.TRANSPORT
    assert len(client.calls) == 1


def test_unexpected_client_error_is_transport(make_invoker) -> None:
    invoker, client = make_invoker(error=ConnectionResetError("reset"))
    with pytest.raises(InvocationError) as info:
        asyncio.run(invoker.invoke("PROMPT", NotesResponse))
    assert info.value.kind == InvocationError.TRANSPORT


def test_malformed_reply_is_invocation_error(make_invoker) -> None:
    invoker, client = make_invoker(reply={"wrong": "shape"})
    with pytest.raises(InvocationError) as info:
        asyncio.run(invoker.invoke("PROMPT", NotesResponse))
    assert info.value.kind == InvocationError.SCHEMA
    assert len(client.calls) == 1
