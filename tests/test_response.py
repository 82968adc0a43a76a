import json

import pytest
from graphql import ExecutionResult, GraphQLError, parse

from gqlhttp.interfaces.errors import InvalidVariablesError, MethodNotAllowedError
from gqlhttp.interfaces.options import GraphQLOptions
from gqlhttp.interfaces.outcome import OperationOutcome, OutcomeKind
from gqlhttp.interfaces.schemas import GraphQLParams
from gqlhttp.pipeline.response import (
    apply_extensions,
    build_payload,
    escalate_status,
    serialize,
)


def success(data, errors=None):
    return OperationOutcome.success(ExecutionResult(data=data, errors=errors), parse("{ hello }"))


def test_success_without_data_is_escalated_to_500():
    outcome = escalate_status(success(None, [GraphQLError("Throws!")]))

    assert outcome.status_code == 500


def test_success_with_data_keeps_200():
    assert escalate_status(success({"hello": "world"})).status_code == 200


def test_terminal_outcome_keeps_its_status():
    outcome = OperationOutcome.from_http_error(InvalidVariablesError())

    assert escalate_status(outcome).status_code == 400


def test_terminal_payload_has_no_data_field():
    payload = build_payload(OperationOutcome.from_http_error(InvalidVariablesError()), None)

    assert payload == {"errors": [{"message": "Variables are invalid JSON."}]}


def test_success_payload_with_null_data_keeps_the_field():
    payload = build_payload(success(None, [GraphQLError("Throws!", path=["thrower"])]), None)

    assert payload == {"data": None, "errors": [{"message": "Throws!", "path": ["thrower"]}]}


def test_success_payload_without_errors():
    assert build_payload(success({"hello": "world"}), None) == {"data": {"hello": "world"}}


def test_custom_error_formatter_receives_context(schema):
    seen = []

    def format_error(error, context):
        seen.append(context)
        return {"msg": error.message.upper()}

    options = GraphQLOptions(schema=schema, format_error=format_error)
    outcome = OperationOutcome.terminal(OutcomeKind.SYNTAX_ERROR, 400, [GraphQLError("bad")])

    assert build_payload(outcome, options, {"user": 1}) == {"errors": [{"msg": "BAD"}]}
    assert seen == [{"user": 1}]


def test_compact_serialization(options):
    response = serialize(success({"hello": "world"}), options)

    assert response.status_code == 200
    assert response.media_type == "application/json"
    assert response.body == b'{"data":{"hello":"world"}}'


def test_pretty_serialization(schema):
    options = GraphQLOptions(schema=schema, pretty=True)

    response = serialize(success({"hello": "world"}), options)

    assert response.body.decode() == json.dumps({"data": {"hello": "world"}}, indent=2)


def test_allow_header_is_sent_with_405():
    outcome = OperationOutcome.from_http_error(MethodNotAllowedError("nope", allow="POST"))

    response = serialize(outcome, None)

    assert response.status_code == 405
    assert response.headers["allow"] == "POST"


@pytest.mark.asyncio
async def test_extensions_receive_request_info(schema):
    seen = {}

    def extensions(info):
        seen["info"] = info
        return {"runTime": 12}

    options = GraphQLOptions(schema=schema, extensions=extensions)
    params = GraphQLParams(query="{ hello }", variables={"a": 1}, operationName="Op")
    outcome = success({"hello": "world"})

    outcome = await apply_extensions(outcome, options, params, {"ctx": True})

    assert outcome.extensions == {"runTime": 12}
    assert seen["info"].document is outcome.document
    assert seen["info"].variables == {"a": 1}
    assert seen["info"].operationName == "Op"
    assert seen["info"].result is outcome.result
    assert seen["info"].context == {"ctx": True}
    assert build_payload(outcome, options) == {
        "data": {"hello": "world"},
        "extensions": {"runTime": 12},
    }


@pytest.mark.asyncio
async def test_async_extensions_are_awaited(schema):
    async def extensions(info):
        return {"eventually": True}

    options = GraphQLOptions(schema=schema, extensions=extensions)

    outcome = await apply_extensions(success({"hello": "world"}), options, GraphQLParams(), None)

    assert outcome.extensions == {"eventually": True}


@pytest.mark.asyncio
async def test_extensions_skipped_without_data(schema):
    calls = []
    options = GraphQLOptions(schema=schema, extensions=lambda info: calls.append(info) or {"a": 1})

    outcome = await apply_extensions(
        OperationOutcome.from_http_error(InvalidVariablesError()), options, GraphQLParams(), None
    )

    assert outcome.extensions is None
    assert calls == []


@pytest.mark.asyncio
async def test_extensions_that_are_not_a_mapping_are_ignored(schema):
    options = GraphQLOptions(schema=schema, extensions=lambda info: "not a mapping")

    outcome = await apply_extensions(success({"hello": "world"}), options, GraphQLParams(), None)

    assert outcome.extensions is None
