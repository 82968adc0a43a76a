from __future__ import annotations
import json
from inspect import isawaitable
from logging import getLogger
from typing import Any, Mapping
from graphql import GraphQLError
from starlette.responses import JSONResponse
from gqlhttp.interfaces.options import GraphQLOptions
from gqlhttp.interfaces.outcome import OperationOutcome
from gqlhttp.interfaces.schemas import GraphQLParams, RequestInfo


logger = getLogger(__name__)


class PrettyJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return json.dumps(
            content, ensure_ascii=False, allow_nan=False, indent=2
        ).encode("utf-8")


async def apply_extensions(
    outcome: OperationOutcome,
    options: GraphQLOptions,
    params: GraphQLParams,
    context: Any,
) -> OperationOutcome:
    if options.extensions is None or outcome.data is None:
        return outcome
    extensions = options.extensions(
        RequestInfo(
            document=outcome.document,
            variables=params.variables,
            operationName=params.operationName,
            result=outcome.result,
            context=context,
        )
    )
    if isawaitable(extensions):
        extensions = await extensions
    if isinstance(extensions, Mapping):
        return outcome.with_extensions(dict(extensions))
    return outcome


def escalate_status(outcome: OperationOutcome) -> OperationOutcome:
    # A 200 without data means the only trace of a runtime field error is in
    # "errors", which the client must not mistake for success
    if outcome.status_code == 200 and outcome.data is None:
        logger.info("operation produced no data, answering 500")
        return outcome.with_status(500)
    return outcome


def format_error(error: GraphQLError, options: GraphQLOptions | None, context: Any) -> Any:
    if options is not None and options.format_error is not None:
        return options.format_error(error, context)
    return error.formatted


def build_payload(
    outcome: OperationOutcome, options: GraphQLOptions | None, context: Any = None
) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if outcome.has_data_field:
        payload["data"] = outcome.data
    if outcome.errors:
        payload["errors"] = [
            format_error(error, options, context) for error in outcome.errors
        ]
    extensions = outcome.extensions
    if extensions is None and outcome.result is not None:
        extensions = outcome.result.extensions
    if extensions is not None:
        payload["extensions"] = extensions
    return payload


def serialize(
    outcome: OperationOutcome, options: GraphQLOptions | None, context: Any = None
) -> JSONResponse:
    response_class = (
        PrettyJSONResponse if options is not None and options.pretty else JSONResponse
    )
    return response_class(
        build_payload(outcome, options, context),
        status_code=outcome.status_code,
        headers=outcome.headers or None,
        media_type="application/json",
    )

