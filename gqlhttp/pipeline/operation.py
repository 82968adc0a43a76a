from __future__ import annotations
from logging import getLogger
from typing import Any
from graphql import DocumentNode, GraphQLError
from gqlhttp.adapters.graphql_engine import GraphQLEngine, engine as default_engine
from gqlhttp.interfaces.errors import MethodNotAllowedError, MissingQueryError
from gqlhttp.interfaces.options import GraphQLOptions
from gqlhttp.interfaces.outcome import OperationOutcome, OutcomeKind
from gqlhttp.interfaces.schemas import GraphQLParams


logger = getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST")


def check_method(method: str) -> None:
    if method not in ALLOWED_METHODS:
        raise MethodNotAllowedError(
            "GraphQL only supports GET and POST requests.", allow="GET, POST"
        )


def check_schema(options: GraphQLOptions, engine: GraphQLEngine) -> OperationOutcome | None:
    errors = engine.validate_schema(options.schema)
    if errors:
        return OperationOutcome.terminal(OutcomeKind.SCHEMA_INVALID, 500, errors)
    return None


def parse_document(query: str, engine: GraphQLEngine) -> DocumentNode | OperationOutcome:
    try:
        return engine.parse(query)
    except GraphQLError as syntax_error:
        return OperationOutcome.terminal(OutcomeKind.SYNTAX_ERROR, 400, [syntax_error])


def validate_document(
    document: DocumentNode, options: GraphQLOptions, engine: GraphQLEngine
) -> OperationOutcome | None:
    errors = engine.validate(options.schema, document, options.validation_rules)
    if errors:
        return OperationOutcome.terminal(OutcomeKind.VALIDATION_ERRORS, 400, errors)
    return None


def check_operation_kind(
    method: str, document: DocumentNode, params: GraphQLParams, engine: GraphQLEngine
) -> OperationOutcome | None:
    # Only query operations are allowed on GET requests
    if method != "GET":
        return None
    operation = engine.get_operation(document, params.operationName)
    if operation is None or operation.operation.value == "query":
        return None
    return OperationOutcome.from_http_error(
        MethodNotAllowedError(
            f"Can only perform a {operation.operation.value} operation "
            "from a POST request.",
            allow="POST",
        )
    )


async def execute_document(
    document: DocumentNode,
    params: GraphQLParams,
    options: GraphQLOptions,
    context: Any,
    engine: GraphQLEngine,
) -> OperationOutcome:
    arguments = dict(
        root_value=options.root_value,
        context_value=context,
        variables=params.variables,
        operation_name=params.operationName,
        field_resolver=options.field_resolver,
    )
    try:
        exe_context = engine.build_context(options.schema, document, **arguments)
        if isinstance(exe_context, list):
            return OperationOutcome.terminal(
                OutcomeKind.EXECUTION_CONTEXT_ERROR, 400, exe_context
            )
        result = await engine.execute(options.schema, document, **arguments)
    except Exception as context_error:  # pylint: disable=broad-exception-caught
        logger.warning("could not execute operation: %s", context_error)
        return OperationOutcome.terminal(
            OutcomeKind.EXECUTION_CONTEXT_ERROR, 400, [context_error]
        )
    return OperationOutcome.success(result, document)


async def run_operation(
    method: str,
    params: GraphQLParams,
    options: GraphQLOptions,
    context: Any = None,
    engine: GraphQLEngine | None = None,
) -> OperationOutcome:
    engine = engine or default_engine

    outcome = check_schema(options, engine)
    if outcome is not None:
        return outcome

    if not params.query:
        return OperationOutcome.from_http_error(MissingQueryError())

    document = parse_document(params.query, engine)
    if isinstance(document, OperationOutcome):
        return document

    outcome = validate_document(document, options, engine) or check_operation_kind(
        method, document, params, engine
    )
    if outcome is not None:
        return outcome

    return await execute_document(document, params, options, context, engine)
