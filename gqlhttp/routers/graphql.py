from __future__ import annotations
from logging import getLogger
from typing import Any, Awaitable, Callable
from fastapi import APIRouter, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException
from gqlhttp.adapters.graphql_engine import GraphQLEngine
from gqlhttp.interfaces.errors import ConfigurationError, MethodNotAllowedError
from gqlhttp.interfaces.options import GraphQLOptions, OptionsProvider
from gqlhttp.interfaces.outcome import OperationOutcome, OutcomeKind
from gqlhttp.pipeline.operation import check_method, run_operation
from gqlhttp.pipeline.response import apply_extensions, escalate_status, serialize
from gqlhttp.policies.graphql_params import get_graphql_params
from gqlhttp.policies.options import context_for, resolve_options


logger = getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]

# Every method reaches the endpoint so check_method answers the 405 itself
ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def _respond(
    outcome: OperationOutcome, options: GraphQLOptions, context: Any
) -> Response:
    try:
        return serialize(outcome, options, context)
    except Exception as error:  # pylint: disable=broad-exception-caught
        logger.exception("could not render GraphQL response")
        return serialize(
            OperationOutcome.terminal(OutcomeKind.REQUEST_ERROR, 500, [error]), None
        )


def graphql_http(options: OptionsProvider, engine: GraphQLEngine | None = None) -> Endpoint:
    if not options:
        raise ConfigurationError("GraphQL middleware requires options.")

    async def graphql_request(request: Request) -> Response:
        try:
            check_method(request.method)
        except MethodNotAllowedError as error:
            logger.info("rejected %s request to GraphQL endpoint", request.method)
            return serialize(OperationOutcome.from_http_error(error), None)

        options_data = await resolve_options(options, request)
        context = context_for(options_data, request)
        try:
            params = await get_graphql_params(request)
            outcome = await run_operation(
                request.method, params, options_data, context, engine
            )
            outcome = await apply_extensions(outcome, options_data, params, context)
        except HTTPException as error:
            logger.warning("rejected GraphQL request: %s", error.detail)
            outcome = OperationOutcome.from_http_error(error)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.exception("unhandled failure while serving GraphQL request")
            outcome = OperationOutcome.terminal(OutcomeKind.REQUEST_ERROR, 500, [error])

        outcome = escalate_status(outcome)
        if outcome.status_code != 200:
            logger.info(
                "GraphQL request ended with status=%s kind=%s",
                outcome.status_code,
                outcome.kind.value,
            )
        return _respond(outcome, options_data, context)

    return graphql_request


def make_router(
    options: OptionsProvider,
    path: str = "/graphql",
    engine: GraphQLEngine | None = None,
) -> APIRouter:
    router = APIRouter()
    router.add_route(
        path,
        graphql_http(options, engine),
        methods=ROUTE_METHODS,
        include_in_schema=False,
    )
    return router
