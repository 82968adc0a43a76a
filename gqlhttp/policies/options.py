from __future__ import annotations
from inspect import isawaitable
from typing import Any, Mapping
from pydantic import ValidationError
from starlette.requests import Request
from gqlhttp.interfaces.errors import ConfigurationError
from gqlhttp.interfaces.options import GraphQLOptions, OptionsProvider


def _as_options(value: Any) -> GraphQLOptions:
    if isinstance(value, GraphQLOptions):
        return value
    if isinstance(value, Mapping):
        if value.get("schema") is None:
            raise ConfigurationError("GraphQL middleware options must contain a schema.")
        try:
            return GraphQLOptions(**value)
        except ValidationError as error:
            raise ConfigurationError(f"Invalid GraphQL middleware options: {error}") from error
    raise ConfigurationError(
        "GraphQL middleware option function must return an options object "
        "or an awaitable which resolves to an options object."
    )


async def resolve_options(provider: OptionsProvider, request: Request) -> GraphQLOptions:
    options = provider
    if callable(provider) and not isinstance(provider, (GraphQLOptions, Mapping)):
        options = provider(request)
        if isawaitable(options):
            options = await options
    return _as_options(options)


def context_for(options: GraphQLOptions, request: Request) -> Any:
    if options.context_value is not None:
        return options.context_value
    return {"request": request}
