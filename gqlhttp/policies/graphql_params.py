from __future__ import annotations
from typing import Any, Mapping
from starlette.datastructures import QueryParams
from starlette.requests import Request
from gqlhttp.adapters.body_interpreter import MISSING, load_json, parse_body
from gqlhttp.interfaces.errors import InvalidVariablesError
from gqlhttp.interfaces.schemas import GraphQLParams


def first_values(query_params: QueryParams) -> dict[str, str]:
    """Collapse a query string to one value per key, keeping the first one."""
    values: dict[str, str] = {}
    for key, value in query_params.multi_items():
        values.setdefault(key, value)
    return values


def _pick(query: Mapping[str, Any], body: Mapping[str, Any], key: str) -> Any:
    # Any presence in the query string wins, even an empty value
    return query[key] if key in query else body.get(key)


def _text_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _variables(value: Any) -> dict[str, Any] | None:
    if isinstance(value, str):
        try:
            value = load_json(value)
        except ValueError as error:
            raise InvalidVariablesError() from error
    return value if isinstance(value, dict) else None


def resolve_params(query: Mapping[str, Any], body: Mapping[str, Any]) -> GraphQLParams:
    return GraphQLParams(
        query=_text_or_none(_pick(query, body, "query")),
        variables=_variables(_pick(query, body, "variables")),
        operationName=_text_or_none(_pick(query, body, "operationName")),
        raw="raw" in query or "raw" in body,
    )


async def get_graphql_params(request: Request, body: Any = MISSING) -> GraphQLParams:
    body_data = await parse_body(request, body)
    return resolve_params(first_values(request.query_params), body_data)
