from __future__ import annotations
import json
import re
from logging import getLogger
from typing import Any, Mapping
from starlette.datastructures import QueryParams
from starlette.requests import Request
from gqlhttp.adapters.body_decoder import decode_body
from gqlhttp.interfaces.errors import MalformedBodyError
from gqlhttp.interfaces.schemas import ParsedMediaType
from gqlhttp.policies.media_type import parse_media_type


logger = getLogger(__name__)

# An object-opening brace as the first non-space character, where the allowed
# whitespace is the one defined by the JSON grammar
JSON_OBJECT = re.compile(r"^[ \t\n\r]*\{")

# request.state.body is unset unless upstream middleware parsed the body already
MISSING = object()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name}")


def load_json(text: str) -> Any:
    # NaN and Infinity are not part of JSON
    return json.loads(text, parse_constant=_reject_constant)


def parse_json_object(text: str) -> dict[str, Any]:
    if JSON_OBJECT.match(text):
        try:
            return load_json(text)
        except ValueError as error:
            logger.warning("rejected malformed JSON body: %s", error)
            raise MalformedBodyError() from error
    raise MalformedBodyError()


def parse_form(text: str) -> dict[str, Any]:
    # Repeated keys collapse into a list, like a form parser on the client side
    data: dict[str, Any] = {}
    for key, value in QueryParams(text).multi_items():
        if key not in data:
            data[key] = value
        elif isinstance(data[key], list):
            data[key].append(value)
        else:
            data[key] = [data[key], value]
    return data


def interpret_body(text: str, media_type: ParsedMediaType) -> dict[str, Any]:
    if media_type.type == "application/graphql":
        return {"query": text}
    if media_type.type == "application/json":
        return parse_json_object(text)
    if media_type.type == "application/x-www-form-urlencoded":
        return parse_form(text)
    return {}


async def _bytes_stream(data: bytes):
    yield data


async def parse_body(request: Request, body: Any = MISSING) -> dict[str, Any]:
    """
    Extract a mapping of GraphQL parameters from the request body.

    When upstream middleware already consumed the body it leaves the parsed
    value on ``request.state.body``. A mapping is used as is, raw bytes are
    decoded like a fresh body, and a string only counts as the query when the
    request says it is ``application/graphql``. Anything else yields nothing.
    """
    if body is MISSING:
        body = getattr(request.state, "body", MISSING)

    if body is None:
        return {}
    if isinstance(body, Mapping):
        return dict(body)
    if isinstance(body, (list, tuple)):
        return {}

    content_type = request.headers.get("content-type")
    if content_type is None:
        return {}
    media_type = parse_media_type(content_type)

    if isinstance(body, (bytes, bytearray)):
        stream = _bytes_stream(bytes(body))
    elif body is MISSING:
        stream = request.stream()
    elif isinstance(body, str) and media_type.type == "application/graphql":
        return {"query": body}
    else:
        return {}

    decoded = await decode_body(stream, request.headers, media_type)
    return interpret_body(decoded.text, media_type)
