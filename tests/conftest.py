import pytest
from fastapi.testclient import TestClient
from graphql import build_schema
from starlette.requests import Request
from gqlhttp.interfaces.options import GraphQLOptions
from gqlhttp.main import create_app


SDL = """
type Query {
  hello(name: String): String
  thrower: String!
  context: String
}

type Mutation {
  writeTest: Query
}
"""


def _thrower(info):
    raise RuntimeError("Throws!")


def _context(info):
    return info.context["request"].headers.get("x-test", "none")


ROOT = {
    "hello": lambda info, name=None: f"Hello {name or 'World'}",
    "thrower": _thrower,
    "context": _context,
}
ROOT["writeTest"] = lambda info: ROOT


@pytest.fixture
def schema():
    return build_schema(SDL)


@pytest.fixture
def options(schema):
    return GraphQLOptions(schema=schema, root_value=ROOT)


@pytest.fixture
def client(options):
    return TestClient(create_app(options))


def _make_request(
    body=b"", headers=None, method="POST", query_string=b"", chunks=None
):
    raw_headers = [
        (key.lower().encode("latin-1"), value.encode("latin-1"))
        for key, value in (headers or {}).items()
    ]
    scope = {
        "type": "http",
        "method": method,
        "path": "/graphql",
        "query_string": query_string,
        "headers": raw_headers,
    }
    messages = [
        {"type": "http.request", "body": chunk, "more_body": True}
        for chunk in (chunks or [body])
    ]
    messages[-1]["more_body"] = False

    async def receive():
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return Request(scope, receive)


@pytest.fixture
def make_request():
    return _make_request
