from typing import Any
from pydantic import BaseModel, ConfigDict, Field
from graphql import DocumentNode, ExecutionResult


class GraphQLParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str | None = None
    variables: dict[str, Any] | None = None
    operationName: str | None = None
    raw: bool = False


class ParsedMediaType(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    parameters: dict[str, str] = Field(default_factory=dict)


class DecodedBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    charset: str


class RequestInfo(BaseModel):
    """Everything an extensions function gets to see about a finished request."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    document: DocumentNode | None = None
    variables: dict[str, Any] | None = None
    operationName: str | None = None
    result: ExecutionResult
    context: Any = None
