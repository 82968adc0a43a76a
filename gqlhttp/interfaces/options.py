from __future__ import annotations
from typing import Any, Awaitable, Callable, Mapping, Union
from pydantic import BaseModel, ConfigDict, Field
from graphql import GraphQLError, GraphQLSchema
from graphql.validation import ASTValidationRule
from starlette.requests import Request
from gqlhttp.interfaces.schemas import RequestInfo


class GraphQLOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    schema_: GraphQLSchema = Field(alias="schema")
    # Passed as the root value to execution
    root_value: Any = None
    # Defaults to {"request": request} when unset
    context_value: Any = None
    pretty: bool = False
    format_error: Callable[[GraphQLError, Any], Any] | None = None
    # Applied on top of graphql-core's specified_rules
    validation_rules: list[type[ASTValidationRule]] = Field(default_factory=list)
    extensions: (
        Callable[[RequestInfo], Mapping[str, Any] | Awaitable[Mapping[str, Any]]]
        | None
    ) = None
    field_resolver: Callable[..., Any] | None = None

    @property
    def schema(self) -> GraphQLSchema:
        return self.schema_


OptionsData = Union[GraphQLOptions, Mapping[str, Any]]
OptionsProvider = Union[
    OptionsData,
    Callable[[Request], Union[OptionsData, Awaitable[OptionsData]]],
]
