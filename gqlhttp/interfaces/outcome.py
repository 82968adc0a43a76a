from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Sequence
from graphql import DocumentNode, ExecutionResult, GraphQLError
from starlette.exceptions import HTTPException


class OutcomeKind(str, Enum):
    SCHEMA_INVALID = "schema_invalid"
    SYNTAX_ERROR = "syntax_error"
    VALIDATION_ERRORS = "validation_errors"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    EXECUTION_CONTEXT_ERROR = "execution_context_error"
    REQUEST_ERROR = "request_error"
    SUCCESS = "success"


@dataclass(frozen=True)
class OperationOutcome:
    kind: OutcomeKind
    status_code: int
    errors: tuple[GraphQLError, ...] = ()
    # Only execution outcomes carry a result, and with it a "data" key
    result: ExecutionResult | None = None
    document: DocumentNode | None = None
    headers: dict[str, str] = field(default_factory=dict)
    extensions: dict[str, Any] | None = None

    @classmethod
    def terminal(
        cls,
        kind: OutcomeKind,
        status_code: int,
        errors: Sequence[BaseException],
        headers: dict[str, str] | None = None,
    ) -> OperationOutcome:
        return cls(
            kind=kind,
            status_code=status_code,
            errors=tuple(as_graphql_error(error) for error in errors),
            headers=headers or {},
        )

    @classmethod
    def success(cls, result: ExecutionResult, document: DocumentNode) -> OperationOutcome:
        return cls(
            kind=OutcomeKind.SUCCESS,
            status_code=200,
            errors=tuple(result.errors or ()),
            result=result,
            document=document,
        )

    @classmethod
    def from_http_error(cls, error: HTTPException) -> OperationOutcome:
        kind = (
            OutcomeKind.METHOD_NOT_ALLOWED
            if error.status_code == 405
            else OutcomeKind.REQUEST_ERROR
        )
        return cls.terminal(kind, error.status_code, [error], dict(error.headers or {}))

    @property
    def has_data_field(self) -> bool:
        return self.result is not None

    @property
    def data(self) -> Any:
        return None if self.result is None else self.result.data

    def with_extensions(self, extensions: dict[str, Any]) -> OperationOutcome:
        return replace(self, extensions=extensions)

    def with_status(self, status_code: int) -> OperationOutcome:
        return replace(self, status_code=status_code)


def as_graphql_error(error: BaseException) -> GraphQLError:
    if isinstance(error, GraphQLError):
        return error
    return GraphQLError(str(error), original_error=error)
