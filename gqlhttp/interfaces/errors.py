from __future__ import annotations
from typing import Mapping
from starlette.exceptions import HTTPException


class ConfigurationError(Exception):
    """Raised for setup defects: missing options, bad option providers or a missing schema."""


class GraphQLHTTPError(HTTPException):
    status: int = 500

    def __init__(
        self,
        detail: str,
        headers: Mapping[str, str] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            status_code=status_code or self.status,
            detail=detail,
            headers=dict(headers) if headers else None,
        )

    def __str__(self) -> str:
        return self.detail


class UnsupportedMediaError(GraphQLHTTPError):
    status = 415


class PayloadError(GraphQLHTTPError):
    status = 400


class CharsetError(PayloadError):
    pass


class MalformedBodyError(GraphQLHTTPError):
    status = 400

    def __init__(self, detail: str = "POST body sent invalid JSON.") -> None:
        super().__init__(detail)


class InvalidVariablesError(GraphQLHTTPError):
    status = 400

    def __init__(self, detail: str = "Variables are invalid JSON.") -> None:
        super().__init__(detail)


class MissingQueryError(GraphQLHTTPError):
    status = 400

    def __init__(self, detail: str = "Must provide query string.") -> None:
        super().__init__(detail)


class MethodNotAllowedError(GraphQLHTTPError):
    status = 405

    def __init__(self, detail: str, allow: str = "GET, POST") -> None:
        super().__init__(detail, headers={"Allow": allow})
