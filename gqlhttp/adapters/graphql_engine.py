from __future__ import annotations
from inspect import isawaitable
from typing import Any, Callable, Sequence
from graphql import (
    DocumentNode,
    ExecutionResult,
    GraphQLError,
    GraphQLSchema,
    OperationDefinitionNode,
    Source,
    execute,
    get_operation_ast,
    parse,
    specified_rules,
    validate,
    validate_schema,
)
from graphql.execution import ExecutionContext
from graphql.validation import ASTValidationRule


# -------------------------------------------------------------------------------------------
# BASE ADAPTER
# -------------------------------------------------------------------------------------------
class GraphQLEngine:
    source_name: str

    def __init__(self, source_name="GraphQL request"):
        self.source_name = source_name

    def validate_schema(self, schema: GraphQLSchema) -> list[GraphQLError]:
        return list(validate_schema(schema))

    def parse(self, query: str) -> DocumentNode:
        # Raises GraphQLSyntaxError
        return parse(Source(query, self.source_name))

    def validate(
        self,
        schema: GraphQLSchema,
        document: DocumentNode,
        rules: Sequence[type[ASTValidationRule]] = (),
    ) -> list[GraphQLError]:
        return list(validate(schema, document, [*specified_rules, *rules]))

    def get_operation(
        self, document: DocumentNode, operation_name: str | None = None
    ) -> OperationDefinitionNode | None:
        return get_operation_ast(document, operation_name)

    def build_context(
        self,
        schema: GraphQLSchema,
        document: DocumentNode,
        root_value: Any = None,
        context_value: Any = None,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
        field_resolver: Callable[..., Any] | None = None,
    ) -> list[GraphQLError] | ExecutionContext:
        return ExecutionContext.build(
            schema,
            document,
            root_value=root_value,
            context_value=context_value,
            raw_variable_values=variables,
            operation_name=operation_name,
            field_resolver=field_resolver,
        )

    async def execute(
        self,
        schema: GraphQLSchema,
        document: DocumentNode,
        root_value: Any = None,
        context_value: Any = None,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
        field_resolver: Callable[..., Any] | None = None,
    ) -> ExecutionResult:
        result = execute(
            schema,
            document,
            root_value=root_value,
            context_value=context_value,
            variable_values=variables,
            operation_name=operation_name,
            field_resolver=field_resolver,
        )
        if isawaitable(result):
            result = await result
        return result


engine = GraphQLEngine()
