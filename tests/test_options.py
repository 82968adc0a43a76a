import pytest

from gqlhttp.interfaces.errors import ConfigurationError
from gqlhttp.interfaces.options import GraphQLOptions
from gqlhttp.policies.options import context_for, resolve_options


@pytest.mark.asyncio
async def test_static_options_are_used_as_is(options, make_request):
    assert await resolve_options(options, make_request()) is options


@pytest.mark.asyncio
async def test_mapping_is_turned_into_options(schema, make_request):
    resolved = await resolve_options({"schema": schema, "pretty": True}, make_request())

    assert isinstance(resolved, GraphQLOptions)
    assert resolved.schema is schema
    assert resolved.pretty is True


@pytest.mark.asyncio
async def test_callable_receives_the_request(schema, make_request):
    request = make_request(headers={"x-pretty": "1"})

    def provider(req):
        return {"schema": schema, "pretty": req.headers.get("x-pretty") == "1"}

    assert (await resolve_options(provider, request)).pretty is True


@pytest.mark.asyncio
async def test_async_callable_is_awaited(options, make_request):
    async def provider(req):
        return options

    assert await resolve_options(provider, make_request()) is options


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [None, "options", 42])
async def test_provider_returning_no_options_is_a_setup_defect(value, make_request):
    with pytest.raises(ConfigurationError) as info:
        await resolve_options(lambda req: value, make_request())

    assert "must return an options object" in str(info.value)


@pytest.mark.asyncio
async def test_options_without_schema_are_a_setup_defect(make_request):
    with pytest.raises(ConfigurationError) as info:
        await resolve_options({"pretty": True}, make_request())

    assert str(info.value) == "GraphQL middleware options must contain a schema."


@pytest.mark.asyncio
async def test_options_with_wrong_types_are_a_setup_defect(schema, make_request):
    with pytest.raises(ConfigurationError):
        await resolve_options({"schema": schema, "validation_rules": [42]}, make_request())


def test_context_defaults_to_the_request(options, make_request):
    request = make_request()

    assert context_for(options, request) == {"request": request}


def test_context_value_option_wins(schema, make_request):
    options = GraphQLOptions(schema=schema, context_value={"user": "admin"})

    assert context_for(options, make_request()) == {"user": "admin"}
