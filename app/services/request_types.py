"""Request types - named presets that pick an API and request shape."""

from app.models.api import HttpMethod, RequestType
from app.models.query import Query

BUILTIN_REQUEST_TYPES = [
    RequestType(
        id="AggregateData",
        name="Aggregate Data",
        description="Request aggregated data with advanced series configuration",
        base_path="/api/data/batch",
        http_method=HttpMethod.POST,
        is_hardcoded=True,
        api_id="DataService",
    ),
    RequestType(
        id="GetFilterTreeItems",
        name="Get Filter Tree Items",
        description="Request filter tree items using GraphQL",
        base_path="/graphql",
        http_method=HttpMethod.POST,
        is_hardcoded=True,
        api_id="DomainService",
    ),
    RequestType(
        id="GetExperiments",
        name="Get Experiments",
        description="Request experiments by site external ID using GraphQL",
        base_path="/graphql",
        http_method=HttpMethod.POST,
        is_hardcoded=True,
        api_id="DomainService",
    ),
]


def with_builtin_types(custom: list[RequestType] | None) -> list[RequestType]:
    """Built-in types first; configured types may not reuse a built-in id."""
    builtin_ids = {rt.id for rt in BUILTIN_REQUEST_TYPES}
    return [*BUILTIN_REQUEST_TYPES, *(rt for rt in custom or [] if rt.id not in builtin_ids)]


def find_request_type(request_types: list[RequestType], request_type_id: str | None) -> RequestType | None:
    if not request_type_id:
        return None
    return next((rt for rt in request_types if rt.id == request_type_id), None)


def resolve_api_id(query: Query, request_types: list[RequestType]) -> str | None:
    """The query's API, else the API of its request type."""
    if query.api_id:
        return query.api_id
    request_type = find_request_type(request_types, query.request_type)
    return request_type.api_id if request_type else None
