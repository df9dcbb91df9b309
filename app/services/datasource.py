"""JSON data source - runs queries end to end."""

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
from loguru import logger

from app.errors import EmptyResponseError, JsonApiError, UnknownApiError
from app.models.api import ApiConfiguration, RequestType
from app.models.frame import ApiHealth, DataField, Frame, HealthResult, MetricFindValue
from app.models.query import Query, QueryLanguage, TimeRange
from app.repositories import ApiRegistry, RequestCache
from app.services.extraction import FunctionalExpression, expression_for, extract, functional_bindings
from app.services.frames import apply_metric_field, build_frame, group_by
from app.services.macros import TemplateVariables, VariableStore, make_interpolator
from app.services.request_types import resolve_api_id, with_builtin_types
from app.services.value_typer import detect_field_type, parse_values
from json_api_client.dispatcher import RequestDispatcher, validate_method
from settings.datasource import parse_apis

DEFAULT_ERROR_MESSAGE = "Cannot connect to API"


class JsonDataSource:
    """Query execution over the registered APIs."""

    def __init__(
        self,
        registry: ApiRegistry,
        cache: RequestCache,
        dispatcher: RequestDispatcher,
        variables: TemplateVariables | None = None,
        request_types: list[RequestType] | None = None,
        legacy_api: ApiConfiguration | None = None,
    ):
        self._registry = registry
        self._cache = cache
        self._dispatcher = dispatcher
        self._variables = variables or VariableStore()
        self._request_types = with_builtin_types(request_types)
        self._legacy_api = legacy_api
        self._legacy_cache = (
            RequestCache(ApiRegistry([legacy_api]), dispatcher) if legacy_api is not None else None
        )
        logger.debug("JsonDataSource initialized ({} request types)", len(self._request_types))

    @property
    def request_types(self) -> list[RequestType]:
        return self._request_types

    def update_apis(self, apis: list[ApiConfiguration | dict[str, Any]]) -> None:
        """Replace every configured API."""
        self._registry.register(parse_apis(apis))

    async def query(
        self,
        queries: list[Query],
        time_range: TimeRange | None = None,
        scoped_vars: dict[str, Any] | None = None,
    ) -> list[Frame]:
        """Run visible queries concurrently; frames come back in query order."""
        results = await asyncio.gather(
            *(self.do_request(q, time_range, scoped_vars) for q in queries if not q.hide)
        )
        return [frame for frames in results for frame in frames]

    async def do_request(
        self,
        query: Query,
        time_range: TimeRange | None = None,
        scoped_vars: dict[str, Any] | None = None,
    ) -> list[Frame]:
        """Fetch the query's JSON and shape it into frames."""
        scoped = self._scoped_vars(scoped_vars, time_range)
        interpolate = make_interpolator(self._variables, scoped, time_range)

        document = await self.request_json(query, interpolate)
        if document is None or document == "":
            raise EmptyResponseError(query.ref_id)

        specs = [f for f in query.fields if f.json_path]
        bindings = None
        if any(f.language == QueryLanguage.JSONATA for f in specs):
            bindings = functional_bindings(self._variables, time_range, scoped)

        fields = []
        for index, spec in enumerate(specs):
            expression = expression_for(spec, interpolate, bindings)
            if isinstance(expression, FunctionalExpression):
                default_name = f"result{index}" if len(query.fields) > 1 else "result"
            else:
                default_name = expression.last_segment()
            name = interpolate(spec.name or "") or default_name

            values = extract(expression, document, name)
            field_type = spec.type or detect_field_type(values)
            fields.append(DataField(name=name, type=field_type, values=parse_values(values, field_type)))

        frame = build_frame(query.ref_id, fields, ref_id=query.ref_id)
        frames = group_by(frame, query.group_by_field) if query.group_by_field else [frame]
        logger.debug("Query {}: {} frame(s), {} field(s)", query.ref_id, len(frames), len(fields))
        return apply_metric_field(frames, query.metric_field)

    async def request_json(self, query: Query, interpolate: Callable[[str], str]) -> Any:
        """Interpolate the request and send it through the cache."""
        validate_method(query.method)
        api_id = resolve_api_id(query, self._request_types)

        body = query.body or ""
        if query.request_type and query.custom_body:
            body = json.dumps(query.custom_body)
        if query.method == "GET":
            body = ""

        path = interpolate(query.url_path)
        params = [(interpolate(k), interpolate(v)) for k, v in query.params]
        headers = [(interpolate(k), interpolate(v)) for k, v in query.headers]
        body = interpolate(body)

        # No API picked, or none configured: fall back to the legacy URL
        cache = self._cache
        if not api_id or len(self._registry) == 0:
            if self._legacy_cache is None:
                raise UnknownApiError(api_id)
            cache, api_id = self._legacy_cache, self._legacy_api.id

        return await cache.cached_get(
            api_id, query.cache_duration_seconds, query.method, path, params, headers, body
        )

    async def metadata_request(self, query: Query, time_range: TimeRange | None = None) -> Any:
        """Raw JSON for a query, used for previews."""
        interpolate = make_interpolator(self._variables, self._scoped_vars(None, time_range), time_range)
        return await self.request_json(query, interpolate)

    async def metric_find_query(self, query: Query, time_range: TimeRange | None = None) -> list[MetricFindValue]:
        """Options for a query variable: one (text, value) pair per row."""
        frames = await self.do_request(query, time_range)
        if not frames or not frames[0].fields:
            return []

        frame = frames[0]
        label_field = frame.get_field(query.variable_text_field) or frame.fields[0]
        value_field = frame.get_field(query.variable_value_field) or label_field
        return [
            MetricFindValue(text=label_field.values[i], value=value_field.values[i]) for i in range(frame.length)
        ]

    async def test_datasource(self) -> HealthResult:
        """Check that every configured API answers a baseline GET."""
        apis = self._registry.list()
        if not apis:
            return await self._test_legacy()

        results = await asyncio.gather(*(self._test_api(api) for api in apis))
        ok = [r for r in results if r.status == "success"]
        failed = [r for r in results if r.status == "error"]
        failures = ", ".join(f"{r.api_name} ({r.message})" for r in failed)

        if not failed:
            message = f"All APIs connected successfully: {', '.join(r.api_name for r in ok)}"
            return HealthResult(status="success", message=message, details=results)
        if ok:
            message = f"Some APIs connected successfully: {', '.join(r.api_name for r in ok)}. Failed: {failures}"
            return HealthResult(status="success", message=message, details=results)
        return HealthResult(status="error", message=f"All API connections failed: {failures}", details=results)

    async def _test_api(self, api: ApiConfiguration) -> ApiHealth:
        try:
            status = await self._dispatcher.test_api(api)
        except JsonApiError as e:
            logger.warning("Health check failed for {}: {}", api.id, e.message)
            return ApiHealth(api.id, api.name, "error", getattr(e, "reason", e.message) or DEFAULT_ERROR_MESSAGE)

        if 200 <= status < 300:
            return ApiHealth(api.id, api.name, "success", "Success")
        logger.warning("Health check failed for {}: HTTP {}", api.id, status)
        return ApiHealth(api.id, api.name, "error", httpx.codes.get_reason_phrase(status) or DEFAULT_ERROR_MESSAGE)

    async def _test_legacy(self) -> HealthResult:
        if self._legacy_api is None:
            return HealthResult(status="error", message="No APIs configured")

        result = await self._test_api(self._legacy_api)
        if result.status == "success":
            return HealthResult(status="success", message="Success", details=[result])
        return HealthResult(status="error", message=f"JSON API: {result.message}", details=[result])

    @staticmethod
    def _scoped_vars(scoped_vars: dict[str, Any] | None, time_range: TimeRange | None) -> dict[str, Any]:
        scoped = dict(scoped_vars or {})
        if time_range is not None:
            scoped.setdefault("__from", str(time_range.from_ms))
            scoped.setdefault("__to", str(time_range.to_ms))
        return scoped
