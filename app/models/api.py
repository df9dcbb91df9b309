"""API configuration schemas - validated at the load boundary."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.query import JsonField


class HttpMethod(StrEnum):
    """Supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


def _check_http_url(url: str) -> str:
    if not url.lower().startswith(("http://", "https://")):
        raise ValueError(f"URL must start with http:// or https://, got {url!r}")
    return url


class RequestType(BaseModel):
    """Named request preset bound to an API."""

    id: str
    name: str
    description: str | None = None
    base_path: str = Field(alias="basePath", default="")
    http_method: HttpMethod = Field(alias="httpMethod", default=HttpMethod.GET)
    default_fields: list[JsonField] = Field(alias="defaultFields", default_factory=list)
    is_hardcoded: bool = Field(alias="isHardcoded", default=False)
    api_id: str | None = Field(alias="apiId", default=None)
    default_body: dict[str, Any] | None = Field(alias="defaultBody", default=None)

    class Config:
        populate_by_name = True
        frozen = True


class ApiConfiguration(BaseModel):
    """Connection settings for one backend API."""

    id: str = Field(min_length=1)
    name: str = ""
    url: str
    query_params: str = Field(alias="queryParams", default="")
    headers: list[tuple[str, str]] = []
    request_types: list[RequestType] = Field(alias="requestTypes", default_factory=list)

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator("url")
    @classmethod
    def _url_scheme(cls, v: str) -> str:
        return _check_http_url(v)

    @field_validator("query_params")
    @classmethod
    def _strip_question_mark(cls, v: str) -> str:
        return v.lstrip("?")

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": data.get("id", "")}
        return data


class DataSourceSettings(BaseModel):
    """Data source JSON settings: legacy single URL plus the API list."""

    url: str | None = None
    query_params: str = Field(alias="queryParams", default="")
    apis: list[ApiConfiguration] = []
    request_types: list[RequestType] = Field(alias="requestTypes", default_factory=list)

    class Config:
        populate_by_name = True

    @field_validator("url")
    @classmethod
    def _url_scheme(cls, v: str | None) -> str | None:
        return _check_http_url(v) if v else None

    @model_validator(mode="after")
    def _unique_api_ids(self) -> "DataSourceSettings":
        seen: set[str] = set()
        for api in self.apis:
            if api.id in seen:
                raise ValueError(f"Duplicate API id: {api.id}")
            seen.add(api.id)
        return self
