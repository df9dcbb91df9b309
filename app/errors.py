"""Query execution errors."""


class JsonApiError(Exception):
    """Base error for query execution."""

    def __init__(self, message: str = "JSON API error"):
        self.message = message
        super().__init__(self.message)


class ConfigError(JsonApiError):
    """Malformed data source configuration."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message)


class UnknownApiError(JsonApiError):
    """Referenced API id is not registered."""

    def __init__(self, api_id: str | None):
        self.api_id = api_id
        super().__init__(f"API with ID '{api_id}' not found")


class InvalidMethodError(JsonApiError):
    """HTTP method outside the supported set."""

    def __init__(self, method: str, supported: tuple[str, ...] = ()):
        self.method = method
        message = f"Invalid method {method}"
        if supported:
            message += f". Supported methods: {', '.join(supported)}"
        super().__init__(message)


class UnsafeUrlError(JsonApiError):
    """URL escapes the configured base path or holds control characters."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"URL path contains unsafe characters: {url}")


class RequestFailedError(JsonApiError):
    """Transport failure or non-2xx response."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        api_id: str | None = None,
        path: str | None = None,
        timeout: bool = False,
    ):
        self.status = status
        self.api_id = api_id
        self.path = path
        self.timeout = timeout
        prefix = f"{api_id}{path or ''}: " if api_id else ""
        suffix = f" (status {status})" if status is not None else ""
        super().__init__(f"{prefix}{message}{suffix}")
        self.reason = message


class ExtractionFailedError(JsonApiError):
    """Expression could not be parsed or evaluated for a field."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Failed to extract field '{field}': {reason}")


class LengthMismatchError(JsonApiError):
    """Extracted fields have different lengths."""

    def __init__(self, lengths: dict[str, int]):
        self.lengths = lengths
        detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
        super().__init__(f"Fields have different lengths: {detail}")


class EmptyResponseError(JsonApiError):
    """Query returned no data to extract from."""

    def __init__(self, ref_id: str | None = None):
        self.ref_id = ref_id
        super().__init__("Query returned empty data" + (f" ({ref_id})" if ref_id else ""))
