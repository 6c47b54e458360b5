"""Mockingbird exception hierarchy.

Shared across the scanner, dispatcher, and ASGI handler so every module
raises and catches the same types.  Per-file scanning problems are never
raised: they are logged and recorded as skip/ignore records instead.
"""

from dataclasses import dataclass


class MockingbirdError(Exception):
    """Base for all mockingbird-specific errors."""


class ConfigurationError(MockingbirdError):
    """Raised when server configuration is invalid.

    Typically raised by ``ServerConfig.validate()`` before the first scan.
    """


class RouteTemplateError(MockingbirdError):
    """Raised when a route template cannot be parsed.

    Only the strict parser raises this; the scanner uses the lenient
    parser and records an ``invalid-route`` ignore instead.
    """

    def __init__(self, template: str, errors: tuple[str, ...]) -> None:
        self.template = template
        self.errors = errors
        super().__init__(f"Invalid route template {template!r}: {'; '.join(errors)}")


@dataclass(frozen=True, slots=True)
class HTTPError(MockingbirdError):
    """An error that maps directly to an HTTP status code.

    Raised at the ASGI boundary when no mock route (and no fallback app)
    handles the request.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no mock route matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
