"""Exceptions raised while collecting star ranges."""


class InvalidRangeError(ValueError):
    """Star range or chunk size rejected before any fetch starts."""


class TransportFailure(Exception):
    """A single request attempt failed (non-2xx, network error, malformed body)."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class ApiPayloadError(Exception):
    """GraphQL returned an error payload. Not retried."""

    def __init__(self, errors: list):
        self.errors = errors
        messages = [e.get("message", "unknown") if isinstance(e, dict) else str(e) for e in errors]
        super().__init__("; ".join(messages) or "malformed search payload")


class SheetNameCollision(Exception):
    """Renaming a sheet would clash with an existing sheet name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Sheet name already in use: {name}")
