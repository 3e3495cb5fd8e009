"""
Errors raised by the machine learning client.

Each stage of a request has its own error so callers can tell
"no server reachable" apart from "server reachable but declined".
"""
from typing import Any, Optional

ERROR_PREFIX = "Machine learning request"


class MachineLearningError(Exception):
    """Base class for all machine learning client errors."""
    pass


class NoAvailableServer(MachineLearningError):
    """Raised when no candidate server passed its liveness probe."""

    def __init__(self, urls: str):
        self.urls = urls
        super().__init__(
            f"{ERROR_PREFIX}: no machine learning server found in '{urls}'."
        )


class InvalidInput(MachineLearningError):
    """Raised when a payload is neither an image nor a text payload."""

    def __init__(self, payload: Any = None):
        self.payload = payload
        super().__init__(f"{ERROR_PREFIX}: invalid input {payload!r}")


class DispatchFailed(MachineLearningError):
    """Raised when the POST to /predict fails at the transport level."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(f'{ERROR_PREFIX} to "{url}" failed with {cause}')


class PredictionRejected(MachineLearningError):
    """Raised when the server answers a prediction with status >= 400."""

    def __init__(self, request: str, status_code: int, reason: str):
        self.request = request
        self.status_code = status_code
        self.reason = reason
        super().__init__(
            f"{ERROR_PREFIX} '{request}' failed with status {status_code}: {reason}"
        )


class MalformedResponse(MachineLearningError):
    """Raised when a successful response does not match the expected shape."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(
            f'{ERROR_PREFIX} to "{url}" returned a malformed response: {cause}'
        )
