"""Error taxonomy shared by the gateways and the HTTP layer.

Every error carries the HTTP status it is rendered with; the handlers in
main.py turn them into ``{"error": message}`` bodies.
"""


class MediaDeskError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(MediaDeskError):
    """A vendor credential or key is missing or unusable."""


class RequestValidationFailed(MediaDeskError):
    status_code = 400


class UpstreamError(MediaDeskError):
    """A vendor call failed or returned an unusable payload."""


class SynthesisError(UpstreamError):
    """The speech vendor answered without an audio payload."""
