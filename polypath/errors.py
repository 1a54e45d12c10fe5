"""Exception types raised while turning a request into word pairs.

Each error carries the HTTP status the endpoint answers with.
"""


class PolypathError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RequestValidationFailed(PolypathError):
    """The client sent something we will not forward upstream."""

    status_code = 400


class ConfigurationError(PolypathError):
    """Required configuration (the API credential) is missing."""


class UpstreamError(PolypathError):
    """The completion API failed or answered without usable content."""


class ReplyValidationError(PolypathError):
    """The model's reply could not be parsed into enough word pairs."""


class WordsFetchError(PolypathError):
    """The flashcard client could not get usable words from the endpoint."""
