"""
Exception types raised by the Notify client.

Transport failures (DNS, connection, timeouts) are not wrapped: they surface as
the ``requests.exceptions.RequestException`` raised by the HTTP layer.
"""

from typing import Dict, List, NamedTuple, Optional


class NotifyError(Exception):
    """Base class for every error raised by this package"""


class CredentialError(NotifyError, ValueError):
    """The API key could not be parsed into a credential"""


class EmptyKeyError(CredentialError):
    def __init__(self):
        super().__init__("api key is empty")


class KeyTooShortError(CredentialError):
    def __init__(self, length: int, minimum: int):
        super().__init__(f"api key is too short ({length} characters, need at least {minimum})")
        self.length = length
        self.minimum = minimum


class SigningError(NotifyError):
    """The per-request token could not be signed"""


class DecodingError(NotifyError, ValueError):
    """A success response body did not have the expected JSON shape"""


class ErrorItem(NamedTuple):
    error: str
    message: str


class APIError(NotifyError):
    """
    The API answered with a status code of 400 or above.

    Attributes:
        status_code: HTTP status of the response
        errors: list of ErrorItem(error, message) pairs from the response body
        headers: response headers
    """

    def __init__(self, status_code: int, errors: List[ErrorItem],
                 headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.errors = list(errors)
        self.headers = dict(headers or {})
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return ", ".join(item.message for item in self.errors)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"APIError(status_code={self.status_code}, errors={self.errors!r})"
