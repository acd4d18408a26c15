"""
Request pipeline for the Notify REST API.

Builds the request URL from the base URL, a relative path and any request
mutators, signs a fresh token, performs the call and classifies the response:
a status of 400 or above raises APIError, anything else returns a Response
holding the fully read body.
"""

import json
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote_plus, urljoin

import requests

from .config import NOTIFY_BASE_URL
from .credentials import Credential
from .errors import APIError, DecodingError, ErrorItem
from .token import sign_token
from .version import USER_AGENT

logger = logging.getLogger(__name__)


class RequestTarget:
    """Path and query of a request that has not been sent yet"""

    def __init__(self, path: str, query: Optional[List[Tuple[str, str]]] = None):
        self.path = path
        self.query = list(query or [])


RequestMutator = Callable[[RequestTarget], None]


def path_params(*params: Any) -> RequestMutator:
    """
    Interpolate percent-encoded parameters into the ``%s`` placeholders of the path.

    Example:
        transport.get("v2/template/%s/version/%s", path_params(template_id, 3))
    """
    def mutate(target: RequestTarget) -> None:
        encoded = tuple(quote_plus(str(param), safe="") for param in params)
        target.path = target.path % encoded
    return mutate


class QueryValues:
    """Query parameters added to a request; repeated keys accumulate."""

    def __init__(self, values: Iterable[Tuple[str, str]]):
        self.values = [(key, value) for key, value in values]

    def __call__(self, target: RequestTarget) -> None:
        target.query.extend(self.values)


class Response:
    """Successful response with its body already read."""

    def __init__(self, status_code: int, body: bytes, headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers or {})

    def json(self, *at: str) -> Any:
        """
        Decode the body, descending into nested fields.

        ``response.json("templates")`` returns the value of the ``templates``
        field of the top level object.

        Raises:
            DecodingError: if the body is not valid JSON or a field is missing
        """
        try:
            data = json.loads(self.body)
        except ValueError as e:
            raise DecodingError(f"response body is not valid JSON: {e}") from e

        for field in at:
            if not isinstance(data, dict):
                raise DecodingError(f"expected a JSON object containing {field!r}, got {type(data).__name__}")
            if field not in data:
                raise DecodingError(f"response has no {field!r} field")
            data = data[field]
        return data

    def json_data(self) -> Any:
        return self.json("data")


def _error_items(content: bytes, fallback: str) -> List[ErrorItem]:
    try:
        data = json.loads(content)
        items = [
            ErrorItem(str(item.get("error", "")), str(item.get("message", "")))
            for item in data["errors"]
        ]
    except (ValueError, KeyError, TypeError, AttributeError):
        items = []

    if not items:
        text = content.decode("utf-8", errors="replace").strip()
        items = [ErrorItem("HTTPError", text or fallback)]
    return items


class Transport:
    """
    Sends signed requests to the Notify API.

    Holds only read-only state (credential, base URL, timeout, session), so one
    instance can be shared between threads.

    Args:
        credential: parsed API key
        base_url: API root, defaults to the production Notify URL
        timeout: passed to the HTTP layer unchanged; None means no timeout
        session: object with a requests-compatible ``request`` method,
            defaults to the ``requests`` module
    """

    def __init__(self, credential: Credential, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, session=None):
        self.credential = credential
        base_url = base_url or NOTIFY_BASE_URL
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url
        self.timeout = timeout
        self.session = session if session is not None else requests

    def resolve(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def headers(self) -> Dict[str, str]:
        token = sign_token(self.credential.service_id, self.credential.secret)
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
        }

    def request(self, method: str, path: str, body: Optional[str] = None,
                *mutators: RequestMutator) -> Response:
        target = RequestTarget(path)
        for mutate in mutators:
            mutate(target)

        url = self.resolve(target.path)
        data = body.encode("utf-8") if body is not None else None

        logger.debug(f"{method} {url} query={target.query}")

        with self.session.request(
            method,
            url,
            params=target.query or None,
            data=data,
            headers=self.headers(),
            timeout=self.timeout,
        ) as response:
            status_code = response.status_code
            content = response.content
            headers = dict(response.headers)
            reason = response.reason or ""

        logger.debug(f"{method} {url} -> {status_code}")

        if status_code >= 400:
            raise APIError(status_code, _error_items(content, reason or f"HTTP {status_code}"), headers)

        return Response(status_code, content, headers)

    def get(self, path: str, *mutators: RequestMutator) -> Response:
        return self.request("GET", path, None, *mutators)

    def post(self, path: str, body: str, *mutators: RequestMutator) -> Response:
        return self.request("POST", path, body, *mutators)
