"""
API key parsing.

A Notify API key looks like ``<optional-name>-<service-id>-<secret>`` where the
service id and the secret are both 36 character UUIDs. Only the trailing 73
characters matter; anything before them is a human readable label.
"""

from typing import NamedTuple

from .errors import EmptyKeyError, KeyTooShortError

UUID_LENGTH = 36
# service id + separator + secret
MIN_KEY_LENGTH = 2 * UUID_LENGTH + 1


class Credential(NamedTuple):
    service_id: str
    secret: str

    def __repr__(self) -> str:
        return f"Credential(service_id={self.service_id!r}, secret='***')"


def parse_credential(raw_key: str) -> Credential:
    """
    Split an API key into its service id and signing secret.

    Args:
        raw_key: The API key as issued by Notify

    Returns:
        Credential: the service id and secret

    Raises:
        EmptyKeyError: if the key is empty
        KeyTooShortError: if the key is shorter than 73 characters
    """
    if not raw_key:
        raise EmptyKeyError()
    if len(raw_key) < MIN_KEY_LENGTH:
        raise KeyTooShortError(len(raw_key), MIN_KEY_LENGTH)

    return Credential(
        service_id=raw_key[-MIN_KEY_LENGTH:-(UUID_LENGTH + 1)],
        secret=raw_key[-UUID_LENGTH:],
    )
