"""
Request payloads and the options that extend them.

A payload is an ordered tuple of ``PayloadItem(field, value)`` entries. Options
are small immutable values that return a new payload with their fields
appended. Each send operation only accepts options implementing its role:

    SMSOption      -> send_sms
    EmailOption    -> send_email
    PreviewOption  -> generate_template_preview

``CommonOption`` implements both the SMS and the email role. ``Personalisation``
implements all three.
"""

import json
from typing import (Any, Callable, Dict, Iterable, NamedTuple, Protocol,
                    Sequence, Tuple, Union, runtime_checkable)


class PayloadItem(NamedTuple):
    field: str
    value: Any


Payload = Tuple[PayloadItem, ...]
PayloadUpdater = Callable[[Payload], Payload]


@runtime_checkable
class SMSOption(Protocol):
    def update_sms_payload(self, payload: Payload) -> Payload: ...


@runtime_checkable
class EmailOption(Protocol):
    def update_email_payload(self, payload: Payload) -> Payload: ...


@runtime_checkable
class PreviewOption(Protocol):
    def update_preview_payload(self, payload: Payload) -> Payload: ...


class _Role(NamedTuple):
    name: str
    protocol: type
    method: str


SMS = _Role("sms", SMSOption, "update_sms_payload")
EMAIL = _Role("email", EmailOption, "update_email_payload")
PREVIEW = _Role("preview", PreviewOption, "update_preview_payload")


class CommonOption:
    """An option valid for both SMS and email sends"""

    __slots__ = ("_update", "_name")

    def __init__(self, update: PayloadUpdater, name: str = "option"):
        self._update = update
        self._name = name

    def update_sms_payload(self, payload: Payload) -> Payload:
        return self._update(payload)

    def update_email_payload(self, payload: Payload) -> Payload:
        return self._update(payload)

    def __repr__(self) -> str:
        return f"CommonOption({self._name})"


class SMSOnlyOption:
    __slots__ = ("_update", "_name")

    def __init__(self, update: PayloadUpdater, name: str = "option"):
        self._update = update
        self._name = name

    def update_sms_payload(self, payload: Payload) -> Payload:
        return self._update(payload)

    def __repr__(self) -> str:
        return f"SMSOnlyOption({self._name})"


class EmailOnlyOption:
    __slots__ = ("_update", "_name")

    def __init__(self, update: PayloadUpdater, name: str = "option"):
        self._update = update
        self._name = name

    def update_email_payload(self, payload: Payload) -> Payload:
        return self._update(payload)

    def __repr__(self) -> str:
        return f"EmailOnlyOption({self._name})"


def _append(*items: PayloadItem) -> PayloadUpdater:
    def update(payload: Payload) -> Payload:
        return tuple(payload) + items
    return update


class Personalisation:
    """
    Placeholder values substituted into a template, e.g. a name or an amount.

    Built from (key, value) pairs or a mapping. Sent as a single nested
    ``personalisation`` object; when a key is repeated the last value is used.

    Example:
        Personalisation([("user_name", "Sam"), ("amount_owing", "$205.20")])
    """

    __slots__ = ("_items",)

    def __init__(self, items: Union[Iterable[Tuple[str, Any]], Dict[str, Any]] = ()):
        if isinstance(items, dict):
            items = items.items()
        self._items = tuple((key, value) for key, value in items)

    @property
    def items(self) -> Tuple[Tuple[str, Any], ...]:
        return self._items

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._items)

    def update_payload(self, payload: Payload) -> Payload:
        return tuple(payload) + (PayloadItem("personalisation", self.as_dict()),)

    def update_sms_payload(self, payload: Payload) -> Payload:
        return self.update_payload(payload)

    def update_email_payload(self, payload: Payload) -> Payload:
        return self.update_payload(payload)

    def update_preview_payload(self, payload: Payload) -> Payload:
        return self.update_payload(payload)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Personalisation):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        # values may be lists or mappings; keys are always hashable
        return hash(tuple(key for key, _ in self._items))

    def __repr__(self) -> str:
        return f"Personalisation({list(self._items)!r})"


def reference(reference_id: str) -> CommonOption:
    """A unique identifier you create for a single notification or a batch of them."""
    return CommonOption(_append(PayloadItem("reference", reference_id)), "reference")


def status_callback(url: str, bearer_token: str) -> CommonOption:
    """URL that receives delivery receipts, and the bearer token it is called with."""
    return CommonOption(
        _append(
            PayloadItem("status_callback_url", url),
            PayloadItem("status_callback_bearer_token", bearer_token),
        ),
        "status_callback",
    )


def email_reply_to_id(reply_to_id: str) -> EmailOnlyOption:
    """The id of the reply-to address that receives replies from users."""
    return EmailOnlyOption(_append(PayloadItem("email_reply_to_id", reply_to_id)), "email_reply_to_id")


def sms_sender_id(sender_id: str) -> SMSOnlyOption:
    """The id of the sender shown on a text message."""
    return SMSOnlyOption(_append(PayloadItem("sms_sender_id", sender_id)), "sms_sender_id")


def payload_to_dict(payload: Payload) -> Dict[str, Any]:
    """Collapse payload items into a dict; the last write for a field wins."""
    fields = {}
    for item in payload:
        fields[item.field] = item.value
    return fields


def apply_options(role: _Role, options: Sequence[Any], payload: Payload = ()) -> Payload:
    """
    Fold options over a payload in the order given.

    Raises:
        TypeError: if an option does not implement the role
    """
    for option in options:
        if not isinstance(option, role.protocol):
            raise TypeError(f"{option!r} is not a valid {role.name} option")
        payload = getattr(option, role.method)(payload)
    return payload


def build_payload(base_fields: Sequence[Tuple[str, Any]], options: Sequence[Any],
                  role: _Role) -> Dict[str, Any]:
    """
    Build the request body for an operation.

    The base fields come first and are re-applied after the options so that no
    option can replace them.
    """
    base = tuple(PayloadItem(field, value) for field, value in base_fields)
    fields = payload_to_dict(apply_options(role, options, base))
    fields.update(payload_to_dict(base))
    return fields


def serialize_payload(base_fields: Sequence[Tuple[str, Any]], options: Sequence[Any],
                      role: _Role) -> str:
    return json.dumps(build_payload(base_fields, options, role))
