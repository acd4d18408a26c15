"""Response records returned by the Notify API"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import DecodingError


def _object(data: Any, what: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DecodingError(f"expected {what} to be a JSON object, got {type(data).__name__}")
    return data


def _int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodingError(f"expected {key!r} to be an integer, got {value!r}")
    return value


def _str(data: Dict[str, Any], key: str, default: Optional[str] = "") -> Optional[str]:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise DecodingError(f"expected {key!r} to be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class Template:
    id: str = ""
    name: str = ""
    type: str = ""
    created_at: str = ""
    updated_at: Optional[str] = None
    created_by: str = ""
    version: int = 0
    subject: Optional[str] = None
    body: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Template":
        data = _object(data, "template")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            type=_str(data, "type"),
            created_at=_str(data, "created_at"),
            updated_at=_str(data, "updated_at", None),
            created_by=_str(data, "created_by"),
            version=_int(data, "version"),
            subject=_str(data, "subject", None),
            body=_str(data, "body"),
        )


def templates_from_list(data: Any) -> List[Template]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodingError(f"expected a list of templates, got {type(data).__name__}")
    return [Template.from_dict(item) for item in data]


@dataclass(frozen=True)
class TemplatePreview:
    id: str = ""
    type: str = ""
    version: int = 0
    subject: Optional[str] = None
    body: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "TemplatePreview":
        data = _object(data, "template preview")
        return cls(
            id=_str(data, "id"),
            type=_str(data, "type"),
            version=_int(data, "version"),
            subject=_str(data, "subject", None),
            body=_str(data, "body"),
        )


@dataclass(frozen=True)
class TemplateRef:
    id: str = ""
    uri: str = ""
    version: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "TemplateRef":
        data = _object(data, "template")
        return cls(
            id=_str(data, "id"),
            uri=_str(data, "uri"),
            version=_int(data, "version"),
        )


@dataclass(frozen=True)
class SMSContent:
    body: str = ""
    from_number: str = ""


@dataclass(frozen=True)
class EmailContent:
    subject: str = ""
    body: str = ""
    from_email: str = ""


@dataclass(frozen=True)
class SentSMS:
    id: str = ""
    uri: str = ""
    reference: Optional[str] = None
    scheduled_for: Optional[str] = None
    content: SMSContent = field(default_factory=SMSContent)
    template: TemplateRef = field(default_factory=TemplateRef)

    @classmethod
    def from_dict(cls, data: Any) -> "SentSMS":
        data = _object(data, "response")
        content = _object(data.get("content"), "content")
        return cls(
            id=_str(data, "id"),
            uri=_str(data, "uri"),
            reference=_str(data, "reference", None),
            scheduled_for=_str(data, "scheduled_for", None),
            content=SMSContent(
                body=_str(content, "body"),
                from_number=_str(content, "from_number"),
            ),
            template=TemplateRef.from_dict(data.get("template")),
        )


@dataclass(frozen=True)
class SentEmail:
    id: str = ""
    uri: str = ""
    reference: Optional[str] = None
    scheduled_for: Optional[str] = None
    content: EmailContent = field(default_factory=EmailContent)
    template: TemplateRef = field(default_factory=TemplateRef)

    @classmethod
    def from_dict(cls, data: Any) -> "SentEmail":
        data = _object(data, "response")
        content = _object(data.get("content"), "content")
        return cls(
            id=_str(data, "id"),
            uri=_str(data, "uri"),
            reference=_str(data, "reference", None),
            scheduled_for=_str(data, "scheduled_for", None),
            content=EmailContent(
                subject=_str(content, "subject"),
                body=_str(content, "body"),
                from_email=_str(content, "from_email"),
            ),
            template=TemplateRef.from_dict(data.get("template")),
        )
