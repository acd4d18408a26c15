"""
Notify API client

Send templated SMS and email messages, fetch templates and render previews.

Example:
    client = NotifyClient(api_key)
    client.send_email(
        template_id,
        "someone@example.com",
        reference("your-local-identifier"),
        Personalisation([("user_name", "Sam")]),
    )
"""

from typing import List, Optional

from .config import NotifyConfig
from .credentials import parse_credential
from .models import (SentEmail, SentSMS, Template, TemplatePreview,
                     templates_from_list)
from .payload import (EMAIL, PREVIEW, SMS, EmailOption, PreviewOption,
                      SMSOption, serialize_payload)
from .request import QueryValues, Transport, path_params


class NotifyClient:
    """
    Client for the Notify REST API.

    The API key is parsed once here; every call signs its own token and builds
    its own payload, so one client can be shared between threads.

    Args:
        api_key: Notify API key, ``[name-]<service-id>-<secret>``
        base_url: API root, e.g. a local stub server in tests
        timeout: seconds passed to the HTTP layer, None for no timeout
        session: optional ``requests.Session`` (or compatible) to send with

    Raises:
        CredentialError: if the API key is empty or too short
    """

    def __init__(self, api_key: str, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, session=None):
        self.credential = parse_credential(api_key)
        self.transport = Transport(self.credential, base_url, timeout, session)

    @classmethod
    def from_config(cls, config: NotifyConfig, session=None) -> "NotifyClient":
        return cls(config.api_key, base_url=config.base_url, timeout=config.timeout, session=session)

    @property
    def service_id(self) -> str:
        return self.credential.service_id

    @property
    def base_url(self) -> str:
        return self.transport.base_url

    def get_template_by_id(self, template_id: str) -> Template:
        response = self.transport.get("v2/template/%s", path_params(template_id))
        return Template.from_dict(response.json())

    def get_template_version(self, template_id: str, version: int) -> Template:
        response = self.transport.get("v2/template/%s/version/%s", path_params(template_id, version))
        return Template.from_dict(response.json())

    def get_all_templates(self, template_type: Optional[str] = None) -> List[Template]:
        """List the service's templates, optionally only ``sms`` or ``email`` ones."""
        mutators = []
        if template_type:
            mutators.append(QueryValues([("type", template_type)]))
        response = self.transport.get("v2/templates", *mutators)
        return templates_from_list(response.json("templates"))

    def generate_template_preview(self, template_id: str, *options: PreviewOption) -> TemplatePreview:
        body = serialize_payload((), options, PREVIEW)
        response = self.transport.post("v2/template/%s/preview", body, path_params(template_id))
        return TemplatePreview.from_dict(response.json())

    def send_email(self, template_id: str, email_address: str, *options: EmailOption) -> SentEmail:
        body = serialize_payload(
            [("template_id", template_id), ("email_address", email_address)],
            options,
            EMAIL,
        )
        response = self.transport.post("v2/notifications/email", body)
        return SentEmail.from_dict(response.json())

    def send_sms(self, template_id: str, phone_number: str, *options: SMSOption) -> SentSMS:
        body = serialize_payload(
            [("template_id", template_id), ("phone_number", phone_number)],
            options,
            SMS,
        )
        response = self.transport.post("v2/notifications/sms", body)
        return SentSMS.from_dict(response.json())
