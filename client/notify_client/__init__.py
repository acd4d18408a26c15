"""
Notify Client

A Python client library for the Notify REST API: send templated SMS and email,
fetch templates and preview rendered templates.
"""

from .client import NotifyClient
from .config import NotifyConfig
from .credentials import Credential, parse_credential
from .errors import (APIError, CredentialError, DecodingError, EmptyKeyError,
                     ErrorItem, KeyTooShortError, NotifyError, SigningError)
from .models import (EmailContent, SentEmail, SentSMS, SMSContent, Template,
                     TemplatePreview, TemplateRef)
from .payload import (CommonOption, EmailOption, Personalisation, PreviewOption,
                      SMSOption, email_reply_to_id, reference, sms_sender_id,
                      status_callback)
from .version import __version__

__all__ = [
    'NotifyClient',
    'NotifyConfig',
    'Credential',
    'parse_credential',
    'NotifyError',
    'CredentialError',
    'EmptyKeyError',
    'KeyTooShortError',
    'SigningError',
    'APIError',
    'ErrorItem',
    'DecodingError',
    'Template',
    'TemplatePreview',
    'TemplateRef',
    'SentSMS',
    'SentEmail',
    'SMSContent',
    'EmailContent',
    'CommonOption',
    'SMSOption',
    'EmailOption',
    'PreviewOption',
    'Personalisation',
    'reference',
    'status_callback',
    'email_reply_to_id',
    'sms_sender_id',
    '__version__',
]
