"""
In-memory state of the Notify API stub.

Holds the service credential, the template store, a log of every request the
stub received and any responses forced by a test.
"""

import copy
import re
import threading
import uuid
from datetime import datetime, timezone

from notify_client.credentials import parse_credential

PLACEHOLDER = re.compile(r"\(\(([^()]+)\)\)")

SMS_TEMPLATE_ID = "3b5e6a47-6f0c-4b44-9a39-0f5c4e5fb0d2"
EMAIL_TEMPLATE_ID = "83f8a64f-74ec-4d90-ae48-394a8af3fe7c"


def default_templates():
    return [
        {
            "id": SMS_TEMPLATE_ID,
            "name": "python-client-test-sms",
            "type": "sms",
            "subject": None,
            "body": "Hello ((name)),\n\nToday is ((day)).",
        },
        {
            "id": EMAIL_TEMPLATE_ID,
            "name": "python-client-test-email",
            "type": "email",
            "subject": "Hello ((name))",
            "body": "Hi ((name)),\n\nMy favourite colour is ((colour)).",
        },
    ]


def now_iso():
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class MissingPersonalisation(Exception):
    def __init__(self, missing):
        super().__init__(f"Missing personalisation: {', '.join(missing)}")
        self.missing = missing


def render(text, personalisation):
    """Substitute ((placeholder)) values; raises MissingPersonalisation"""
    if text is None:
        return None
    personalisation = personalisation or {}
    missing = [name for name in PLACEHOLDER.findall(text) if name not in personalisation]
    if missing:
        raise MissingPersonalisation(sorted(set(missing)))
    return PLACEHOLDER.sub(lambda match: str(personalisation[match.group(1)]), text)


class StubState:
    """Thread-safe store behind the stub endpoints"""

    def __init__(self, api_key, templates=None):
        self.credential = parse_credential(api_key)
        self._lock = threading.Lock()
        self._templates = {}
        self._received = []
        self._forced = {}

        for template in default_templates() if templates is None else templates:
            self.add_template(template)

    def add_template(self, template):
        """Store a template; storing an existing id adds a new version"""
        with self._lock:
            versions = self._templates.setdefault(template["id"], [])
            stored = {
                "id": template["id"],
                "name": template.get("name", ""),
                "type": template.get("type", "sms"),
                "created_at": template.get("created_at") or now_iso(),
                "updated_at": None if not versions else now_iso(),
                "created_by": template.get("created_by", "notify-stub@example.com"),
                "version": len(versions) + 1,
                "subject": template.get("subject"),
                "body": template.get("body", ""),
            }
            versions.append(stored)
            return copy.deepcopy(stored)

    def get_template(self, template_id, version=None):
        with self._lock:
            versions = self._templates.get(template_id)
            if not versions:
                return None
            if version is None:
                return copy.deepcopy(versions[-1])
            if version < 1 or version > len(versions):
                return None
            return copy.deepcopy(versions[version - 1])

    def list_templates(self, template_type=None):
        with self._lock:
            latest = [copy.deepcopy(versions[-1]) for versions in self._templates.values()]
        if template_type:
            latest = [template for template in latest if template["type"] == template_type]
        return latest

    def record(self, entry):
        with self._lock:
            self._received.append(entry)

    @property
    def received(self):
        with self._lock:
            return list(self._received)

    def force(self, method, path, status_code, body):
        """Answer every ``method path`` request with the given status and JSON body"""
        with self._lock:
            self._forced[(method.upper(), path)] = (status_code, body)

    def clear_forced(self):
        with self._lock:
            self._forced.clear()

    def forced_response(self, method, path):
        with self._lock:
            return self._forced.get((method.upper(), path))

    @staticmethod
    def new_notification_id():
        return str(uuid.uuid4())
