"""
Notifications Blueprint for the Notify API stub

Nothing is delivered: sends are validated, rendered and echoed back in the
shape the Notify API uses.

Endpoints:
    POST /v2/notifications/sms   - send an SMS from a template
    POST /v2/notifications/email - send an email from a template
"""

import logging

from flask import Blueprint, jsonify, request

from blueprints.auth import error_response, get_state
from src.stub_state import MissingPersonalisation, render

logger = logging.getLogger(__name__)

notifications_bp = Blueprint('notifications', __name__, url_prefix='/v2/notifications')

DEFAULT_FROM_NUMBER = "Notify"
DEFAULT_FROM_EMAIL = "notify@example.com"


def load_send_request(recipient_field, template_type):
    """Validate a send request; returns (data, template, error response)"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, None, error_response(400, "BadRequestError", "Invalid JSON supplied in POST data")

    missing = [name for name in ("template_id", recipient_field) if not data.get(name)]
    if missing:
        return None, None, error_response(400, "ValidationError", f"{missing[0]} is a required property")

    template = get_state().get_template(data["template_id"])
    if template is None:
        return None, None, error_response(400, "BadRequestError", "Template not found")

    if template["type"] != template_type:
        return None, None, error_response(
            400, "BadRequestError", f"{template_type} template is not suitable for {template['type']} notification"
        )

    return data, template, None


def notification_response(data, template, content):
    notification_id = get_state().new_notification_id()
    return {
        "id": notification_id,
        "reference": data.get("reference"),
        "content": content,
        "uri": f"{request.host_url}v2/notifications/{notification_id}",
        "template": {
            "id": template["id"],
            "version": template["version"],
            "uri": f"{request.host_url}v2/template/{template['id']}",
        },
        "scheduled_for": None,
    }


@notifications_bp.route("/sms", methods=["POST"])
def send_sms():
    data, template, error = load_send_request("phone_number", "sms")
    if error:
        return error

    try:
        body = render(template["body"], data.get("personalisation"))
    except MissingPersonalisation as e:
        return error_response(400, "BadRequestError", str(e))

    logger.info(f"SMS accepted for {data['phone_number']} from template {template['id']}")
    return jsonify(notification_response(data, template, {
        "body": body,
        "from_number": data.get("sms_sender_id") or DEFAULT_FROM_NUMBER,
    })), 201


@notifications_bp.route("/email", methods=["POST"])
def send_email():
    data, template, error = load_send_request("email_address", "email")
    if error:
        return error

    try:
        body = render(template["body"], data.get("personalisation"))
        subject = render(template["subject"], data.get("personalisation"))
    except MissingPersonalisation as e:
        return error_response(400, "BadRequestError", str(e))

    logger.info(f"Email accepted for {data['email_address']} from template {template['id']}")
    return jsonify(notification_response(data, template, {
        "subject": subject or "",
        "body": body,
        "from_email": DEFAULT_FROM_EMAIL,
    })), 201
