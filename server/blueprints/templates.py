"""
Templates Blueprint for the Notify API stub

Endpoints:
    GET  /v2/template/<id>                     - latest version of a template
    GET  /v2/template/<id>/version/<version>   - a specific version
    GET  /v2/templates[?type=sms|email]        - all templates
    POST /v2/template/<id>/preview             - render with personalisation
"""

import logging

from flask import Blueprint, jsonify, request

from blueprints.auth import error_response, get_state
from src.stub_state import MissingPersonalisation, render

logger = logging.getLogger(__name__)

templates_bp = Blueprint('templates', __name__, url_prefix='/v2')


def not_found():
    return error_response(404, "NoResultFound", "No result found")


@templates_bp.route("/template/<template_id>", methods=["GET"])
def get_template(template_id):
    template = get_state().get_template(template_id)
    if template is None:
        return not_found()
    return jsonify(template)


@templates_bp.route("/template/<template_id>/version/<int:version>", methods=["GET"])
def get_template_version(template_id, version):
    template = get_state().get_template(template_id, version)
    if template is None:
        return not_found()
    return jsonify(template)


@templates_bp.route("/templates", methods=["GET"])
def get_templates():
    template_type = request.args.get("type")
    if template_type and template_type not in ("sms", "email"):
        return error_response(400, "ValidationError", f"type {template_type} is not one of [sms, email]")
    return jsonify({"templates": get_state().list_templates(template_type)})


@templates_bp.route("/template/<template_id>/preview", methods=["POST"])
def preview_template(template_id):
    template = get_state().get_template(template_id)
    if template is None:
        return not_found()

    data = request.get_json(silent=True) or {}
    personalisation = data.get("personalisation") or {}

    try:
        body = render(template["body"], personalisation)
        subject = render(template["subject"], personalisation)
    except MissingPersonalisation as e:
        return error_response(400, "BadRequestError", str(e))

    logger.debug(f"Rendered preview of template {template_id}")
    return jsonify({
        "id": template["id"],
        "type": template["type"],
        "version": template["version"],
        "subject": subject,
        "body": body,
    })
