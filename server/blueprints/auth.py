"""
Authentication Blueprint for the Notify API stub

Every request must carry ``Authorization: Bearer <jwt>`` where the JWT is HS256
signed with the service secret and issued (``iss``) by the service id, as the
real Notify API expects.

The blueprint also records each request for inspection by tests and replays
responses forced with StubState.force().

To register this blueprint in your Flask app:
    from blueprints.auth import auth_bp
    app.register_blueprint(auth_bp)
"""

import logging

import jwt
from flask import Blueprint, current_app, jsonify, request

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

# Tolerated clock difference between client and stub when checking iat
CLOCK_SKEW_SECONDS = 30


def error_response(status_code, error, message):
    """Notify-shaped error body"""
    body = {
        "status_code": status_code,
        "errors": [{"error": error, "message": message}],
    }
    return jsonify(body), status_code


def get_state():
    return current_app.config["NOTIFY_STATE"]


def decode_token(authorization, credential):
    """Return (claims, error message)"""
    if not authorization:
        return None, "Unauthorized, authentication token must be provided"

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        return None, "Unauthorized, authentication bearer scheme must be used"

    try:
        claims = jwt.decode(
            parts[1],
            credential.secret,
            algorithms=["HS256"],
            leeway=CLOCK_SKEW_SECONDS,
            options={"require": ["iss", "iat"]},
        )
    except jwt.PyJWTError as e:
        return None, f"Invalid token: {e}"

    if claims["iss"] != credential.service_id:
        return None, "Invalid token: service not found"

    return claims, None


@auth_bp.before_app_request
def authenticate():
    """Verify the bearer token, record the request and apply forced responses"""
    if request.path == '/health':
        return None

    state = get_state()
    claims, auth_error = decode_token(request.headers.get("Authorization"), state.credential)

    state.record({
        "method": request.method,
        "path": request.path,
        "query": request.args.to_dict(flat=False),
        "headers": dict(request.headers),
        "json": request.get_json(silent=True),
        "claims": claims,
    })

    if auth_error:
        logger.warning(f"Rejected {request.method} {request.path} from {request.remote_addr}: {auth_error}")
        return error_response(403, "AuthError", auth_error)

    forced = state.forced_response(request.method, request.path)
    if forced is not None:
        status_code, body = forced
        logger.info(f"Forced response {status_code} for {request.method} {request.path}")
        return jsonify(body), status_code

    return None
