"""Middleware for caller identity and tenant context."""
from functools import wraps
from flask import g, request, current_app
from erplite.database import get_session
from erplite.services.auth_service import extract_bearer_token, resolve_identity, authorize_business


def load_identity():
    """
    Resolve the caller from the request's bearer token into g.

    Sets g.user (Profile) and g.user_id. Raises AuthorizationError when the
    credential is missing or does not resolve to an active profile.
    Handlers call this only after validating their input, so a malformed
    request is rejected before any identity lookup.
    """
    token = extract_bearer_token(request.headers.get('Authorization'))
    user = resolve_identity(get_session(), token)
    g.user = user
    g.user_id = user.id
    return user


def load_tenant(business_id):
    """
    Check the current caller against `business_id` and expose it as g.business_id.

    Must be called AFTER load_identity.
    """
    business = authorize_business(get_session(), g.user, business_id)
    g.business_id = business.id
    return business


def cors_headers(response):
    """Attach the CORS headers browser clients need to call the handlers."""
    response.headers['Access-Control-Allow-Origin'] = current_app.config.get('CORS_ALLOW_ORIGIN', '*')
    response.headers['Access-Control-Allow-Headers'] = current_app.config.get(
        'CORS_ALLOW_HEADERS', 'authorization, x-client-info, apikey, content-type'
    )
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
    return response


def preflight(f):
    """
    Decorator: answer CORS preflight (OPTIONS) with an empty 200.

    Route must list OPTIONS in its methods.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if request.method == 'OPTIONS':
            return current_app.response_class(status=200)
        return f(*args, **kwargs)
    return decorated_function
