"""
Authentication service for the request handlers.

Turns a bearer credential into a caller identity (Profile) and checks that
identity against the business a request targets.
"""
from datetime import datetime, timedelta, timezone
from flask import current_app
from sqlalchemy import or_
from erplite.models import Profile, Business
from erplite.exceptions import AuthorizationError, TenantAccessError
import jwt
import logging

logger = logging.getLogger(__name__)


def issue_access_token(profile_id: str, hours: int = None) -> str:
    """
    Sign an HS256 access token for a profile.

    Args:
        profile_id: Profile id, stored in the `sub` claim
        hours: Lifetime in hours (default JWT_DEFAULT_HOURS)

    Returns:
        str: Encoded JWT
    """
    hours = hours if hours is not None else current_app.config.get('JWT_DEFAULT_HOURS', 24)
    now = datetime.now(timezone.utc)
    payload = {
        'sub': profile_id,
        'iat': now,
        'exp': now + timedelta(hours=hours),
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET'],
        algorithm=current_app.config.get('JWT_ALGORITHM', 'HS256')
    )


def extract_bearer_token(authorization_header):
    """Return the token from an `Authorization: Bearer <token>` header, or None."""
    if not authorization_header:
        return None
    scheme, _, token = authorization_header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def resolve_identity(session, token):
    """
    Resolve a bearer token to an active Profile.

    Raises:
        AuthorizationError: missing, expired or invalid token, or unknown/inactive profile
    """
    if not token:
        raise AuthorizationError()

    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET'],
            algorithms=[current_app.config.get('JWT_ALGORITHM', 'HS256')],
            options={'require': ['sub', 'exp']}
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Auth error: expired token")
        raise AuthorizationError()
    except jwt.InvalidTokenError as e:
        logger.warning(f"Auth error: invalid token ({e})")
        raise AuthorizationError()

    profile = session.query(Profile).filter_by(id=str(payload['sub']), active=True).first()
    if profile is None:
        logger.warning(f"Auth error: no active profile for sub={payload['sub']}")
        raise AuthorizationError()

    return profile


def authorize_business(session, profile, business_id: str) -> Business:
    """
    Check that `profile` may act for `business_id`.

    The owner of a business and profiles attached to it have access; any
    other business id is rejected so a request cannot write into another
    tenant.

    Raises:
        TenantAccessError: business unknown or not accessible by the caller
    """
    business = session.query(Business).filter(
        Business.id == business_id,
        or_(Business.owner_id == profile.id, Business.id == profile.business_id)
    ).first()

    if business is None:
        logger.warning(f"Tenant access denied: user={profile.id} business={business_id}")
        raise TenantAccessError()

    return business
