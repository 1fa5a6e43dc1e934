"""
Unit tests for bearer token handling and tenant access checks.
"""

import pytest
import jwt
from datetime import datetime, timedelta, timezone
from erplite.exceptions import AuthorizationError, TenantAccessError
from erplite.services.auth_service import (
    issue_access_token, extract_bearer_token, resolve_identity, authorize_business
)


class TestExtractBearerToken:

    @pytest.mark.parametrize('header,expected', [
        ('Bearer abc.def.ghi', 'abc.def.ghi'),
        ('bearer abc', 'abc'),
        ('Basic dXNlcjpwYXNz', None),
        ('Bearer ', None),
        ('', None),
        (None, None),
    ])
    def test_parsing(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestResolveIdentity:

    def test_valid_token(self, app, session, owner1):
        token = issue_access_token(owner1.id)
        assert resolve_identity(session, token).id == owner1.id

    def test_missing_token(self, app, session):
        with pytest.raises(AuthorizationError) as exc:
            resolve_identity(session, None)
        assert exc.value.status_code == 401
        assert exc.value.message == 'Unauthorized'

    def test_garbage_token(self, app, session):
        with pytest.raises(AuthorizationError):
            resolve_identity(session, 'not-a-jwt')

    def test_wrong_secret(self, app, session, owner1):
        token = jwt.encode(
            {'sub': owner1.id, 'exp': datetime.now(timezone.utc) + timedelta(hours=1)},
            'some-other-secret-also-32-bytes-long', algorithm='HS256'
        )
        with pytest.raises(AuthorizationError):
            resolve_identity(session, token)

    def test_expired_token(self, app, session, owner1):
        token = issue_access_token(owner1.id, hours=-1)
        with pytest.raises(AuthorizationError):
            resolve_identity(session, token)

    def test_token_without_expiry_rejected(self, app, session, owner1):
        token = jwt.encode({'sub': owner1.id}, app.config['JWT_SECRET'], algorithm='HS256')
        with pytest.raises(AuthorizationError):
            resolve_identity(session, token)

    def test_inactive_profile(self, app, session, owner1):
        owner1.active = False
        session.commit()
        with pytest.raises(AuthorizationError):
            resolve_identity(session, issue_access_token(owner1.id))

    def test_unknown_profile(self, app, session):
        with pytest.raises(AuthorizationError):
            resolve_identity(session, issue_access_token('no-such-profile'))


class TestAuthorizeBusiness:

    def test_owner_has_access(self, session, owner1, business1):
        assert authorize_business(session, owner1, business1.id).id == business1.id

    def test_staff_member_has_access(self, session, cashier1, business1):
        assert authorize_business(session, cashier1, business1.id).id == business1.id

    def test_other_tenant_denied(self, session, owner1, business2):
        with pytest.raises(TenantAccessError) as exc:
            authorize_business(session, owner1, business2.id)
        assert exc.value.status_code == 403

    def test_unknown_business_denied(self, session, owner1):
        with pytest.raises(TenantAccessError):
            authorize_business(session, owner1, 'no-such-business')
