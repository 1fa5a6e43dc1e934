"""
Integration tests for the operator CLI commands.
"""

from erplite.models import Profile, Business
from erplite.services.auth_service import resolve_identity


def test_create_business_and_issue_token(app, session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'create-business', '--email', 'Owner@Shop.com', '--full-name', 'Shop Owner', '--name', 'Corner Shop'
    ])
    assert result.exit_code == 0, result.output
    assert 'Business created.' in result.output

    owner = session.query(Profile).filter_by(email='owner@shop.com').one()
    business = session.query(Business).filter_by(owner_id=owner.id).one()
    assert business.name == 'Corner Shop'
    assert owner.business_id == business.id

    result = runner.invoke(args=['issue-token', '--email', 'owner@shop.com'])
    assert result.exit_code == 0, result.output
    assert resolve_identity(session, result.output.strip()).id == owner.id


def test_create_business_rejects_bad_email(app):
    result = app.test_cli_runner().invoke(args=[
        'create-business', '--email', 'nope', '--full-name', 'X', '--name', 'Y'
    ])
    assert result.exit_code != 0
    assert 'Invalid email' in result.output


def test_create_business_rejects_duplicate_email(app, owner1):
    result = app.test_cli_runner().invoke(args=[
        'create-business', '--email', owner1.email, '--full-name', 'X', '--name', 'Y'
    ])
    assert result.exit_code != 0
    assert 'already exists' in result.output


def test_issue_token_unknown_profile(app):
    result = app.test_cli_runner().invoke(args=['issue-token', '--email', 'ghost@nowhere.com'])
    assert result.exit_code != 0


def test_init_db_is_idempotent(app):
    result = app.test_cli_runner().invoke(args=['init-db'])
    assert result.exit_code == 0
    assert 'Database tables created.' in result.output
