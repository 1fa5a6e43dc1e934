"""
Flask CLI commands for operators.

Commands:
- flask init-db: Create all tables
- flask create-business: Create an owner profile and its business
- flask issue-token: Print a bearer token for a profile
"""

import click
import re
from sqlalchemy.exc import SQLAlchemyError
from erplite.database import get_session, create_schema
from erplite.models import Profile, Business
from erplite.services.auth_service import issue_access_token

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create all tables."""
        create_schema()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('create-business')
    @click.option('--email', prompt=True, help='Owner email address')
    @click.option('--full-name', prompt=True, help='Owner full name')
    @click.option('--name', prompt='Business name', help='Business name')
    def create_business(email, full_name, name):
        """Create an owner profile and the business it owns."""
        email = email.strip().lower()

        if not re.match(EMAIL_PATTERN, email):
            raise click.ClickException('Invalid email. Use user@example.com')

        if not name.strip():
            raise click.ClickException('Business name is required.')

        session = get_session()
        if session.query(Profile).filter_by(email=email).first():
            raise click.ClickException(f'A profile with email {email} already exists.')

        try:
            owner = Profile(email=email, full_name=full_name.strip())
            session.add(owner)
            session.flush()

            business = Business(name=name.strip(), owner_id=owner.id)
            session.add(business)
            session.flush()

            owner.business_id = business.id
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise click.ClickException(f'Could not create business: {e}')

        click.echo(click.style('Business created.', fg='green', bold=True))
        click.echo(f'   Business ID: {business.id}')
        click.echo(f'   Owner ID: {owner.id}')

    @app.cli.command('issue-token')
    @click.option('--email', required=True, help='Profile email address')
    @click.option('--hours', type=int, default=None, help='Token lifetime in hours')
    def issue_token(email, hours):
        """Print a bearer token for a profile."""
        session = get_session()
        profile = session.query(Profile).filter_by(email=email.strip().lower(), active=True).first()
        if profile is None:
            raise click.ClickException(f'No active profile with email {email}.')

        click.echo(issue_access_token(profile.id, hours=hours))
