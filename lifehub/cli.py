"""Flask CLI commands."""

import click
from flask.cli import with_appcontext
from lifehub.extensions import db
from lifehub.models.organization import Organization, OrganizationMember
from lifehub.models.show import Episode, Show
from lifehub.models.user import User
from lifehub.resources.roles import ADMIN, RoleService

SEED_PASSWORD = 'password123'


def _seed_user(email, display_name):
    user = User.query.filter_by(email=email).first()
    if not user:
        user = User(email=email, display_name=display_name, is_active=True)
        user.set_password(SEED_PASSWORD)
        db.session.add(user)
        db.session.flush()
    return user


@click.command('seed-data')
@with_appcontext
def seed_data():
    """Create tables and seed users, an organization and a sample show."""
    db.create_all()

    alice = _seed_user('alice@example.com', 'Alice')
    bob = _seed_user('bob@example.com', 'Bob')

    org = Organization.query.filter_by(name='Household').first()
    if not org:
        org = Organization(name='Household', creator_id=alice.id)
        db.session.add(org)
        db.session.flush()
        db.session.add_all([
            OrganizationMember(organization_id=org.id, user_id=alice.id, role='owner'),
            OrganizationMember(organization_id=org.id, user_id=bob.id, role='member'),
        ])

    show = Show.query.filter_by(title='Sample Show').first()
    if not show:
        show = Show(title='Sample Show', slug='sample-show')
        db.session.add(show)
        db.session.flush()
        db.session.add_all([
            Episode(show_id=show.id, title='Pilot', season_number=1, episode_number=1),
            Episode(show_id=show.id, title='Second', season_number=1, episode_number=2),
        ])

    db.session.commit()
    RoleService.assign(alice.id, ADMIN)

    click.echo(f'Created organization: {org.name} (ID: {org.id})')
    click.echo(f'Created user: {alice.email} (password: {SEED_PASSWORD}, admin)')
    click.echo(f'Created user: {bob.email} (password: {SEED_PASSWORD})')
    click.echo('Seed data created successfully!')


@click.command('grant-role')
@click.argument('email')
@click.argument('role')
@with_appcontext
def grant_role(email, role):
    """Grant ROLE to the user with EMAIL."""
    user = User.query.filter_by(email=email.strip().lower()).first()
    if not user:
        raise click.ClickException(f'No user with email {email}')
    if RoleService.assign(user.id, role):
        click.echo(f"Granted '{role}' to {user.email}")
    else:
        click.echo(f"{user.email} already has '{role}'")


def register_commands(app):
    """Register CLI commands"""
    app.cli.add_command(seed_data)
    app.cli.add_command(grant_role)
