import click
from flask import Flask

from libris.errors import ValidationError
from libris.models.user import ROLE_MEMBER, ROLES
from libris.services.auth_service import AuthService


def register_commands(app: Flask):
    @app.cli.command("create-user")
    @click.argument("name")
    @click.argument("email")
    @click.argument("password")
    @click.option("--role", type=click.Choice(ROLES), default=ROLE_MEMBER, show_default=True)
    def create_user(name, email, password, role):
        """Create an account with any role (use for admins and librarians)."""
        try:
            user = AuthService.register(name=name, email=email.strip().lower(), password=password, role=role)
        except ValidationError as e:
            raise click.ClickException(e.message)
        click.echo(f"Created {user.role} #{user.id} <{user.email}>")
