"""Maintenance commands for stored refresh tokens."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from blogapi.models.base import utcnow
from blogapi.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh-token housekeeping."""


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Delete refresh tokens whose expiry is in the past (run from cron)."""
    with SQLAlchemyUnitOfWork() as uow:
        removed = uow.refresh_tokens.delete_expired(utcnow())
    click.echo(f"Purged {removed} expired refresh token(s).")
