"""
Administrative commands for the account store.

.. code-block:: bash

   $ AUTH_DATABASE_URI=sqlite:///accounts.db authengine init-db
   $ authengine create-account --username jbloggs --email joe@bloggs.com
   $ authengine confirm-account jbloggs
   $ authengine reset-password jbloggs

"""

import click

from . import app_logging, config
from .directory import AccountDirectory


@click.group()
@click.option('--database-uri', default=None,
              help='Overrides AUTH_DATABASE_URI.')
@click.option('--log-level', default=config.LOG_LEVEL)
@click.pass_context
def cli(ctx: click.Context, database_uri: str, log_level: str) -> None:
    """Manage authengine accounts."""
    app_logging.setup_logger(level=log_level)
    ctx.obj = AccountDirectory.from_config(database_uri)


@cli.command('init-db')
@click.pass_obj
def init_db(directory: AccountDirectory) -> None:
    """Create the account and session tables."""
    directory.db.create_all()
    click.echo('Created tables')


@cli.command('create-account')
@click.option('--username', prompt='Username')
@click.option('--email', prompt='Email address')
@click.option('--password', prompt='Password', hide_input=True,
              confirmation_prompt=True)
@click.pass_obj
def create_account(directory: AccountDirectory, username: str, email: str,
                   password: str) -> None:
    """Create a new, unconfirmed account."""
    if not directory.create_account(username, email, password):
        raise click.ClickException('Username or email is taken or invalid')
    account = directory.lookup_by_username(username)
    click.echo(f'Created account {account.id}; confirmation token: '
               f'{account.pending_confirmation_token}')


@cli.command('confirm-account')
@click.argument('username')
@click.pass_obj
def confirm_account(directory: AccountDirectory, username: str) -> None:
    """Confirm an account without its confirmation token."""
    account = directory.lookup_by_username(username)
    if account is None:
        raise click.ClickException(f'No such account: {username}')
    token = account.pending_confirmation_token
    if token is None:
        click.echo('Already confirmed')
        return
    if not account.confirm(token):
        raise click.ClickException('Confirmation failed')
    click.echo(f'Confirmed account {account.id}')


@cli.command('reset-password')
@click.argument('username')
@click.pass_obj
def reset_password(directory: AccountDirectory, username: str) -> None:
    """Reset an account's password and end its sessions."""
    account = directory.lookup_by_username(username)
    if account is None:
        raise click.ClickException(f'No such account: {username}')
    click.echo(account.reset_password())


if __name__ == '__main__':
    cli()
