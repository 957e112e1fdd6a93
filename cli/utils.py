import click
from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy.orm import Session

from core.sa.database import Database


@contextmanager
def cli_session(database_url: Optional[str] = None) -> Iterator[Session]:
    """Session for one command, closed when the command finishes"""
    db = Database(database_url)
    session = db.get_session()
    try:
        yield session
    finally:
        session.close()


def print_heading(text: str) -> None:
    click.echo("\n" + click.style(text, fg='blue', bold=True))


def print_stat(label: str, value, color: str = 'cyan') -> None:
    click.echo(click.style(f"{label}: ", fg='blue') + click.style(str(value), fg=color))


def print_success(text: str) -> None:
    click.echo(click.style(text, fg='green'))


def print_error(text: str) -> None:
    click.echo(click.style(text, fg='red'), err=True)
