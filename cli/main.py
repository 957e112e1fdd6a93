# cli/main.py
import click
from core.config import configure_logging
from .commands.db import db
from .commands.bin import bin_group
from .commands.health import health
from .commands.maintenance import maintenance
from .commands.widgets import widgets
from .commands.serve import serve

@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None, help='Database to use (default: DATABASE_URL)')
@click.option('--verbose/--no-verbose', default=False, help='Show debug logging')
@click.pass_context
def cli(ctx, database_url: str, verbose: bool):
    """Book Assembly CLI"""
    configure_logging('DEBUG' if verbose else None)
    ctx.ensure_object(dict)
    ctx.obj['database_url'] = database_url

cli.add_command(db)
cli.add_command(bin_group)
cli.add_command(health)
cli.add_command(maintenance)
cli.add_command(widgets)
cli.add_command(serve)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
