import click
from core.sa.database import Database
from ..utils import print_success


@click.group()
def db():
    """Database commands"""
    pass


@db.command()
@click.pass_context
def init(ctx):
    """Create any missing tables"""
    database = Database(ctx.obj.get('database_url'))
    database.init_db()
    print_success(f"Database ready at {database.connection_string}")


@db.command()
@click.confirmation_option(prompt='This deletes every book, genre, series and wishlist item. Continue?')
@click.pass_context
def drop(ctx):
    """Drop all tables"""
    database = Database(ctx.obj.get('database_url'))
    database.drop_db()
    print_success("All tables dropped")
