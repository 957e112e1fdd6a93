import click
from datetime import datetime, UTC
from core.sa.repositories import BookRepository
from core.services.bin_service import BinService
from core.utils.dates import format_date, format_date_for_input
from ..utils import cli_session, print_heading, print_stat, print_success


@click.group(name='bin')
def bin_group():
    """Bin (soft-deleted books) maintenance"""
    pass


@bin_group.command(name='list')
@click.option('--user', 'user_id', required=True, help='User whose bin to show')
@click.pass_context
def list_bin(ctx, user_id: str):
    """Show binned books with the days left before they expire"""
    with cli_session(ctx.obj.get('database_url')) as session:
        entries = BinService(session, user_id).list_bin()
        if not entries:
            click.echo(click.style("The bin is empty", fg='yellow'))
            return
        print_heading(f"Bin for {user_id}")
        for entry in entries:
            color = 'red' if entry.days_remaining == 0 else 'cyan'
            click.echo(
                click.style(f"{entry.book.title}", fg='white') +
                click.style(f" by {entry.book.author}", fg='blue') +
                click.style(f" ({entry.days_remaining} days left)", fg=color) +
                click.style(f" deleted {format_date(entry.book.deleted_at)}", fg='white', dim=True)
            )


@bin_group.command(name='purge-expired')
@click.option('--user', 'user_id', default=None, help='Only purge this user\'s bin (default: every user)')
@click.option('--dry-run/--no-dry-run', default=False, help='List what would be purged without deleting')
@click.pass_context
def purge_expired(ctx, user_id: str, dry_run: bool):
    """Permanently delete books that have been in the bin past the retention period

    Example:
        book-assembly bin purge-expired             # every user
        book-assembly bin purge-expired --dry-run   # show what would go
    """
    now = datetime.now(UTC)
    with cli_session(ctx.obj.get('database_url')) as session:
        user_ids = [user_id] if user_id else BookRepository(session).list_bin_owners()
        total = 0
        for owner in user_ids:
            service = BinService(session, owner)
            if dry_run:
                for book in service.expired(now):
                    click.echo(click.style(f"Would purge: {book.title}", fg='yellow') +
                               click.style(f" ({owner}, binned {format_date_for_input(book.deleted_at)})", fg='blue'))
                    total += 1
            else:
                total += service.purge_expired(now)

    print_stat("Expired books" if dry_run else "Purged books", total)


@bin_group.command(name='empty')
@click.option('--user', 'user_id', required=True, help='User whose bin to empty')
@click.confirmation_option(prompt='Permanently delete every book in the bin?')
@click.pass_context
def empty_bin(ctx, user_id: str):
    """Permanently delete everything in a user's bin"""
    with cli_session(ctx.obj.get('database_url')) as session:
        count = BinService(session, user_id).empty_bin()
    print_success(f"Permanently deleted {count} book{'s' if count != 1 else ''}")
