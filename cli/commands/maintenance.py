import click
from core.services.maintenance_service import MaintenanceService
from ..utils import cli_session, print_heading, print_stat, print_success


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


@click.group()
def maintenance():
    """Repair genre counts and clean up image files"""
    pass


@maintenance.command(name='recount-genres')
@click.option('--user', 'user_id', required=True, help='User whose genres to recount')
@click.pass_context
def recount_genres(ctx, user_id: str):
    """Correct genre book counts that have drifted"""
    with cli_session(ctx.obj.get('database_url')) as session:
        result = MaintenanceService(session, user_id).recount_genres()
    print_success(result.message)


@maintenance.command(name='orphans')
@click.option('--user', 'user_id', required=True, help='User whose image files to check')
@click.option('--delete/--no-delete', default=False, help='Delete the orphaned files')
@click.pass_context
def orphans(ctx, user_id: str, delete: bool):
    """List image files that no book refers to

    Example:
        book-assembly maintenance orphans --user abc123
        book-assembly maintenance orphans --user abc123 --delete
    """
    with cli_session(ctx.obj.get('database_url')) as session:
        service = MaintenanceService(session, user_id)
        report = service.find_orphaned_images()
        if not report.files:
            print_success("No orphaned images found")
            return

        print_heading(f"Orphaned images for {user_id}")
        for orphan in report.files:
            click.echo(click.style(f"  {orphan.storage_path}", fg='white') +
                       click.style(f" ({_format_size(orphan.size_bytes)})", fg='yellow'))
        print_stat("Orphaned images", report.count)
        print_stat("Total size", _format_size(report.total_size))

        if delete:
            deleted = service.delete_orphaned_images()
            print_success(f"Deleted {deleted} orphaned image(s)")
