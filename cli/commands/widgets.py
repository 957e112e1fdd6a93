import click
from core.services.widget_service import WidgetService
from ..utils import cli_session, print_success


@click.group()
def widgets():
    """Dashboard widget layout commands"""
    pass


@widgets.command()
@click.option('--user', 'user_id', required=True, help='User whose layout to reset')
@click.pass_context
def reset(ctx, user_id: str):
    """Restore the default dashboard layout"""
    with cli_session(ctx.obj.get('database_url')) as session:
        layout = WidgetService(session, user_id).reset()
    print_success(f"Reset dashboard for {user_id} ({len(layout)} widgets)")
