import click
from core.sa.repositories import BookRepository
from core.utils.library_health import (
    ISSUE_FIELDS, HEALTH_FIELDS, analyze_library_health, get_books_with_issues, get_completeness_rating,
)
from ..utils import cli_session, print_heading, print_stat

RATING_COLORS = {'green': 'green', 'amber': 'yellow', 'red': 'red'}


@click.command()
@click.option('--user', 'user_id', required=True, help='User whose library to check')
@click.option('--limit', default=10, help='Number of books with gaps to list')
@click.pass_context
def health(ctx, user_id: str, limit: int):
    """Report missing metadata across a user's library"""
    with cli_session(ctx.obj.get('database_url')) as session:
        report = analyze_library_health(BookRepository(session).list_books(user_id))

        rating = get_completeness_rating(report.completeness_score)
        print_heading("Library health")
        print_stat("Books", report.total_books)
        print_stat("Completeness", f"{report.completeness_score}% ({rating['label']})",
                   RATING_COLORS[rating['colour']])
        print_stat("Issues", report.total_issues)
        print_stat("Fixable by lookup", report.fixable_books)

        print_heading("Missing fields")
        for bucket, field_name in ISSUE_FIELDS.items():
            count = len(report.issues[bucket])
            click.echo(click.style(f"  {HEALTH_FIELDS[field_name].label}: ", fg='blue') +
                       click.style(str(count), fg='yellow' if count else 'green'))

        books = get_books_with_issues(report)[:limit]
        if books:
            print_heading("Books needing attention")
            for entry in books:
                missing = ", ".join(field.label for field in entry.missing)
                click.echo(click.style(f"  {entry.book.title}", fg='white') +
                           click.style(f" - missing {missing}", fg='yellow'))
