#!/usr/bin/env python3
"""
Gmail Housekeeping - Delete emails by sender and subject
"""

import argparse
import logging
import sys
from typing import Dict, List, Mapping, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gmail_housekeeping.auth import InputProvider
from gmail_housekeeping.config import DEFAULT_MAX_RESULTS, PREVIEW_COUNT, Settings
from gmail_housekeeping.errors import ConfigurationError, HousekeepingError
from gmail_housekeeping.gmail_service import GmailService
from gmail_housekeeping.models import CleanupConfig, CleanupResult, MessageMatch


logger = logging.getLogger(__name__)

EXAMPLES = """
Examples:
  # Delete emails from specific senders
  gmail-housekeeping --senders "spam@example.com,promos@example.com"

  # Delete emails with specific subjects
  gmail-housekeeping --subjects "Unsubscribe,Special Offer"

  # Combine both criteria
  gmail-housekeeping --senders "spam@example.com" --subjects "Promotion"

  # Dry run to preview
  gmail-housekeeping --senders "spam@example.com" --dry-run

Environment Variables:
  CLIENT_ID               Google OAuth2 Client ID
  CLIENT_SECRET           Google OAuth2 Client Secret
  REDIRECT_URI            OAuth2 redirect URI (default: http://localhost:3000/oauth2callback)
  AUTH_CODE               OAuth2 authorization code (for first-time setup)
  GMAIL_CREDENTIALS_PATH  Client secrets file (default: credentials.json)
  GMAIL_TOKEN_PATH        Saved token file (default: token.json)
  LOG_LEVEL               Logging level (default: WARNING)
"""


class CleanupArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on invalid usage"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\nUse --help for usage information\n")


def split_list(value: str) -> List[str]:
    """Split a comma-separated flag value, dropping blank entries"""
    return [item.strip() for item in value.split(',') if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = CleanupArgumentParser(
        prog='gmail-housekeeping',
        description='Gmail Housekeeping Tool - find and permanently delete emails by sender or subject',
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--senders', type=split_list, default=[], metavar='EMAILS',
                        help='Comma-separated list of sender emails to match')
    parser.add_argument('--subjects', type=split_list, default=[], metavar='SUBJECTS',
                        help='Comma-separated list of subject keywords to match')
    parser.add_argument('--max-results', type=int, default=DEFAULT_MAX_RESULTS, metavar='NUM',
                        help=f'Maximum number of emails to process (default: {DEFAULT_MAX_RESULTS})')
    parser.add_argument('--dry-run', action='store_true',
                        help='Show what would be deleted without actually deleting')
    parser.add_argument('-y', '--yes', action='store_true',
                        help='Delete without asking for confirmation')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def prompt_user(question: str, input_provider: InputProvider) -> bool:
    """
    Helper to get yes / no answer from user.
    """
    yes = {'yes', 'y'}
    no = {'no', 'n'}

    while True:
        try:
            choice = input_provider(f"{question} [y/n]: ").strip().lower()
        except EOFError:
            return False
        if choice in yes:
            return True
        elif choice in no:
            return False


class ConsoleProgress:
    """Progress callback that prints searcher and deleter events to the console"""

    def __init__(self, console: Console):
        self.console = console

    def __call__(self, event: str, data: Dict) -> None:
        if event == 'search_started':
            self.console.print(f"Searching for emails with query: [cyan]{escape(data['query'])}[/cyan]")
            self.console.print(f"Max results: {data['max_results']}")
        elif event == 'fetch_error':
            self.console.print(f"[yellow]Skipping message {data['message_id']}: {escape(data['error'])}[/yellow]")
        elif event == 'would_delete':
            self.console.print(f"[DRY RUN] Would delete {data['total_found']} emails")
        elif event == 'chunk_deleted':
            self.console.print(f"Deleted batch: {data['size']} emails ({data['deleted']}/{data['total_found']})")
        elif event == 'chunk_error':
            self.console.print(f"[red]{escape(data['error'])}[/red]")


def print_preview(console: Console, matches: Sequence[MessageMatch]) -> None:
    """Show the first few matches so the operator can sanity check them"""
    table = Table(title="Preview of matches", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", width=3)
    table.add_column("From", style="cyan", overflow="fold")
    table.add_column("Subject", overflow="fold")
    table.add_column("Snippet", style="dim", overflow="fold")

    for index, match in enumerate(matches[:PREVIEW_COUNT], 1):
        table.add_row(str(index), escape(match.sender), escape(match.subject), escape(match.snippet))

    console.print(table)
    if len(matches) > PREVIEW_COUNT:
        console.print(f"  ... and {len(matches) - PREVIEW_COUNT} more")


def print_summary(console: Console, result: CleanupResult, dry_run: bool) -> None:
    """Print final summary table"""
    title = "Cleanup Preview" if dry_run else "Cleanup Results"
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan", width=15)
    table.add_column("Count", justify="right", style="green", width=10)

    table.add_row("Total found", f"{result.total_found:,}")
    table.add_row("Deleted", f"{result.deleted:,}")
    if result.errors:
        table.add_row("Errors", f"[red]{len(result.errors):,}[/red]")

    console.print(table)
    for error in result.errors:
        console.print(f"  - {escape(error)}")


def run_cleanup(
    config: CleanupConfig,
    settings: Settings,
    console: Console,
    input_provider: InputProvider = input
) -> int:
    """Authenticate, search, confirm and delete; returns the process exit code"""
    gmail = GmailService(settings, console=console, input_provider=input_provider)
    gmail.set_progress_callback(ConsoleProgress(console))

    console.print("Authenticating with Gmail API...")
    gmail.authenticate()
    console.print("[green]Authentication successful![/green]\n")

    matches = gmail.search_messages(config)
    console.print(f"\nFound {len(matches)} matching emails\n")
    if gmail.fetch_errors:
        console.print(f"[yellow]{len(gmail.fetch_errors)} messages could not be fetched and were skipped[/yellow]")

    if not matches:
        console.print("No emails to delete.")
        return 0

    print_preview(console, matches)
    message_ids = [match.id for match in matches]

    if config.dry_run:
        result = gmail.delete_messages(message_ids, dry_run=True)
        print_summary(console, result, dry_run=True)
        console.print("\n[yellow][DRY RUN] No emails were deleted.[/yellow]")
        return 0

    console.print(f"\n[bold red]About to permanently delete {len(matches)} emails.[/bold red]")
    console.print("[red]This action cannot be undone![/red]")
    if not config.assume_yes and not prompt_user("Delete these emails?", input_provider):
        console.print("Aborted. No emails were deleted.")
        return 0

    console.print("\nDeleting emails...")
    result = gmail.delete_messages(message_ids)

    console.print("\n[bold green]Cleanup complete![/bold green]")
    print_summary(console, result, dry_run=False)
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    input_provider: InputProvider = input,
    console: Optional[Console] = None,
    err_console: Optional[Console] = None,
    environ: Optional[Mapping[str, str]] = None
) -> int:
    """Main entry point"""
    console = console or Console()
    err_console = err_console or Console(stderr=True)

    try:
        args = build_parser().parse_args(argv)
    except SystemExit as exit_request:
        return exit_request.code or 0

    config = CleanupConfig(
        senders=args.senders,
        subjects=args.subjects,
        max_results=args.max_results,
        dry_run=args.dry_run,
        assume_yes=args.yes
    )
    try:
        config.validate()
    except ConfigurationError as error:
        err_console.print(f"[red]Error:[/red] {escape(str(error))}")
        err_console.print("Use --help for usage information")
        return 1

    settings = Settings.from_env(environ)
    configure_logging('DEBUG' if args.verbose else settings.log_level)
    logger.debug(f"Running with {config}")

    try:
        return run_cleanup(config, settings, console, input_provider)
    except HousekeepingError as error:
        err_console.print(f"[red]Error:[/red] {escape(str(error))}")
        return 1
    except Exception as error:
        logger.debug("Unhandled error", exc_info=True)
        err_console.print(f"[red]Error:[/red] {escape(str(error))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
