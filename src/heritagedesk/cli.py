#!/usr/bin/env python3
"""
HeritageDesk - CLI Entry Point

Inspect, export and import heritage sites through the same draft pipeline
the admin editor uses (hydrate -> edit -> validate -> serialize -> submit).

Usage:
    heritagedesk list --search fort          # List sites matching "fort"
    heritagedesk show 42                     # Hydrated summary of site 42
    heritagedesk export 42 -o site.json      # Save site 42's detail as JSON
    heritagedesk import site.json            # Create a site from a detail file
    heritagedesk import site.json --site-id 42 --approve
    heritagedesk check site.json             # Completion checklist only
"""

import argparse
import json
import logging
import sys

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from heritagedesk import __version__
from heritagedesk.client import HeritageSiteClient, SiteFilters
from heritagedesk.completion import CompletionSummary, evaluate_completion
from heritagedesk.controller import DraftController
from heritagedesk.exceptions import HeritageDeskError, LoadError, SubmitError, ValidationError
from heritagedesk.hydration import hydrate_draft
from heritagedesk.models import Language, SaveOption, SiteDraft
from heritagedesk.utils.config import config

console = Console()
logger = logging.getLogger("HeritageDesk")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_arguments() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="heritagedesk",
        description="HeritageDesk - Heritage site content tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Detail files:
  'export' writes, and 'import'/'check' read, the site detail aggregate:
  {"site": {...}, "visitingHours": [...], "media": [...],
   "ticketTypes": [...], "transportation": [...]}

Examples:
  heritagedesk list --status active
  heritagedesk show 42
  heritagedesk export 42 -o site.json
  heritagedesk import site.json --dry-run
  heritagedesk import site.json --site-id 42 --approve
        """,
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help=f"Backend API root (default: {config.api_base_url})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List heritage sites")
    list_parser.add_argument("--search", default="", help="Name contains")
    list_parser.add_argument("--status", choices=["active", "inactive"], default=None)
    list_parser.add_argument("--experience", default=None, help="Experience filter")
    list_parser.add_argument("--site-type", default=None, help="Site type filter")

    show_parser = subparsers.add_parser("show", help="Show a hydrated site summary")
    show_parser.add_argument("site_id", type=int)

    export_parser = subparsers.add_parser("export", help="Export a site detail as JSON")
    export_parser.add_argument("site_id", type=int)
    export_parser.add_argument(
        "-o", "--output", default=None, help="Output JSON file (default: site_<id>.json)"
    )

    import_parser = subparsers.add_parser("import", help="Create or update a site from a detail file")
    import_parser.add_argument("file", help="Detail JSON file")
    import_parser.add_argument(
        "--site-id", type=int, default=None, help="Update this site instead of creating a new one"
    )
    save_group = import_parser.add_mutually_exclusive_group()
    save_group.add_argument(
        "--approve", action="store_true", help="Submit for review (status pending_review)"
    )
    save_group.add_argument(
        "--draft", action="store_true", help="Save as an inactive draft"
    )
    import_parser.add_argument(
        "--auto-translate",
        action="store_true",
        default=config.auto_translate,
        help="Fill empty overview/history languages from English",
    )
    import_parser.add_argument(
        "--dry-run", action="store_true", help="Print the request without sending it"
    )

    check_parser = subparsers.add_parser("check", help="Completion checklist for a detail file")
    check_parser.add_argument("file", help="Detail JSON file")

    return parser.parse_args()


def print_header() -> None:
    """Print application header."""
    console.print(
        Panel.fit(
            f"[bold blue]HeritageDesk v{__version__}[/bold blue]\n"
            "[dim]Heritage site content tools[/dim]",
            border_style="blue",
        )
    )
    console.print()


def load_detail_file(path: str) -> dict:
    """
    Read a site detail aggregate from a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        Detail dict

    Raises:
        LoadError: File missing, unreadable or not a JSON object
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise LoadError(f"Could not read {path}: {e}") from e

    if not isinstance(data, dict):
        raise LoadError(f"{path} does not contain a site detail object")
    return data


def print_draft_summary(draft: SiteDraft) -> None:
    """Print the main fields of a draft."""
    table = Table(title=escape(draft.name) or "Untitled site", show_header=False, box=None)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    location = ", ".join(part for part in (draft.address, draft.city, draft.state, draft.country) if part)
    table.add_row("Site ID", str(draft.site_id) if draft.site_id is not None else "[dim]new[/dim]")
    table.add_row("Location", escape(location) or "[dim]-[/dim]")
    if draft.latitude and draft.longitude:
        table.add_row("Coordinates", escape(f"{draft.latitude}, {draft.longitude}"))
    table.add_row("Media", f"{len(draft.media)} gallery items")
    table.add_row("Entry", escape(draft.ticketing.entry_type))
    if draft.ticketing.fees:
        fees = "; ".join(f"{fee.visitor_type}: {fee.amount}" for fee in draft.ticketing.fees)
        table.add_row("Fees", escape(fees))
    table.add_row("Transport", str(len(draft.transport)))
    table.add_row("Nearby", str(len(draft.attractions)))
    table.add_row("Save option", escape(draft.admin.save_option))

    console.print(table)
    console.print()


def print_schedule(draft: SiteDraft) -> None:
    """Print the weekly opening hours."""
    table = Table(title="Opening Hours", show_header=True, header_style="bold")
    table.add_column("Day", style="cyan")
    table.add_column("Hours")

    for day in draft.opening_hours:
        hours = f"{day.opening_time} - {day.closing_time}" if day.is_open else "[dim]Closed[/dim]"
        table.add_row(day.day, hours)

    console.print(table)
    console.print()


def print_translations(draft: SiteDraft) -> None:
    """Print which languages have overview/history text and audio."""
    table = Table(title="Languages", show_header=True, header_style="bold")
    table.add_column("Language", style="cyan")
    table.add_column("Overview", justify="center")
    table.add_column("History", justify="center")
    table.add_column("Audio", justify="center")

    audio = {guide.language: guide.is_provided for guide in draft.audio_guides}
    for code in Language.ALL:
        table.add_row(
            Language.get_display_name(code),
            _mark(bool((draft.overview_translations.get(code) or "").strip())),
            _mark(bool((draft.history_translations.get(code) or "").strip())),
            _mark(audio.get(code, False)),
        )

    console.print(table)
    console.print()


def _mark(done: bool) -> str:
    return "[green]yes[/green]" if done else "[dim]-[/dim]"


def print_completion(summary: CompletionSummary) -> None:
    """Print the completion checklist."""
    lines = [f"[green]+[/green] {escape(item)}" for item in summary.completed]
    lines += [f"[yellow]-[/yellow] {escape(item)}" for item in summary.missing]
    console.print(
        Panel.fit(
            "\n".join(lines) or "[dim]Nothing to check[/dim]",
            title=f"Completion {summary.progress:.0%}",
            border_style="green" if summary.is_complete else "yellow",
        )
    )


def run_list(client: HeritageSiteClient, args: argparse.Namespace) -> int:
    """List sites matching the filters."""
    filters = SiteFilters(
        search=args.search,
        status=args.status,
        experience=args.experience,
        site_type=args.site_type,
    )
    with console.status("[dim]Loading sites...[/dim]"):
        result = client.list_sites(filters)

    if not result.success:
        console.print(f"[red]Could not list sites: {escape(str(result.error))}[/red]")
        return 1

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("City", style="green")
    table.add_column("Entry")
    table.add_column("Status", style="yellow")

    for site in result.data:
        table.add_row(
            str(site.get("site_id", "")),
            escape(str(site.get("name_default", "Unknown"))),
            escape(str(site.get("location_city") or "")),
            escape(str(site.get("entry_type") or "")),
            "active" if site.get("is_active") else "inactive",
        )

    console.print(table)
    console.print(f"  Total: {len(result.data)} sites")
    return 0


def run_show(client: HeritageSiteClient, args: argparse.Namespace) -> int:
    """Show the hydrated view of one site."""
    controller = DraftController(client=client)
    with console.status(f"[dim]Loading site {args.site_id}...[/dim]"):
        draft = controller.open(args.site_id)

    print_draft_summary(draft)
    print_schedule(draft)
    print_translations(draft)
    print_completion(controller.completion())
    return 0


def run_export(client: HeritageSiteClient, args: argparse.Namespace) -> int:
    """Write one site's detail aggregate to a JSON file."""
    result = client.get_site_detail(args.site_id)
    if not result.success or not result.data or not result.data.get("site"):
        raise LoadError(result.error or f"Site {args.site_id} has no detail record")

    output = args.output or f"site_{args.site_id}.json"
    with open(output, "w", encoding="utf-8") as f:
        json.dump(result.data, f, indent=2, ensure_ascii=False)

    logger.info(f"Exported heritage site {args.site_id} to {output}")
    console.print(f"[green]Detail saved to: {escape(output)}[/green]")
    return 0


def run_import(client: HeritageSiteClient, args: argparse.Namespace) -> int:
    """Create or update a site from a detail file."""
    detail = load_detail_file(args.file)

    controller = DraftController(client=client)
    if args.site_id is not None:
        controller.open_detail(detail, site_id=args.site_id)
    else:
        controller.open_detail(detail, as_new=True)

    if args.approve:
        controller.set_save_option(SaveOption.APPROVAL)
    elif args.draft:
        controller.set_save_option(SaveOption.DRAFT)

    if args.auto_translate:
        with console.status("[dim]Translating...[/dim]"):
            controller.auto_translate()

    print_draft_summary(controller.draft)
    print_completion(controller.completion())

    if args.dry_run:
        controller.validate()
        console.print("[bold yellow]DRY RUN[/bold yellow] - request not sent\n")
        console.print_json(data=controller.build_request())
        return 0

    result = controller.submit()
    console.print(f"\n[green]{result.message}[/green]")
    if result.site_id is not None:
        console.print(f"Site ID: {result.site_id}")
    return 0


def run_check(args: argparse.Namespace) -> int:
    """Print the completion checklist of a detail file."""
    draft = hydrate_draft(load_detail_file(args.file))
    print_draft_summary(draft)
    summary = evaluate_completion(draft)
    print_completion(summary)
    return 0 if summary.is_complete else 2


def main() -> int:
    """Main entry point."""
    args = parse_arguments()
    setup_logging(args.verbose)

    print_header()

    try:
        if args.command == "check":
            return run_check(args)

        with HeritageSiteClient(base_url=args.base_url) as client:
            if args.command == "list":
                return run_list(client, args)
            if args.command == "show":
                return run_show(client, args)
            if args.command == "export":
                return run_export(client, args)
            if args.command == "import":
                return run_import(client, args)

    except ValidationError as e:
        console.print(f"[red]Validation failed:[/red] {escape(str(e))}")
        return 1
    except LoadError as e:
        console.print(f"[red]Load failed:[/red] {escape(str(e))}")
        return 1
    except SubmitError as e:
        console.print(f"[red]Save failed:[/red] {escape(str(e))}")
        return 1
    except HeritageDeskError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
