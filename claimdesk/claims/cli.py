#!/usr/bin/env python3
"""
CLI for filing and tracking claims.

Usage:
    claimdesk list [--status under_review] [--search POL-984632]
    claimdesk show CLM-385721 [--export]
    claimdesk file --policy-number POL-1 --claim-type auto --incident-date 2025-03-01 \\
        --description "Rear-end collision" --amount 1000 --documents photo.jpg
    claimdesk stats
    claimdesk greet --name "Jane Doe" --role underwriter
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..storage import ClaimStore, SQLiteStorage, get_claim_store
from ..utils.config import get_settings
from ..utils.log import setup_logging
from .processing import ClaimProcessor
from .profile import AgentProfile, format_role_type, format_specialty, greeting
from .schema import Claim, ClaimStatus, ClaimType, PaymentStatus
from .tracking import (
    format_claim_status,
    format_claim_type,
    format_payment_status,
    search_claims,
    status_message,
    summarize_claims,
)

console = Console()

STATUS_STYLES = {
    ClaimStatus.SUBMITTED: "blue",
    ClaimStatus.UNDER_REVIEW: "yellow",
    ClaimStatus.ADDITIONAL_INFO: "magenta",
    ClaimStatus.APPROVED: "green",
    ClaimStatus.DENIED: "red",
    ClaimStatus.PAID: "bold green",
}

PAYMENT_STYLES = {
    PaymentStatus.PENDING: "yellow",
    PaymentStatus.PROCESSING: "blue",
    PaymentStatus.PAID: "green",
    PaymentStatus.FAILED: "red",
}


def format_datetime(value: Optional[datetime]) -> str:
    """Format a datetime for display."""
    if not value:
        return "N/A"
    return value.strftime("%b %d, %Y %H:%M")


def open_store(storage_path: Optional[str]) -> ClaimStore:
    """Default store, or one over an explicit SQLite file."""
    if storage_path:
        return ClaimStore(SQLiteStorage(Path(storage_path)), key=get_settings().storage_key)
    return get_claim_store()


def make_claims_table(claims: List[Claim]) -> Table:
    """Create the claim tracking table."""
    table = Table(
        title="Claim Tracking",
        box=box.ROUNDED,
        header_style="bold cyan",
    )
    table.add_column("Claim #", style="bold", no_wrap=True)
    table.add_column("Policy #", no_wrap=True)
    table.add_column("Type")
    table.add_column("Submitted")
    table.add_column("Amount", justify="right")
    table.add_column("Status")
    table.add_column("Payment")

    for claim in claims:
        table.add_row(
            claim.reference_number,
            claim.policy_number,
            format_claim_type(claim.claim_type),
            format_datetime(claim.date_submitted),
            f"${claim.amount_value:,.2f}",
            f"[{STATUS_STYLES[claim.status]}]{format_claim_status(claim.status)}[/]",
            f"[{PAYMENT_STYLES[claim.payment_status]}]{format_payment_status(claim.payment_status)}[/]",
        )
    return table


def print_claim_detail(claim: Claim) -> None:
    """Print detailed view of a single claim."""
    lines = [
        f"[bold]Claim Reference Number:[/] {claim.reference_number}",
        f"[bold]Policy Number:[/] {claim.policy_number}",
        f"[bold]Claim Type:[/] {format_claim_type(claim.claim_type)}",
        f"[bold]Date Submitted:[/] {format_datetime(claim.date_submitted)}",
        f"[bold]Claim Amount:[/] ${claim.amount_value:,.2f}",
        f"[bold]Status:[/] {format_claim_status(claim.status)}",
        f"[bold]Payment Status:[/] {format_payment_status(claim.payment_status)}",
        f"[bold]Risk Level:[/] {claim.risk_level.value}",
    ]
    if claim.payment_amount:
        lines.append(f"[bold]Payment Amount:[/] ${claim.payment_amount}")
    if claim.payment_date:
        lines.append(f"[bold]Payment Date:[/] {format_datetime(claim.payment_date)}")
    if claim.description:
        lines.append(f"[bold]Description:[/] {claim.description}")
    if claim.documents:
        lines.append(f"[bold]Documents:[/] {', '.join(claim.documents)}")
    if claim.claimant_info:
        contact = claim.claimant_info.model_dump(exclude_none=True)
        lines.append(f"[bold]Contact:[/] {', '.join(contact.values())}")

    lines.append("")
    lines.append(f"[bold]Next Steps:[/] {status_message(claim)}")
    for step in claim.next_steps or []:
        lines.append(f"  - {step}")

    console.print(Panel("\n".join(lines), title="Claim Details", border_style="cyan"))


# =============================================================================
# Commands
# =============================================================================


def cmd_list(args: argparse.Namespace) -> int:
    store = open_store(args.storage)
    claims = store.list_claims(status=args.status)
    claims = search_claims(claims, args.search or "")

    if not claims:
        console.print("\nNo claims found matching your search criteria.")
        return 0

    console.print(make_claims_table(claims))
    console.print(f"Total: {len(claims)} claim(s)")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    store = open_store(args.storage)
    claim = store.get_claim(args.reference_number)
    if claim is None:
        console.print(f"\nClaim not found: {args.reference_number}")
        return 1

    if args.export:
        print(json.dumps(claim.to_record(), indent=2))
    else:
        print_claim_detail(claim)
    return 0


def cmd_file(args: argparse.Namespace) -> int:
    logger = logging.getLogger(__name__)
    store = open_store(args.storage)
    processor = ClaimProcessor(delay=args.delay)

    processor.update_field("policy_number", args.policy_number)
    processor.update_field("claim_type", args.claim_type)
    processor.update_field("incident_date", args.incident_date)
    processor.update_field("description", args.description)
    processor.update_field("estimated_amount", args.amount)
    processor.update_field("contact_phone", args.contact_phone)
    processor.update_field("contact_email", args.contact_email)
    processor.add_files(args.documents)

    for step in (1, 2, 3):
        if not processor.is_form_valid(step):
            missing = ", ".join(processor.get_missing_fields(step))
            logger.error(f"Step {step} incomplete, missing: {missing}")
            return 2

    with console.status("Processing claim..."):
        claim = asyncio.run(processor.submit_and_store(store))

    result = processor.claim_result
    style = "green" if result.approved else "yellow"
    body = [
        f"[bold]{result.message}[/]",
        f"Reference number: {result.reference_number}",
        f"Risk level: {result.risk_level.value}",
    ]
    if result.review_date:
        body.append(f"Review by: {format_datetime(result.review_date)}")
    body.append("")
    body.extend(f"  - {step}" for step in result.next_steps)
    console.print(Panel("\n".join(body), title="Claim Submitted", border_style=style))

    logger.info(f"Claim {claim.reference_number} stored with status {claim.status.value}")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    store = open_store(args.storage)
    summary = summarize_claims(store.claims)

    table = Table(title="Claims Overview", box=box.SIMPLE_HEAVY, show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Claims", str(summary.total_claims))
    for status, count in sorted(summary.by_status.items()):
        table.add_row(f"  {format_claim_status(status)}", str(count))
    for payment_status, count in sorted(summary.by_payment_status.items()):
        table.add_row(f"  Payment {payment_status}", str(count))
    for risk, count in sorted(summary.by_risk_level.items()):
        table.add_row(f"  Risk {risk}", str(count))
    table.add_row("Total Claimed", f"${summary.total_claimed:,.2f}")
    table.add_row("Total Paid", f"${summary.total_paid:,.2f}")

    console.print(table)
    return 0


def cmd_greet(args: argparse.Namespace) -> int:
    profile = AgentProfile(display_name=args.name, role_type=args.role, specialty=args.specialty)
    console.print(f"[bold]{greeting(profile)}[/]")
    console.print(f"{format_role_type(profile.role_type)} · {format_specialty(profile.specialty)}")
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="File and track insurance claims",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        '--storage',
        type=str,
        help='SQLite storage file (default: CLAIMDESK_STORAGE_PATH or data/claimdesk.db)'
    )
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    list_parser = subparsers.add_parser('list', help='List tracked claims')
    list_parser.add_argument(
        '--status',
        choices=[s.value for s in ClaimStatus],
        help='Filter by claim status'
    )
    list_parser.add_argument(
        '--search',
        type=str,
        help='Search by claim #, policy #, type, or status'
    )
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser('show', help='Show one claim')
    show_parser.add_argument('reference_number', help='Claim reference number')
    show_parser.add_argument('--export', action='store_true', help='Print the stored JSON record')
    show_parser.set_defaults(func=cmd_show)

    file_parser = subparsers.add_parser('file', help='File a new claim')
    file_parser.add_argument('--policy-number', required=True, help='Policy number')
    file_parser.add_argument(
        '--claim-type',
        required=True,
        choices=[t.value for t in ClaimType],
        help='Claim type'
    )
    file_parser.add_argument('--incident-date', default='', help='Date of the incident')
    file_parser.add_argument('--description', default='', help='What happened')
    file_parser.add_argument('--amount', default='', help='Estimated claim amount')
    file_parser.add_argument('--contact-phone', default='', help='Contact phone')
    file_parser.add_argument('--contact-email', default='', help='Contact email')
    file_parser.add_argument(
        '--documents',
        nargs='*',
        default=[],
        help='Supporting documents (space-separated paths)'
    )
    file_parser.add_argument(
        '--delay',
        type=float,
        default=None,
        help='Override the simulated decision latency (seconds)'
    )
    file_parser.set_defaults(func=cmd_file)

    subparsers.add_parser('stats', help='Show claim statistics').set_defaults(func=cmd_stats)

    greet_parser = subparsers.add_parser('greet', help='Print the dashboard greeting')
    greet_parser.add_argument('--name', help='Agent display name')
    greet_parser.add_argument('--role', help='Role type, e.g. underwriter')
    greet_parser.add_argument('--specialty', help='Product or regional specialty')
    greet_parser.set_defaults(func=cmd_greet)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    args = parse_args(argv)

    setup_logging(args.verbose, get_settings().log_level)
    logger = logging.getLogger(__name__)

    try:
        return args.func(args)
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=args.verbose)
        return 1


if __name__ == '__main__':
    sys.exit(main())
