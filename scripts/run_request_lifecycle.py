#!/usr/bin/env python3
"""Run the encrypted aid request lifecycle end to end.

Connects a wallet identity, creates an encrypted request, verifies it and
prints the resulting session view. Uses the HTTP ledger relay when
AID_LEDGER_URL is set, otherwise the in-memory ledger.

Usage:
    # Create and verify one request
    python scripts/run_request_lifecycle.py --title "Tuition" --amount 500

    # Only list requests matching a search term
    python scripts/run_request_lifecycle.py --list --search tuition

    # Verify a request twice to show the already-verified path
    python scripts/run_request_lifecycle.py --amount 250 --verify-twice
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv()

from structlog import get_logger

from confidential_aid.application.services.request_lifecycle_service import (
    RequestLifecycleService,
)
from confidential_aid.bootstrap.lifecycle import get_request_lifecycle_service
from confidential_aid.bootstrap.logging import configure_structlog
from confidential_aid.domain.errors import AidRequestError

logger = get_logger()


# ANSI colors for terminal output
class Colors:
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


def print_header(text: str) -> None:
    print(f"\n{Colors.BOLD}{Colors.CYAN}{'=' * 70}")
    print(f"  {text}")
    print(f"{'=' * 70}{Colors.ENDC}\n")


def print_status(service: RequestLifecycleService) -> None:
    status = service.current_status()
    if status is None:
        return
    color = {
        "pending": Colors.YELLOW,
        "success": Colors.GREEN,
        "error": Colors.RED,
    }[status.kind.value]
    print(f"  {color}[{status.kind.value}] {status.message}{Colors.ENDC}")


def print_requests(service: RequestLifecycleService, search: str) -> None:
    state = service.state
    print(
        f"  Total: {state.stats.total}  Verified: {state.stats.verified}  "
        f"Pending: {state.stats.pending}  Mine: {len(state.user_history)}"
    )
    for record in service.visible_requests(search):
        value = (
            f"{Colors.GREEN}{record.revealed_value}{Colors.ENDC}"
            if record.verified
            else f"{Colors.YELLOW}encrypted{Colors.ENDC}"
        )
        print(f"    {record.id}  {record.title!r}  category={record.category}  {value}")


async def main(args: argparse.Namespace) -> int:
    configure_structlog(args.environment)
    service = get_request_lifecycle_service()

    print_header("Encrypted Request Lifecycle")
    await service.connect(args.identity)
    print(f"  Connected as {args.identity}")
    print_status(service)

    if not await service.check_availability():
        print(f"{Colors.RED}Ledger reports itself unavailable{Colors.ENDC}")
        return 1

    if args.list:
        print_requests(service, args.search)
        return 0

    try:
        print(f"\n{Colors.YELLOW}Step 1: Creating encrypted request...{Colors.ENDC}")
        created = await service.create_request(args.title, args.amount, args.category)
        print(f"  Record: {created.record_id}  tx: {created.tx_ref}")
        print_status(service)

        print(f"\n{Colors.YELLOW}Step 2: Verifying request...{Colors.ENDC}")
        outcome = await service.verify_request(created.record_id)
        print(f"  Revealed value: {outcome.display_value}")
        print_status(service)

        if args.verify_twice:
            print(f"\n{Colors.YELLOW}Step 3: Verifying again...{Colors.ENDC}")
            again = await service.verify_request(created.record_id)
            print(f"  Already verified: {again.already_verified}")
            print_status(service)
    except AidRequestError as e:
        logger.error("lifecycle_run_failed", error=str(e), error_type=type(e).__name__)
        print(f"\n{Colors.RED}Failed: {e}{Colors.ENDC}")
        print_status(service)
        return 1

    print(f"\n{Colors.GREEN}Session view:{Colors.ENDC}")
    print_requests(service, args.search)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Create and verify an encrypted aid request",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--identity",
        type=str,
        default="0xA11ce00000000000000000000000000000000001",
        help="Wallet identity to connect as",
    )
    parser.add_argument("--title", type=str, default="Tuition", help="Request title")
    parser.add_argument(
        "--amount",
        type=int,
        default=500,
        help="Plaintext amount to encrypt (default: 500)",
    )
    parser.add_argument(
        "--category",
        type=int,
        default=1,
        help="Request category, 1=donation 2=assistance (default: 1)",
    )
    parser.add_argument(
        "--verify-twice",
        action="store_true",
        help="Verify the created request a second time",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Only list the current requests",
    )
    parser.add_argument("--search", type=str, default="", help="Search term filter")
    parser.add_argument(
        "--environment",
        type=str,
        default="development",
        help="Logging environment (default: development)",
    )

    args = parser.parse_args()

    sys.exit(asyncio.run(main(args)))
