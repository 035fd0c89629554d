"""CLI argument parsing for the event listing tool.

Connection settings come from the environment (see keptn_events.config) and
can be overridden per run with flags.

Usage examples:
    uv run python -m keptn_events --project sockshop --stage dev
    uv run python -m keptn_events --type sh.keptn.event.deployment.finished --pages 2
    uv run python -m keptn_events --keptn-context 3b0a... --json
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, replace

from keptn_events.config import (
    DEFAULT_AUTH_HEADER,
    HandlerConfig,
    load_config,
    normalize_base_url,
)
from keptn_events.output import terminal
from keptn_events.services.event_handler import EventFilter, EventHandler


@dataclass
class CLIArgs:
    event_filter: EventFilter
    config: HandlerConfig
    as_json: bool
    verbose: bool


def parse_args(argv: list[str] | None = None) -> CLIArgs:
    parser = argparse.ArgumentParser(
        prog="keptn-events",
        description="List events stored in the Keptn event datastore",
    )

    # Filters
    parser.add_argument("--project", default="", help="Project name")
    parser.add_argument("--stage", default="", help="Stage name")
    parser.add_argument("--service", default="", help="Service name")
    parser.add_argument(
        "--type", dest="event_type", default="", metavar="TYPE",
        help="Event type, e.g. sh.keptn.event.deployment.triggered",
    )
    parser.add_argument("--keptn-context", dest="keptn_context", default="", metavar="ID")
    parser.add_argument("--event-id", dest="event_id", default="", metavar="ID")
    parser.add_argument(
        "--page-size", dest="page_size", type=int, metavar="N",
        help="Events per page requested from the server",
    )
    parser.add_argument(
        "--pages", type=int, default=0, metavar="N",
        help="Stop after N pages (default: 0, all pages)",
    )

    # Connection
    parser.add_argument(
        "--endpoint", metavar="URL",
        help="API endpoint (default: KEPTN_ENDPOINT)",
    )
    parser.add_argument("--token", metavar="TOKEN", help="API token (default: KEPTN_API_TOKEN)")
    parser.add_argument(
        "--insecure", action="store_true",
        help="Skip TLS certificate verification",
    )

    # Output
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print raw JSON")
    parser.add_argument("--verbose", action="store_true", help="Log each page request")

    ns = parser.parse_args(argv)

    if ns.page_size is not None and ns.page_size <= 0:
        print("Error: --page-size must be a positive integer.", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config()
    except ValueError as exc:
        print(f"Error: invalid environment configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    return CLIArgs(
        event_filter=EventFilter(
            project=ns.project,
            stage=ns.stage,
            service=ns.service,
            event_type=ns.event_type,
            keptn_context=ns.keptn_context,
            event_id=ns.event_id,
            page_size=str(ns.page_size) if ns.page_size else "",
            number_of_pages=ns.pages,
        ),
        config=_apply_overrides(config, ns),
        as_json=ns.as_json,
        verbose=ns.verbose,
    )


def _apply_overrides(config: HandlerConfig, ns: argparse.Namespace) -> HandlerConfig:
    token = ns.token if ns.token is not None else config.auth_token
    endpoint = ns.endpoint or config.base_url
    scheme = config.scheme
    if ns.endpoint:
        if ns.endpoint.startswith("https://"):
            scheme = "https"
        elif ns.endpoint.startswith("http://"):
            scheme = "http"
    config = replace(
        config,
        base_url=normalize_base_url(endpoint, datastore_suffix=bool(token)),
        auth_token=token,
        auth_header=config.auth_header or DEFAULT_AUTH_HEADER,
        scheme=scheme,
    )
    if ns.insecure:
        config = replace(config, verify_tls=False)
    return config


def run(args: CLIArgs) -> int:
    """Fetch and print events. Returns 0 on success, 1 on error."""
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handler = EventHandler(args.config)
    result = handler.get_events(args.event_filter)
    if result.error is not None:
        terminal.print_error(result.error)
        return 1

    if args.as_json:
        terminal.print_events_json(result.events)
    else:
        terminal.print_events_table(result.events)
    return 0
