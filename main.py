"""CLI entry point for the job search pipeline."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from jobsift.core.config import (
    DEFAULT_DAYS,
    DEFAULT_KEYWORD,
    DEFAULT_LIMIT,
    DEFAULT_LOCATION,
    SearchParams,
    Settings,
)
from jobsift.pipeline.orchestrator import STATUS_OK, export_response_json, handle_search, run_pipeline


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML file (default: built-in settings)",
    )
    parser.add_argument("--keyword", "-k", default=DEFAULT_KEYWORD, help="Search keyword")
    parser.add_argument("--location", "-l", default=DEFAULT_LOCATION, help="Search location")
    parser.add_argument(
        "--days",
        default=str(DEFAULT_DAYS),
        help=f"Lookback window in days (default: {DEFAULT_DAYS})",
    )
    parser.add_argument(
        "--limit",
        default=str(DEFAULT_LIMIT),
        help=f"Maximum jobs returned, clamped to 1-200 (default: {DEFAULT_LIMIT})",
    )
    parser.add_argument("--start", default="0", help="Pagination offset (default: 0)")
    parser.add_argument("--remote", action="store_true", help="Only remote jobs")
    parser.add_argument("--contract", action="store_true", help="Only contract jobs")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Job search - fetch, classify, and deduplicate job listings",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- search subcommand ---
    search_parser = subparsers.add_parser("search", help="Search the upstream job source")
    _add_common_args(search_parser)
    search_parser.add_argument(
        "--details",
        action="store_true",
        help="Fetch each job's detail page for a full description (slow)",
    )

    # --- replay subcommand ---
    replay_parser = subparsers.add_parser(
        "replay",
        help="Run the pipeline over a saved upstream response (JSON or HTML)",
    )
    replay_parser.add_argument("payload", help="Path to a saved response body")
    _add_common_args(replay_parser)

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def load_settings(path: str | None) -> Settings:
    if path is None:
        return Settings()
    return Settings.from_yaml(path)


def build_query(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "keyword": args.keyword,
        "location": args.location,
        "days": args.days,
        "limit": args.limit,
        "start": args.start,
        "require_remote": args.remote,
        "require_contract": args.contract,
        "fetch_details": getattr(args, "details", False),
    }


def read_payload(path: str) -> Any:
    """Read a saved body: parsed JSON when it parses, raw text otherwise."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except ValueError:
        return text


async def replay(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    params = SearchParams.from_query(build_query(args))
    result = await run_pipeline(read_payload(args.payload), params, settings)
    return result.to_response(settings.description_snippet_length)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    if args.command == "replay":
        try:
            body = asyncio.run(replay(args, settings))
        except (FileNotFoundError, UnicodeDecodeError) as e:
            print(f"Error reading payload: {e}", file=sys.stderr)
            sys.exit(1)
        print(export_response_json(body))
        return

    status, body = asyncio.run(handle_search(build_query(args), settings))
    print(export_response_json(body))
    if status != STATUS_OK:
        sys.exit(1)


if __name__ == "__main__":
    main()
