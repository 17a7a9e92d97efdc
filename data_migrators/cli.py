# -*- coding: utf-8 -*-
"""
Command line entry point for the data migrators.

Usage:
    python -m data_migrators.cli get-fatsecret-diary [out_file] -m 2024-01-01 -t 2024-03-31
    python -m data_migrators.cli get-fatsecret-food 33691
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Iterator, Optional

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import MigratorError
from .fatsecret.auth import OAuthFlow, Prompt, prompt_for_code
from .fatsecret.client import FatSecretClient
from .fatsecret.diary import fetch_diary
from .fatsecret.models import DiaryRange
from .fatsecret.oauth1 import OAuth1Session, OAuth1Signer
from .keyfile import load_keys
from .storage import SecretStore
from .transport import RetryPolicy, make_http_client

logger = logging.getLogger(__name__)

DEFAULT_DIARY_OUT_FILE = "fat-secret-diary-data.json"

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: str) -> date:
    if not _DATE_RE.match(value):
        raise argparse.ArgumentTypeError(f"date should be YYYY-MM-DD, not {value}")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


@contextmanager
def fatsecret_client(
    settings: Settings,
    key_file: Path,
    *,
    prompt: Prompt = prompt_for_code,
    reset_auth: bool = False,
    transport_factory: Optional[Callable[[float], httpx.Client]] = None,
) -> Iterator[FatSecretClient]:
    """Authorize against FatSecret and yield a ready API client."""
    keys = load_keys(key_file)
    store = SecretStore(settings.base_dir, settings.fatsecret_cache_namespace)
    retry = RetryPolicy(
        max_retries=settings.http_retries,
        initial_backoff=settings.http_backoff,
        max_timeout=settings.http_max_timeout,
    )
    factory = transport_factory or make_http_client
    with factory(settings.http_timeout) as http:
        session = OAuth1Session(OAuth1Signer(keys), http, retry=retry)
        flow = OAuthFlow(session, store, prompt=prompt)
        if reset_auth:
            flow.reset()
        flow.authorize()
        yield FatSecretClient(session)


def cmd_get_fatsecret_diary(args: argparse.Namespace, settings: Settings) -> int:
    """Export the FatSecret food diary to a JSON file."""
    diary_range = DiaryRange(from_date=args.from_date, to_date=args.to_date)
    out_path = Path(args.out_file)

    with fatsecret_client(settings, Path(args.key_file), reset_auth=args.reset_auth) as client:
        result = fetch_diary(client, diary_range, courtesy_delay=settings.courtesy_delay)

    out_path.write_text(result.model_dump_json(indent=2), encoding="utf-8")
    logger.info(
        "FatSecret: diary %s..%s (%d days, %d entries) was written to file %s",
        result.actual_from_date,
        result.actual_to_date,
        len(result.day_aggregates),
        len(result.entries),
        out_path,
    )
    return 0


def cmd_get_fatsecret_food(args: argparse.Namespace, settings: Settings) -> int:
    """Fetch one food by id; handy to check that credentials work."""
    with fatsecret_client(settings, Path(args.key_file), reset_auth=args.reset_auth) as client:
        data = client.get_food(args.food_id)
    print(json.dumps(data, ensure_ascii=False, indent=2))
    return 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="data-migrators",
        description="Migrate personal data out of third-party services",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    today = date.today()

    diary_parser = subparsers.add_parser("get-fatsecret-diary", help="Get FatSecret diary")
    diary_parser.add_argument(
        "out_file",
        nargs="?",
        default=DEFAULT_DIARY_OUT_FILE,
        help=f"Output JSON file (default: {DEFAULT_DIARY_OUT_FILE})",
    )
    diary_parser.add_argument(
        "-m", "--from-date",
        type=parse_date,
        default=today - timedelta(days=2),
        help="First day, YYYY-MM-DD (default: two days ago)",
    )
    diary_parser.add_argument(
        "-t", "--to-date",
        type=parse_date,
        default=today,
        help="Last day, YYYY-MM-DD (default: today)",
    )

    food_parser = subparsers.add_parser("get-fatsecret-food", help="Get one FatSecret food by id")
    food_parser.add_argument("food_id", help="FatSecret food id")

    for sub in (diary_parser, food_parser):
        sub.add_argument(
            "-k", "--key-file",
            default=str(settings.fatsecret_key_file),
            help=f"Consumer key JSON file (default: {settings.fatsecret_key_file})",
        )
        sub.add_argument(
            "--reset-auth",
            action="store_true",
            help="Forget cached OAuth tokens and authorize again",
        )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "get-fatsecret-diary": cmd_get_fatsecret_diary,
        "get-fatsecret-food": cmd_get_fatsecret_food,
    }

    try:
        return commands[args.command](args, settings)
    except (MigratorError, ValidationError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
