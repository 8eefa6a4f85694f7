"""Command line interface for the MTUCI timetable sync."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List

from . import api, config, sync, util
from .errors import ConfigError
from .notes import NoteWriter


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="MTUCI timetable to vault notes")
    parser.add_argument(
        "--config", type=Path, default=config.CONFIG_PATH, help="Settings file"
    )
    parser.add_argument("--verbose", action="store_true")
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("sync", help="Rewrite notes for this week and the next")
    run.add_argument("--vault", type=Path, required=True)
    run.add_argument("--tz", default=util.DEFAULT_TZ)
    run.add_argument("--today", help="Pretend today is this YYYY-MM-DD date")
    run.add_argument(
        "--no-commute",
        dest="generate_commute",
        action="store_false",
        default=None,
        help="Skip commute notes regardless of the settings",
    )
    run.add_argument("--attempts", type=int, default=1)
    run.add_argument("--dump-json", action="store_true")
    run.add_argument(
        "--offline", action="store_true", help="Use the saved JSON payload"
    )
    run.add_argument("--preview", action="store_true")

    setter = commands.add_parser("set", help="Change one setting and save it")
    setter.add_argument("key", help="e.g. apiKey, path, commute.OP.forwards")
    setter.add_argument("value")
    return parser.parse_args(argv)


def _set(args: argparse.Namespace) -> int:
    settings = config.load_settings(args.config)
    config.set_option(settings, args.key, args.value)
    config.save_settings(settings, args.config)
    print(f"{args.key} saved to {args.config}")
    return 0


def _sync(args: argparse.Namespace) -> int:
    settings = config.load_settings(args.config)
    if args.generate_commute is not None:
        settings.generate_commute = args.generate_commute
    today = (
        date.fromisoformat(args.today)
        if args.today
        else util.today(util.parse_timezone(args.tz))
    )

    client = api.APIClient(
        settings.api_key,
        dump_json=args.dump_json,
        offline=args.offline,
        attempts=args.attempts,
    )
    writer = NoteWriter(args.vault, settings.path)
    result = sync.sync_once(settings, client, writer, today)
    if not result.ok:
        print(result.message, file=sys.stderr)
        return 1

    print(result.message)
    if args.preview:
        for e in sorted(result.entries, key=lambda e: e.date):
            print(
                f"{e.date:%Y-%m-%d} {e.time_start:%H:%M} - {e.time_end:%H:%M} "
                f"{e.building.label}"
            )
    return 0


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    util.configure_logging(args.verbose)
    try:
        if args.command == "set":
            return _set(args)
        return _sync(args)
    except ConfigError as exc:
        print(f"Settings error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
