#!/usr/bin/env python3
"""
Unliminotify
Checks which Cineworld Unlimited screenings appear in the current listings
and sends notifications for any that are new.
"""

import argparse
import os
import sys

from unliminotify.config import (
    DEFAULT_CINEMA_ID,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_NOTIFICATIONS_FILE,
    build_config,
    load_env_file,
    setup_logging,
)
from unliminotify.errors import UnliminotifyError
from unliminotify.listings_source import CineworldListingsSource
from unliminotify.pipeline import AlertPipeline
from unliminotify.report import cinemas_table


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unliminotify",
        description=(
            "Checks which Cineworld Unlimited screenings appear in the current "
            "listings and sends notifications for any that are new."
        ),
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to config file (default: $HOME/{DEFAULT_CONFIG_FILENAME})",
    )
    parser.add_argument(
        "-c",
        "--cinema-id",
        default=None,
        help=f"ID of the cinema to check (default: {DEFAULT_CINEMA_ID})",
    )
    parser.add_argument(
        "-f",
        "--notifications-file",
        default=None,
        help=f"Path to the notifications file (default: {DEFAULT_NOTIFICATIONS_FILE})",
    )
    parser.add_argument(
        "-s",
        "--sms-numbers",
        action="append",
        default=None,
        help="Numbers to send SMS notifications to (repeatable, comma-separated)",
    )
    parser.add_argument("--disable-sms", action="store_true", help=argparse.SUPPRESS)
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("cinemas", help="List the available cinemas")
    return parser


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    try:
        environ = {**load_env_file(), **os.environ}
        config = build_config(
            flags={
                "cinema_id": args.cinema_id,
                "notifications_file": args.notifications_file,
                "sms_numbers": args.sms_numbers,
                "disable_sms": args.disable_sms,
                "verbose": args.verbose,
            },
            environ=environ,
            config_path=args.config,
        )
        setup_logging(config)
        if config.config_file_used:
            print(f"Using config file: {config.config_file_used}")

        pipeline = AlertPipeline(config, CineworldListingsSource(config.listings_url))
        if args.command == "cinemas":
            listings = pipeline.list_cinemas()
            print()
            print(cinemas_table(listings))
        else:
            pipeline.run()

    except UnliminotifyError as e:
        print(e, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nCheck cancelled by user", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
