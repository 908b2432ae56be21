#!/usr/bin/env python3
"""
Notification Ledger
Tracks which showings have already been notified so repeated runs do not
send the same SMS twice.

The ledger is a plain text file with one show URL per line. It is only ever
appended to: nothing is compacted or rewritten, and URLs already present are
written again when their film comes round as new.

The empty URL always counts as recorded, so a show without a URL can never
make its film new.
"""

import logging
from pathlib import Path
from typing import FrozenSet, Iterable, Union

from .errors import StorageFailure
from .schema import Film

DEFAULT_NOTIFICATIONS_FILE = "/var/db/unliminotify/notifications"


class NotificationLedger:
    """Append-only record of notified show URLs"""

    def __init__(self, path: Union[str, Path] = DEFAULT_NOTIFICATIONS_FILE):
        """
        Initialize the ledger

        Args:
            path: Path to the notifications file
        """
        self.path = Path(path)
        self.logger = logging.getLogger("NotificationLedger")

    def load_seen_urls(self) -> FrozenSet[str]:
        """
        Read every URL recorded so far

        Returns:
            Set of notified show URLs, always including the empty URL

        Raises:
            StorageFailure: If the file exists but cannot be read
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            self.logger.info(f"No notifications file at {self.path}, starting fresh")
            text = ""
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Unable to read notifications file: {e}")
            raise StorageFailure(f"Unable to read notifications file: {e}") from e

        urls = frozenset(text.split("\n"))
        self.logger.debug(f"Loaded {len(urls)} notified URLs from {self.path}")
        return urls

    def record(self, films: Iterable[Film]) -> int:
        """
        Append the URL of every show of every film

        Args:
            films: Films that were processed as new

        Returns:
            Number of lines written

        Raises:
            StorageFailure: If the file cannot be opened or written
        """
        written = 0
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                for film in films:
                    for show in film.shows:
                        f.write(f"{show.url}\n")
                        written += 1
        except OSError as e:
            self.logger.error(f"Unable to write notifications file: {e}")
            raise StorageFailure(f"Unable to write notifications file: {e}") from e

        self.logger.info(f"Recorded {written} notified URLs in {self.path}")
        return written
