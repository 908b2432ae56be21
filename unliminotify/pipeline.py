#!/usr/bin/env python3
"""
Unlimited Screenings Alert Pipeline
Runs one check: Fetch → Find cinema → Match → Deduplicate → Notify → Record → Report
Designed to be run repeatedly without re-alerting on the same showings
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .config import Config
from .listings_source import ListingsSource
from .notification_ledger import NotificationLedger
from .report import screenings_table
from .schema import Cinema, Film, Listings
from .screenings import filter_new_screenings, find_cinema, find_unlimited_screenings
from .sms_notifier import NotificationTransport, SMSNotifier, TwilioTransport
from .status import stage

# Display constants
LOG_SEPARATOR_WIDTH = 60


@dataclass
class RunResult:
    """Outcome of a completed run"""

    cinema: Cinema
    matched: List[Film]
    new: List[Film]
    messages_sent: int = 0


class AlertPipeline:
    """Orchestrates one Unlimited Screenings check"""

    def __init__(
        self,
        config: Config,
        source: ListingsSource,
        transport_factory: Callable[[Config], NotificationTransport] = TwilioTransport.from_config,
        ledger: Optional[NotificationLedger] = None,
    ):
        """
        Initialize the alert pipeline

        Args:
            config: Settings for this run
            source: Provides the parsed listings
            transport_factory: Builds the SMS transport when messages must be sent
            ledger: Notifications file (default: the one named in config)
        """
        self.config = config
        self.source = source
        self.transport_factory = transport_factory
        self.ledger = ledger or NotificationLedger(config.notifications_file)
        self.logger = logging.getLogger("AlertPipeline")

    def run(self) -> RunResult:
        """
        Run the complete check

        Every failure propagates as an UnliminotifyError; stages after a
        failure do not run.

        Returns:
            RunResult with the matched and new screenings
        """
        self.logger.info("=" * LOG_SEPARATOR_WIDTH)
        self.logger.info(f"CHECKING CINEMA {self.config.cinema_id}")
        self.logger.info("=" * LOG_SEPARATOR_WIDTH)

        listings = self.source.get_listings()

        with stage("Finding cinema"):
            cinema = find_cinema(self.config.cinema_id, listings)

        with stage(f"Checking for Unlimited screenings at {cinema.name}"):
            matched = find_unlimited_screenings(cinema.films)

        with stage("Filtering out old Unlimited screenings"):
            seen_urls = self.ledger.load_seen_urls()
            new_screenings = filter_new_screenings(matched, seen_urls)

        messages_sent = 0
        if self.config.sms_numbers:
            messages_sent = self.run_notifier(new_screenings)

        with stage("Writing notifications file"):
            self.ledger.record(new_screenings)

        report = screenings_table(matched)
        print()
        print(report)

        self.logger.info(
            f"Matched {len(matched)} screenings, {len(new_screenings)} new, "
            f"{messages_sent} messages sent"
        )
        return RunResult(
            cinema=cinema,
            matched=matched,
            new=new_screenings,
            messages_sent=messages_sent,
        )

    def run_notifier(self, films: List[Film]) -> int:
        """Send SMS notifications for new screenings"""
        with stage("Sending SMS notifications"):
            transport = None
            if not self.config.disable_sms:
                transport = self.transport_factory(self.config)
            notifier = SMSNotifier(
                transport,
                sender=self.config.twilio_from,
                disable_sms=self.config.disable_sms,
                verbose=self.config.verbose,
            )
            return notifier.send_notifications(films, self.config.sms_numbers)

    def list_cinemas(self) -> Listings:
        """Fetch the listings for the cinemas command"""
        return self.source.get_listings()
