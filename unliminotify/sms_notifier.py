#!/usr/bin/env python3
"""SMS Notifier for Cineworld Unlimited Screenings"""

import logging
from typing import Dict, Protocol, Sequence

import requests

from .errors import ConfigError, TransportFailure
from .schema import Film, Show, format_date, format_time
from .screenings import format_sms_title

# Twilio API constants
TWILIO_API_BASE_URL = "https://api.twilio.com/2010-04-01"
TWILIO_MESSAGES_PATH = "/Accounts/{sid}/Messages.json"

# Timeout constants (seconds)
SEND_MESSAGE_TIMEOUT_SECONDS = 30

MESSAGE_TEMPLATE = "{title} on {date} @ {time}: {url}"

logger = logging.getLogger("SMSNotifier")


class NotificationTransport(Protocol):
    """Anything that can deliver one SMS"""

    def send_sms(self, sender: str, recipient: str, body: str) -> Dict:
        ...


class TwilioTransport:
    """SMS transport using the Twilio REST API"""

    def __init__(self, account_sid: str, auth_token: str) -> None:
        """Initialize Twilio transport with account credentials"""
        if not all([account_sid, auth_token]):
            raise ConfigError(
                "Missing Twilio credentials: set TWILIO_SID and TWILIO_TOKEN"
            )
        self.account_sid = account_sid
        self.auth_token = auth_token

    @classmethod
    def from_config(cls, config) -> "TwilioTransport":
        return cls(config.twilio_sid, config.twilio_token)

    def send_sms(self, sender: str, recipient: str, body: str) -> Dict:
        """
        Send one SMS via the Twilio Messages endpoint

        Returns:
            Decoded Twilio message resource

        Raises:
            TransportFailure: If Twilio rejects the message or the request fails
        """
        url = TWILIO_API_BASE_URL + TWILIO_MESSAGES_PATH.format(sid=self.account_sid)
        payload = {"From": sender, "To": recipient, "Body": body}

        try:
            response = requests.post(
                url,
                data=payload,
                auth=(self.account_sid, self.auth_token),
                timeout=SEND_MESSAGE_TIMEOUT_SECONDS,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Error sending SMS to {recipient}: {e}")
            raise TransportFailure(f"Error sending SMS notifications: {e}") from e

        if not response.ok:
            exception = self._describe_exception(response)
            logger.error(f"Twilio rejected SMS to {recipient}: {exception}")
            raise TransportFailure(f"Error sending SMS notifications: {exception}")

        logger.debug(f"SMS sent to {recipient}")
        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def _describe_exception(response: requests.Response) -> str:
        """Summarise a Twilio error payload"""
        try:
            data = response.json()
        except ValueError:
            return f"{response.status_code} - {response.text}"
        code = data.get("code")
        message = data.get("message", response.text)
        return f"{response.status_code} - {message} (code {code})"


class SMSNotifier:
    """Formats and sends one SMS per show per recipient"""

    def __init__(
        self,
        transport: NotificationTransport,
        sender: str,
        disable_sms: bool = False,
        verbose: bool = False,
    ) -> None:
        """
        Initialize the notifier

        Args:
            transport: Delivers individual messages
            sender: Number messages are sent from
            disable_sms: Format messages without sending them
            verbose: Echo messages and transport responses
        """
        self.transport = transport
        self.sender = sender
        self.disable_sms = disable_sms
        self.verbose = verbose

    def send_notifications(
        self, films: Sequence[Film], recipients: Sequence[str]
    ) -> int:
        """
        Notify every recipient about every show of every film

        Any failure stops at once; nothing is retried.

        Returns:
            Number of messages handed to the transport

        Raises:
            ParseFailure: If a show time cannot be parsed
            TransportFailure: If any message fails for any recipient
        """
        sent = 0
        for film in films:
            for show in film.shows:
                message = format_message(film, show)
                if self.verbose:
                    print(f"\n{message}\nSending SMS notifications... ", end="")
                if self.disable_sms:
                    continue

                for recipient in recipients:
                    response = self.transport.send_sms(self.sender, recipient, message)
                    sent += 1
                    if self.verbose:
                        print(f"\nSMS response: {response}")
                        print("Sending SMS notifications... ", end="")

        logger.info(f"Sent {sent} SMS notifications")
        return sent


def format_message(film: Film, show: Show) -> str:
    """Build the SMS text for one show"""
    showtime = show.time()
    return MESSAGE_TEMPLATE.format(
        title=format_sms_title(film.title),
        date=format_date(showtime),
        time=format_time(showtime),
        url=show.url,
    )
