"""
Unliminotify Package

Watches the Cineworld listings feed for Unlimited Screenings at one cinema
and sends SMS notifications for showings that have not been notified before.

This package contains these main modules:
- listings_source: Fetches and parses the Cineworld listings feed
- screenings: Selects the cinema, matches and deduplicates Unlimited Screenings
- notification_ledger: Remembers which showings have already been notified
- sms_notifier: Sends SMS notifications through Twilio
- pipeline: Runs the whole check from feed to report
"""

__version__ = "1.0.0"
__author__ = "Unliminotify"
