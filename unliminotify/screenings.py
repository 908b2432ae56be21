#!/usr/bin/env python3
"""
Unlimited Screenings Finder
Selects the target cinema, picks out Unlimited Screenings and separates
the ones that still need a notification.

A film counts as an Unlimited Screening when its title contains the literal
text "Unlimited Screening". Deduplication works per film: a film is new as
soon as one of its shows has not been notified, and then all of its shows
are treated as new.
"""

import logging
import re
from typing import AbstractSet, Iterable, List, Sequence

from .errors import VenueNotFound
from .schema import Cinema, Film, Listings

# Case-sensitive, unanchored title match
UNLIMITED_SCREENING_PATTERN = re.compile(re.escape("Unlimited Screening"))

# Removed from titles before they go into an SMS
UNLIMITED_SCREENING_SUFFIX = " : Unlimited Screening"

logger = logging.getLogger("Screenings")


def find_cinema(cinema_id: int, listings: Listings) -> Cinema:
    """
    Find a cinema by id, first match wins

    Raises:
        VenueNotFound: If no cinema has the id
    """
    for cinema in listings.cinemas:
        if cinema.id == cinema_id:
            logger.debug(f"Found cinema {cinema_id}: {cinema.name}")
            return cinema
    logger.error(f"Cinema {cinema_id} not in listings")
    raise VenueNotFound(cinema_id)


def is_unlimited_screening(title: str) -> bool:
    return UNLIMITED_SCREENING_PATTERN.search(title) is not None


def find_unlimited_screenings(films: Iterable[Film]) -> List[Film]:
    """Keep only the films whose title marks an Unlimited Screening, in order"""
    screenings = [film for film in films if is_unlimited_screening(film.title)]
    logger.info(f"Found {len(screenings)} Unlimited screenings")
    return screenings


def filter_new_screenings(
    films: Sequence[Film], seen_urls: AbstractSet[str]
) -> List[Film]:
    """
    Keep the films that have at least one show not yet notified

    Args:
        films: Matched Unlimited Screenings
        seen_urls: Show URLs already recorded in the notifications file

    Returns:
        New films in their original order, each with all of its shows
    """
    new_screenings = []
    for film in films:
        if any(show.url not in seen_urls for show in film.shows):
            logger.info(f"New screening: {film.title}")
            new_screenings.append(film)
        else:
            logger.debug(f"Already notified: {film.title}")
    return new_screenings


def format_sms_title(title: str) -> str:
    """Strip the Unlimited Screening suffix for display"""
    return title.replace(UNLIMITED_SCREENING_SUFFIX, "", 1)
