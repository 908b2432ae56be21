#!/usr/bin/env python3
"""
Cineworld Listings Source
Fetches the syndicated listings XML and parses it into the immutable
listings model.
"""

import logging
from typing import Protocol, Union
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from .errors import NetworkFailure, ParseFailure
from .schema import Cinema, Film, Listings, Show
from .status import stage

LISTINGS_XML_URL = "https://www.cineworld.co.uk/syndication/listings.xml"

# The feed is several megabytes, allow it time to download
FETCH_TIMEOUT_SECONDS = 60

REQUEST_HEADERS = {
    "User-Agent": "unliminotify/1.0 (+https://github.com/jammystuff/unliminotify)",
    "Accept": "application/xml, text/xml",
}

logger = logging.getLogger("ListingsSource")


class ListingsSource(Protocol):
    """Anything that can produce the current listings"""

    def get_listings(self) -> Listings:
        ...


class CineworldListingsSource:
    """Listings source backed by the public Cineworld syndication feed"""

    def __init__(self, url: str = LISTINGS_XML_URL):
        self.url = url

    def get_listings(self) -> Listings:
        """Fetch and parse the listings feed, printing a status line per step"""
        with stage("Fetching listings"):
            listings_xml = self.fetch_listings_xml()
        with stage("Parsing listings"):
            return parse_listings_xml(listings_xml)

    def fetch_listings_xml(self) -> bytes:
        """
        Download the raw listings XML

        Raises:
            NetworkFailure: On any request error or non-2xx response
        """
        logger.debug(f"Fetching {self.url}")
        try:
            response = requests.get(
                self.url, headers=REQUEST_HEADERS, timeout=FETCH_TIMEOUT_SECONDS
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error fetching listings: {e.response.status_code}")
            raise NetworkFailure(f"Unable to fetch listings: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error fetching listings: {e}")
            raise NetworkFailure(f"Unable to fetch listings: {e}") from e

        logger.debug(f"Fetched {len(response.content)} bytes of listings")
        return response.content


def parse_listings_xml(listings_xml: Union[bytes, str]) -> Listings:
    """
    Parse the listings XML into a Listings tree

    Args:
        listings_xml: Raw feed document

    Returns:
        Listings with cinemas, films and shows in document order

    Raises:
        ParseFailure: If the document has no cinemas or a cinema has a bad id
    """
    try:
        soup = BeautifulSoup(listings_xml, "html.parser")
    except Exception as e:
        raise ParseFailure(f"Unable to parse listings: {e}") from e

    cinema_elements = soup.find_all("cinema")
    if not cinema_elements:
        raise ParseFailure("Unable to parse listings: no cinemas found")

    cinemas = []
    for element in cinema_elements:
        raw_id = element.get("id")
        try:
            cinema_id = int(raw_id)
        except (TypeError, ValueError):
            raise ParseFailure(
                f"Unable to parse listings: invalid cinema id {raw_id!r}"
            )

        root = element.get("root", "")
        films = tuple(
            Film(
                title=film.get("title", ""),
                shows=tuple(
                    Show(
                        url=_show_url(root, show.get("url", "")),
                        raw_time=show.get("time", ""),
                    )
                    for show in film.find_all("show")
                ),
            )
            for film in element.find_all("film")
        )
        cinemas.append(
            Cinema(id=cinema_id, name=element.get("name", ""), films=films)
        )

    logger.info(f"Parsed {len(cinemas)} cinemas from listings")
    return Listings(cinemas=tuple(cinemas))


def _show_url(root: str, url: str) -> str:
    """Resolve a show URL relative to the cinema root"""
    if root and url:
        return urljoin(root, url)
    return url
