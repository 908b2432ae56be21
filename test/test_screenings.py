#!/usr/bin/env python3
"""
Test suite for cinema selection, Unlimited Screening matching and deduplication.
"""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from unliminotify.errors import VenueNotFound
from unliminotify.schema import Cinema, Film, Listings, Show
from unliminotify.screenings import (
    filter_new_screenings,
    find_cinema,
    find_unlimited_screenings,
    format_sms_title,
)


def make_film(title, *urls):
    return Film(
        title=title,
        shows=tuple(Show(url=url, raw_time="Sat 1 Jun 19:30") for url in urls),
    )


class TestFindCinema(unittest.TestCase):
    """Test cases for cinema lookup"""

    def setUp(self):
        self.listings = Listings(
            cinemas=(
                Cinema(id=1, name="Aberdeen"),
                Cinema(id=2, name="Ashford"),
                Cinema(id=2, name="Ashford Duplicate"),
            )
        )

    def test_finds_cinema_by_id(self):
        self.assertEqual(find_cinema(1, self.listings).name, "Aberdeen")

    def test_first_match_wins(self):
        """Test that duplicate ids resolve to the first cinema"""
        self.assertEqual(find_cinema(2, self.listings).name, "Ashford")

    def test_missing_cinema_raises(self):
        with self.assertRaises(VenueNotFound) as ctx:
            find_cinema(99, self.listings)
        self.assertEqual(ctx.exception.cinema_id, 99)
        self.assertIn("99", str(ctx.exception))

    def test_empty_listings_raise(self):
        with self.assertRaises(VenueNotFound):
            find_cinema(1, Listings())


class TestFindUnlimitedScreenings(unittest.TestCase):
    """Test cases for Unlimited Screening title matching"""

    def test_matches_substring_anywhere(self):
        films = [
            make_film("Dune : Unlimited Screening", "u1"),
            make_film("Unlimited Screening - Secret Film", "u2"),
            make_film("(2D) Unlimited Screenings Weekend", "u3"),
        ]
        self.assertEqual(find_unlimited_screenings(films), films)

    def test_drops_non_matching_films_entirely(self):
        films = [
            make_film("Dune", "u1", "u2"),
            make_film("Wicked : Unlimited Screening", "u3"),
            make_film("Unlimited", "u4"),
        ]
        self.assertEqual(find_unlimited_screenings(films), [films[1]])

    def test_match_is_case_sensitive(self):
        films = [make_film("Dune : unlimited screening", "u1")]
        self.assertEqual(find_unlimited_screenings(films), [])

    def test_preserves_order(self):
        films = [
            make_film("B : Unlimited Screening", "u1"),
            make_film("Other", "u2"),
            make_film("A : Unlimited Screening", "u3"),
        ]
        titles = [film.title for film in find_unlimited_screenings(films)]
        self.assertEqual(titles, ["B : Unlimited Screening", "A : Unlimited Screening"])


class TestFilterNewScreenings(unittest.TestCase):
    """Test cases for film-level deduplication"""

    def test_all_new_when_nothing_seen(self):
        films = [make_film("A", "u1"), make_film("B", "u2")]
        self.assertEqual(filter_new_screenings(films, frozenset()), films)

    def test_fully_seen_film_is_skipped(self):
        films = [make_film("A", "u1", "u2"), make_film("B", "u3")]
        new = filter_new_screenings(films, {"u1", "u2"})
        self.assertEqual(new, [films[1]])

    def test_one_unseen_show_resurfaces_whole_film(self):
        """Test that a partly seen film is new with all of its shows"""
        film = make_film("A", "u1", "u2")
        new = filter_new_screenings([film], {"u1"})
        self.assertEqual(new, [film])
        self.assertEqual([show.url for show in new[0].shows], ["u1", "u2"])

    def test_film_without_shows_is_never_new(self):
        self.assertEqual(filter_new_screenings([make_film("A")], frozenset()), [])


class TestFormatSmsTitle(unittest.TestCase):
    """Test cases for SMS title cleaning"""

    def test_strips_suffix(self):
        self.assertEqual(format_sms_title("Dune : Unlimited Screening"), "Dune")

    def test_strips_only_first_occurrence(self):
        self.assertEqual(
            format_sms_title("A : Unlimited Screening : Unlimited Screening"),
            "A : Unlimited Screening",
        )

    def test_leaves_other_titles_alone(self):
        self.assertEqual(
            format_sms_title("Unlimited Screening: Dune"), "Unlimited Screening: Dune"
        )


if __name__ == "__main__":
    unittest.main()
