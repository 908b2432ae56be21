"""Plain-text tables for the end-of-run report and the cinemas command."""

from typing import Iterable, List, Sequence

from .schema import Film, Listings, format_date, format_time


def render_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render rows as an ASCII grid with upper-cased headers"""
    headers = [header.upper() for header in headers]
    rows = [[str(cell) for cell in row] for row in rows]

    widths = [len(header) for header in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def line(cells: Sequence[str]) -> str:
        return "|" + "|".join(
            f" {cell.ljust(width)} " for cell, width in zip(cells, widths)
        ) + "|"

    lines = [border, line([h.center(w) for h, w in zip(headers, widths)]), border]
    lines.extend(line(row) for row in rows)
    if rows:
        lines.append(border)
    return "\n".join(lines)


def screening_rows(films: Iterable[Film]) -> List[List[str]]:
    """One (title, date, time) row per show; raises ParseFailure on a bad time"""
    rows = []
    for film in films:
        for show in film.shows:
            showtime = show.time()
            rows.append([film.title, format_date(showtime), format_time(showtime)])
    return rows


def screenings_table(films: Iterable[Film]) -> str:
    return render_table(["Title", "Date", "Time"], screening_rows(films))


def cinemas_table(listings: Listings) -> str:
    return render_table(
        ["ID", "Name"], [[str(cinema.id), cinema.name] for cinema in listings.cinemas]
    )
