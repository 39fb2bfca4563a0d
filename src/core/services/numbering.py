"""
Invoice numbering.

Canonical format is ``{year}{seq:04d}`` (``20240007``), sequence starting at
1 each calendar year and growing past four digits when needed
(``202410000``). Numbers in any other shape, including the older
``{year}-{seq:03d}`` form, are not used for sequencing.
"""

import re
from collections.abc import Iterable

_NUMBER_RE = re.compile(r"^(?P<year>\d{4})(?P<seq>\d{4,})$")


def format_invoice_number(year: int, seq: int) -> str:
    """Render year and sequence in the canonical format."""
    return f"{year}{seq:04d}"


def parse_invoice_number(number: str) -> tuple[int, int] | None:
    """
    Split a canonical invoice number into (year, sequence).

    Returns None for anything that is not in canonical form.
    """
    match = _NUMBER_RE.match((number or "").strip())
    if match is None:
        return None
    seq = int(match.group("seq"))
    if seq == 0:
        return None
    return int(match.group("year")), seq


def malformed_invoice_numbers(numbers: Iterable[str]) -> list[str]:
    """Numbers that cannot take part in sequencing."""
    return [n for n in numbers if parse_invoice_number(n) is None]


def next_invoice_number(existing_numbers: Iterable[str], year: int) -> str:
    """
    Derive the next invoice number for ``year``.

    Takes the numeric maximum of this year's sequences, so ``20240100``
    beats ``20240099`` regardless of string ordering. Other years and
    malformed numbers are skipped.

    The number is not reserved; uniqueness is enforced when the invoice is
    written.
    """
    max_seq = 0
    for number in existing_numbers:
        parsed = parse_invoice_number(number)
        if parsed is None:
            continue
        number_year, seq = parsed
        if number_year == year and seq > max_seq:
            max_seq = seq
    return format_invoice_number(year, max_seq + 1)
