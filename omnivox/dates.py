"""
Date normalization for portal date strings.

The portal truncates month names to three characters ("03 jan 2020",
"03-déc-2020"). Those tokens are not what a locale-aware parser expects,
so they are first mapped to the canonical abbreviation of the target locale
and only then parsed.

Locale month tables are plain dicts so that every institution can bring
its own. No process-wide `locale.setlocale` is involved.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping

from omnivox.errors import DateParseError, UnrecognizedMonthError


# ---------------------------------------------------------------------------
# Locale month tables (canonical name -> month number)
# ---------------------------------------------------------------------------

FRENCH_CA_ABBREVIATED: dict[str, int] = {
    "janv.": 1,
    "févr.": 2,
    "mars": 3,
    "avr.": 4,
    "mai": 5,
    "juin": 6,
    "juil.": 7,
    "août": 8,
    "sept.": 9,
    "oct.": 10,
    "nov.": 11,
    "déc.": 12,
}

FRENCH_CA_FULL: dict[str, int] = {
    "janvier": 1,
    "février": 2,
    "mars": 3,
    "avril": 4,
    "mai": 5,
    "juin": 6,
    "juillet": 7,
    "août": 8,
    "septembre": 9,
    "octobre": 10,
    "novembre": 11,
    "décembre": 12,
}

ENGLISH_ABBREVIATED: dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

ENGLISH_FULL: dict[str, int] = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _lookup_month(token: str, month_map: Mapping[str, str]) -> str:
    """
    Return the canonical month for a truncated token.

    The longest table key that prefixes the token wins, so a table can
    carry "juin"/"juil" next to three-letter keys.
    """
    lowered = token.lower()
    best = ""
    for key in month_map:
        if len(key) >= 3 and lowered.startswith(key.lower()) and len(key) > len(best):
            best = key
    if not best:
        raise UnrecognizedMonthError(token)
    return month_map[best]


def normalize_date(raw: str, month_map: Mapping[str, str]) -> str:
    """
    Replace the month of a `day month year` triple with its canonical form.

    Space-delimited input is tried first; if that yields a single token the
    string is split on hyphens instead. The result keeps the delimiter that
    was present in the input:

        "03 jan 2020"  -> "03 janv. 2020"
        "03-déc-2020"  -> "03-déc.-2020"
    """
    text = raw.strip()
    delimiter = " "
    parts = text.split()
    if len(parts) == 1:
        delimiter = "-"
        parts = text.split("-")

    if len(parts) != 3:
        raise DateParseError(f"Expected 'day month year', got {raw!r}")

    day, month, year = parts
    return delimiter.join([day, _lookup_month(month, month_map), year])


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_date(text: str, pattern: str, month_names: Mapping[str, int]) -> datetime:
    """
    Parse `text` with a strftime-style `pattern` whose month is %b or %B.

    The month name is looked up in `month_names` (one locale's table) and
    swapped for its number before handing the string to `strptime`, which
    keeps parsing independent from the process locale.
    """
    lowered = text.lower()
    numeric = None
    # longest names first: "mars" must not be read as "mar"
    for name in sorted(month_names, key=len, reverse=True):
        idx = lowered.find(name.lower())
        if idx < 0:
            continue
        numeric = f"{text[:idx]}{month_names[name]:02d}{text[idx + len(name):]}"
        break

    if numeric is None:
        raise DateParseError(f"No month name found in {text!r}")

    fmt = pattern.replace("%B", "%m").replace("%b", "%m")
    try:
        return datetime.strptime(numeric.strip(), fmt)
    except ValueError as exc:
        raise DateParseError(f"Could not parse {text!r} with {pattern!r}") from exc


def normalize_and_parse(
    raw: str,
    month_map: Mapping[str, str],
    pattern: str,
    month_names: Mapping[str, int],
) -> datetime:
    """Shortcut used by the adapters: normalize the month, then parse."""
    return parse_date(normalize_date(raw, month_map), pattern, month_names)
