"""Rendering of cell values through spreadsheet number format codes."""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

from .sections import (
    FormatOptions,
    ParsedNumberFormat,
    is_12_hour_time,
    parse_full_number_format_string,
)

GENERAL_FORMAT = "general"
STRING_FORMAT = "@"

MIN_NON_SCIENTIFIC_NUMBER = 1e-9
MAX_NON_SCIENTIFIC_NUMBER = 1e11

_NANOS_PER_DAY = 24 * 60 * 60 * 1_000_000_000
_EPOCH_1900 = datetime(1899, 12, 30)
_EPOCH_1904 = datetime(1904, 1, 1)

_MONTHS = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)
_WEEKDAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

# Spreadsheet date tokens and the layout tokens they become, applied once each
# in this order.
_TIME_REPLACEMENTS = (
    ("YYYY", "2006"), ("yyyy", "2006"),
    ("YY", "06"), ("yy", "06"),
    ("MMMM", "%%%%"), ("mmmm", "%%%%"),
    ("DDDD", "&&&&"), ("dddd", "&&&&"),
    ("DD", "02"), ("dd", "02"),
    ("D", "2"), ("d", "2"),
    ("MMM", "Jan"), ("mmm", "Jan"),
    ("MMSS", "0405"), ("mmss", "0405"),
    ("SS", "05"), ("ss", "05"),
    ("MM:", "04:"), ("mm:", "04:"),
    (":MM", ":04"), (":mm", ":04"),
    ("MM", "01"), ("mm", "01"),
    ("AM/PM", "pm"), ("am/pm", "pm"),
    ("M/", "1/"), ("m/", "1/"),
    ("%%%%", "January"),
    ("&&&&", "Monday"),
)

_ZONE_TOKENS = {
    "-070000": "+000000", "-07:00:00": "+00:00:00", "-0700": "+0000",
    "-07:00": "+00:00", "-07": "+00",
    "Z070000": "Z", "Z07:00:00": "Z", "Z0700": "Z", "Z07:00": "Z", "Z07": "Z",
}


class CellType(Enum):
    """The kind of value a cell holds."""

    STRING = 0
    STRING_FORMULA = 1
    NUMERIC = 2
    BOOL = 3
    INLINE = 4
    ERROR = 5
    DATE = 6


class FormattedValueError(ValueError):
    """A value could not be formatted; ``value`` holds the raw fallback text."""

    def __init__(self, message: str, value: str) -> None:
        super().__init__(message)
        self.value = value


def _parse_float(text: str) -> float:
    """Parse a number strictly: no surrounding blanks, no digit separators."""
    if text != text.strip() or "_" in text:
        raise ValueError(f"invalid number {text!r}")
    number = float(text)
    if math.isinf(number) and "inf" not in text.lower():
        raise ValueError(f"number {text!r} out of range")
    return number


def _special_float(number: float) -> Optional[str]:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    return None


def _shortest_fixed(number: float) -> str:
    special = _special_float(number)
    if special is not None:
        return special
    return format(Decimal(repr(number)).normalize(), "f")


def _shortest_exponent(number: float) -> str:
    special = _special_float(number)
    if special is not None:
        return special
    sign, digits, exponent = Decimal(repr(number)).normalize().as_tuple()
    text = "".join(str(d) for d in digits)
    mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
    power = exponent + len(text) - 1
    return f"{'-' if sign else ''}{mantissa}E{power:+03d}"


def _fixed(number: float, places: int) -> str:
    special = _special_float(number)
    return special if special is not None else f"{number:.{places}f}"


def _exponent(number: float) -> str:
    special = _special_float(number)
    return special if special is not None else f"{number:e}"


def general_numeric_scientific(value: str, allow_scientific: bool = True) -> str:
    """Render a number the way the General format shows it."""
    if value.strip() == "":
        return ""
    try:
        number = _parse_float(value)
    except ValueError as exc:
        raise FormattedValueError(str(exc), value) from exc
    if allow_scientific:
        magnitude = abs(number)
        if (0 < magnitude < MIN_NON_SCIENTIFIC_NUMBER) or (
            magnitude >= MAX_NON_SCIENTIFIC_NUMBER
        ):
            return _shortest_exponent(number)
    return _shortest_fixed(number)


def _excel_time(serial: float, date1904: bool) -> tuple[datetime, int]:
    """Return the moment for a serial date and its nanosecond-of-second."""
    whole = int(serial)
    part = int(_NANOS_PER_DAY * (serial - whole))
    total = whole * _NANOS_PER_DAY + part
    epoch = _EPOCH_1904 if date1904 else _EPOCH_1900
    moment = epoch + timedelta(microseconds=total // 1000)
    return moment, total % 1_000_000_000


def _next_token(rest: str) -> tuple[Optional[str], int]:
    """Find the layout token at the start of ``rest``; None means a literal."""
    ch = rest[0]
    if ch == "J" and rest.startswith("Jan"):
        return ("January", 7) if rest.startswith("January") else ("Jan", 3)
    if ch == "M":
        if rest.startswith("Mon"):
            return ("Monday", 6) if rest.startswith("Monday") else ("Mon", 3)
        if rest.startswith("MST"):
            return "MST", 3
    if ch == "0" and len(rest) > 1 and rest[1] in "123456":
        return rest[:2], 2
    if ch == "1":
        return ("15", 2) if rest.startswith("15") else ("1", 1)
    if ch == "2":
        return ("2006", 4) if rest.startswith("2006") else ("2", 1)
    if ch == "_" and rest.startswith("_2") and not rest.startswith("_2006"):
        return "_2", 2
    if ch in "345":
        return ch, 1
    if rest.startswith("PM") or rest.startswith("pm"):
        return rest[:2], 2
    if ch in "-Z":
        for token in _ZONE_TOKENS:
            if rest.startswith(token):
                return token, len(token)
    if ch == "." and len(rest) > 1 and rest[1] in "09":
        digit = rest[1]
        end = 1
        while end < len(rest) and rest[end] == digit:
            end += 1
        if not (end < len(rest) and rest[end].isdigit() and rest[end].isascii()):
            return rest[:end], end
    return None, 1


def _render_token(token: str, moment: datetime, nanos: int) -> str:
    hour12 = moment.hour % 12 or 12
    simple = {
        "January": _MONTHS[moment.month - 1],
        "Jan": _MONTHS[moment.month - 1][:3],
        "Monday": _WEEKDAYS[moment.weekday()],
        "Mon": _WEEKDAYS[moment.weekday()][:3],
        "MST": "UTC",
        "01": f"{moment.month:02d}",
        "02": f"{moment.day:02d}",
        "03": f"{hour12:02d}",
        "04": f"{moment.minute:02d}",
        "05": f"{moment.second:02d}",
        "06": f"{moment.year % 100:02d}",
        "15": f"{moment.hour:02d}",
        "1": str(moment.month),
        "2006": f"{moment.year:04d}",
        "2": str(moment.day),
        "_2": f"{moment.day:>2d}",
        "3": str(hour12),
        "4": str(moment.minute),
        "5": str(moment.second),
        "PM": "PM" if moment.hour >= 12 else "AM",
        "pm": "pm" if moment.hour >= 12 else "am",
    }
    if token in simple:
        return simple[token]
    if token in _ZONE_TOKENS:
        return _ZONE_TOKENS[token]
    digits = f"{nanos:09d}"[: len(token) - 1]
    if token[1] == "0":
        return "." + digits
    digits = digits.rstrip("0")
    return "." + digits if digits else ""


def _render_layout(layout: str, moment: datetime, nanos: int) -> str:
    out = []
    i = 0
    while i < len(layout):
        token, length = _next_token(layout[i:])
        out.append(
            layout[i : i + length] if token is None
            else _render_token(token, moment, nanos)
        )
        i += length
    return "".join(out)


def format_time(num_fmt: str, value: str, date1904: bool = False) -> str:
    """Render a serial date number through a date/time format code."""
    try:
        serial = _parse_float(value)
        moment, nanos = _excel_time(serial, date1904)
    except (ValueError, OverflowError) as exc:
        raise FormattedValueError(str(exc), value) from exc

    layout = num_fmt
    if is_12_hour_time(layout):
        layout = layout.replace("hh", "03", 1).replace("h", "3", 1)
    else:
        layout = layout.replace("hh", "15", 1).replace("h", "15", 1)
    for old, new in _TIME_REPLACEMENTS:
        layout = layout.replace(old, new, 1)
    if moment.hour < 1:
        for old, new in (("]:", "]"), ("[03]", ""), ("[3]", ""), ("[15]", "")):
            layout = layout.replace(old, new, 1)
    else:
        layout = layout.replace("[3]", "3", 1).replace("[15]", "15", 1)
    return _render_layout(layout, moment, nanos)


def _choose_section(parsed: ParsedNumberFormat, number: float) -> tuple[FormatOptions, float]:
    if number > 0:
        section = parsed.positive_format
    elif number < 0:
        if parsed.negative_format_expects_positive:
            number = abs(number)
        section = parsed.negative_format
    else:
        section = parsed.zero_format
    assert section is not None
    return section, number


_FIXED_PLACES = {
    "0": 0, "#,##0": 0,
    "0.0": 1, "#,##0.0": 1,
    "0.00": 2, "#,##0.00": 2,
    "0.000": 3, "#,##0.000": 3,
    "0.0000": 4, "#,##0.0000": 4,
}


def format_numeric(parsed: ParsedNumberFormat, value: str, date1904: bool = False) -> str:
    """Render a numeric cell value through a parsed number format."""
    raw = value.strip()
    if raw == "":
        return ""
    if parsed.is_time_format:
        return format_time(parsed.num_fmt, raw, date1904)
    try:
        number = _parse_float(raw)
    except ValueError as exc:
        raise FormattedValueError(str(exc), raw) from exc

    section, number = _choose_section(parsed, number)
    if section.show_percent:
        number *= 100

    reduced = section.reduced_format_string
    if reduced == GENERAL_FORMAT:
        try:
            return general_numeric_scientific(value, True)
        except FormattedValueError:
            return raw
    if reduced == STRING_FORMAT:
        body = value
    elif reduced in _FIXED_PLACES:
        body = _fixed(number, _FIXED_PLACES[reduced])
    elif reduced in ("0.00e+00", "##0.0e+0"):
        body = _exponent(number)
    elif reduced == "":
        body = ""
    else:
        return raw
    return section.prefix + body + section.suffix


def _plain_text(rich_text: Iterable[object]) -> str:
    return "".join(
        run if isinstance(run, str) else str(getattr(run, "text", run))
        for run in rich_text
    )


def format_value(
    num_fmt: str,
    value: str,
    cell_type: CellType = CellType.STRING,
    rich_text: Optional[Iterable[object]] = None,
    date1904: bool = False,
) -> str:
    """Render a cell's value through its number format code.

    Raises FormattedValueError, carrying the raw value, when the value cannot
    be formatted.
    """
    if cell_type is CellType.ERROR or cell_type is CellType.DATE:
        return value
    if cell_type is CellType.BOOL:
        if value == "0":
            return "FALSE"
        if value == "1":
            return "TRUE"
        raise FormattedValueError("invalid value in bool cell", value)

    parsed = parse_full_number_format_string(num_fmt)
    if cell_type in (CellType.STRING, CellType.INLINE, CellType.STRING_FORMULA):
        runs = list(rich_text) if rich_text is not None else []
        text = _plain_text(runs) if runs else value
        section = parsed.text_format
        assert section is not None
        reduced = section.reduced_format_string
        if reduced == GENERAL_FORMAT:
            return text
        if reduced == STRING_FORMAT:
            return section.prefix + text + section.suffix
        if reduced == "":
            return section.prefix + section.suffix
        raise FormattedValueError(
            "invalid or unsupported format, unsupported string format", text
        )
    if cell_type is CellType.NUMERIC:
        return format_numeric(parsed, value, date1904)
    raise FormattedValueError("unknown cell type", value)